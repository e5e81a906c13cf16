# src/cryptoquote/domain/errors.py
from typing import Optional


class CryptoQuoteError(Exception):
    """Base class for all errors raised by the service layer."""


class InvalidRequestError(CryptoQuoteError):
    """The caller asked for something we cannot serve (missing or unsupported symbol)."""


class PriceProviderError(CryptoQuoteError):
    """The upstream price provider failed or returned something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
