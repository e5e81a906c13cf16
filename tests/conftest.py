# tests/conftest.py
"""
Fixtures and test setup for the Pytest suite.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from cryptoquote.application.services.price_service import PriceService
from cryptoquote.infrastructure.cache import TTLCache
from cryptoquote.infrastructure.pricing.coingecko_client import CoinGeckoClient


class FakeClock:
    """A controllable clock in seconds; advance it with ``advance_ms``."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_client() -> MagicMock:
    """A CoinGeckoClient stand-in; no network calls are made."""
    client = MagicMock(spec=CoinGeckoClient)
    client.fetch_simple_prices = AsyncMock(
        return_value={"bitcoin": {"usd": 50000.0}, "ethereum": {"usd": 3000.0}}
    )
    client.fetch_daily_history = AsyncMock(
        return_value=[[1, 100.0], [2, 110.0], [3, 120.0], [4, 130.0]]
    )
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def spot_cache(clock: FakeClock) -> TTLCache:
    return TTLCache(30_000, clock=clock)


@pytest.fixture
def history_cache(clock: FakeClock) -> TTLCache:
    return TTLCache(300_000, clock=clock)


@pytest.fixture
def price_service(mock_client, spot_cache, history_cache) -> PriceService:
    return PriceService(client=mock_client, spot_cache=spot_cache, history_cache=history_cache)


@pytest.fixture
def services(mock_client, spot_cache, history_cache, price_service):
    return {
        "coingecko_client": mock_client,
        "spot_cache": spot_cache,
        "history_cache": history_cache,
        "price_service": price_service,
    }
