"""
Ticker symbol handling.

Users talk in tickers ("BTC", "eth"), CoinGecko talks in coin ids ("bitcoin").
Only the assets listed in ``_GECKO_IDS`` are served.
"""
from __future__ import annotations

from typing import Dict, List, Optional

_GECKO_IDS: Dict[str, str] = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "SOL": "solana",
    "ADA": "cardano",
    "AVAX": "avalanche-2",
    "DOGE": "dogecoin",
    "MATIC": "polygon-pos",
}

SUPPORTED_SYMBOLS: List[str] = list(_GECKO_IDS)


def normalize_symbol(symbol: Optional[str]) -> str:
    return (symbol or "").strip().upper()


def to_gecko_id(symbol: Optional[str]) -> Optional[str]:
    """Maps a ticker to its CoinGecko id, or ``None`` if the ticker is not supported."""
    return _GECKO_IDS.get(normalize_symbol(symbol))


def parse_symbols(raw: Optional[str]) -> List[str]:
    """Splits a comma-separated query value ("btc, eth,,SOL") into clean tickers."""
    return [normalize_symbol(part) for part in (raw or "").split(",") if part.strip()]
