# src/cryptoquote/application/services/price_service.py
"""
Spot prices and simple moving averages on top of CoinGecko, with two
short-lived caches in front of the provider.

Cache lookups and writes are synchronous, so concurrent requests only
interleave while awaiting the provider. Two requests that miss on the same
key at the same time will both fetch; the later ``set`` wins.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from cryptoquote.domain.errors import InvalidRequestError, PriceProviderError
from cryptoquote.domain.symbols import normalize_symbol, to_gecko_id
from cryptoquote.infrastructure.cache import TTLCache
from cryptoquote.infrastructure.monitoring.metrics import CACHE_LOOKUPS
from cryptoquote.infrastructure.pricing.coingecko_client import CoinGeckoClient

log = logging.getLogger(__name__)

SpotPriceMap = Dict[str, Dict[str, float]]
PriceSeries = List[List[float]]


@dataclass
class PriceItem:
    symbol: str
    usd: Optional[float]


@dataclass
class SpotQuote:
    source: str  # "live" | "cache"
    data: List[PriceItem] = field(default_factory=list)


@dataclass
class MovingAverage:
    symbol: str
    days: int
    points: int
    sma: Optional[float]


def _price_items(data: SpotPriceMap, symbols: Sequence[str], ids: Sequence[str]) -> List[PriceItem]:
    try:
        return [
            PriceItem(symbol=sym, usd=_as_price((data.get(coin_id) or {}).get("usd")))
            for sym, coin_id in zip(symbols, ids)
        ]
    except (AttributeError, TypeError, ValueError) as e:
        raise PriceProviderError(f"Malformed spot price payload: {e}") from e


def _closes(prices: PriceSeries) -> List[float]:
    try:
        return [_as_close(point[1]) for point in prices]
    except (IndexError, KeyError, TypeError, ValueError) as e:
        raise PriceProviderError(f"Malformed price history payload: {e}") from e


def _as_close(value) -> float:
    if value is None or isinstance(value, bool):
        raise TypeError(f"not a price: {value!r}")
    return float(value)


def _as_price(value) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError(f"not a price: {value!r}")
    return float(value)


def simple_moving_average(closes: Sequence[float]) -> Optional[float]:
    if not closes:
        return None
    return round(sum(closes) / len(closes), 4)


class PriceService:
    def __init__(
        self,
        client: CoinGeckoClient,
        spot_cache: TTLCache[SpotPriceMap],
        history_cache: TTLCache[PriceSeries],
        default_days: int = 7,
        min_days: int = 2,
        max_days: int = 90,
    ):
        self.client = client
        self.spot_cache = spot_cache
        self.history_cache = history_cache
        self.default_days = default_days
        self.min_days = min_days
        self.max_days = max_days

    def clamp_days(self, days: Optional[int]) -> int:
        if days is None:
            days = self.default_days
        return max(self.min_days, min(self.max_days, int(days)))

    async def get_spot_prices(self, symbols: Sequence[str]) -> SpotQuote:
        """
        USD spot price for every requested ticker, in request order.
        Raises InvalidRequestError for an empty list or an unsupported ticker.
        """
        symbols = [normalize_symbol(s) for s in symbols if normalize_symbol(s)]
        if not symbols:
            raise InvalidRequestError("Provide symbols, e.g. /prices?symbols=BTC,ETH")

        ids = [to_gecko_id(s) for s in symbols]
        if any(i is None for i in ids):
            raise InvalidRequestError("One or more symbols not supported.")

        cache_key = ",".join(sorted(set(ids)))
        source = "cache"
        data = self.spot_cache.get(cache_key)
        if data is not None:
            CACHE_LOOKUPS.labels(cache="spot", result="hit").inc()
        else:
            CACHE_LOOKUPS.labels(cache="spot", result="miss").inc()
            log.debug("Spot cache miss for %s", cache_key)
            data = await self.client.fetch_simple_prices(sorted(set(ids)))
            source = "live"

        # Read the payload before caching it so a malformed reply is never stored.
        items = _price_items(data, symbols, ids)
        if source == "live":
            self.spot_cache.set(cache_key, data)
        return SpotQuote(source=source, data=items)

    async def get_moving_average(self, symbol: Optional[str], days: Optional[int] = None) -> MovingAverage:
        """
        Simple moving average of the daily USD price over ``days`` (clamped to the
        configured window).
        """
        symbol = normalize_symbol(symbol)
        if not symbol:
            raise InvalidRequestError("Provide symbol, e.g. /ma?symbol=BTC&days=7")
        days = self.clamp_days(days)

        coin_id = to_gecko_id(symbol)
        if coin_id is None:
            raise InvalidRequestError("Symbol not supported")

        cache_key = f"{coin_id}:{days}"
        prices = self.history_cache.get(cache_key)
        if prices is not None:
            CACHE_LOOKUPS.labels(cache="history", result="hit").inc()
            closes = _closes(prices)
        else:
            CACHE_LOOKUPS.labels(cache="history", result="miss").inc()
            log.debug("History cache miss for %s", cache_key)
            prices = await self.client.fetch_daily_history(coin_id, days)
            closes = _closes(prices)
            self.history_cache.set(cache_key, prices)

        return MovingAverage(
            symbol=symbol,
            days=days,
            points=len(prices),
            sma=simple_moving_average(closes),
        )
