# src/cryptoquote/infrastructure/pricing/coingecko_client.py
import logging
import asyncio
import time
import httpx
from typing import Any, Dict, List, Optional, Sequence

from cryptoquote.domain.errors import PriceProviderError
from cryptoquote.infrastructure.monitoring.metrics import UPSTREAM_LATENCY, UPSTREAM_REQUESTS

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"


class CoinGeckoClient:
    """
    Thin async client for the two CoinGecko endpoints we need: simple spot
    prices and the daily market chart. Failures are raised as PriceProviderError;
    caching is the caller's business.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        api_key: Optional[str] = None,
        min_request_interval: float = 0.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        headers = {"accept": "application/json"}
        if api_key:
            headers["x-cg-demo-api-key"] = api_key
        self.base_url = base_url.rstrip("/")
        self._headers = headers
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._request_interval = min_request_interval
        self._last_request_time = float("-inf")
        self._lock = asyncio.Lock()

    async def _wait_for_rate_limit(self):
        """Enforces a delay between requests when an interval is configured."""
        if self._request_interval <= 0:
            return
        async with self._lock:
            time_since_last = time.monotonic() - self._last_request_time
            if time_since_last < self._request_interval:
                wait_time = self._request_interval - time_since_last
                log.debug(f"CoinGecko rate limit: waiting {wait_time:.2f}s")
                await asyncio.sleep(wait_time)
            self._last_request_time = time.monotonic()

    async def _get_json(self, endpoint: str, path: str, params: Dict[str, Any]) -> Any:
        await self._wait_for_rate_limit()
        url = f"{self.base_url}{path}"
        start = time.perf_counter()
        try:
            response = await self._client.get(url, params=params, headers=self._headers)
        except httpx.HTTPError as e:
            UPSTREAM_REQUESTS.labels(endpoint=endpoint, outcome="transport_error").inc()
            log.error(f"CoinGecko request to {path} failed: {e}")
            raise PriceProviderError(f"CoinGecko request failed: {e}") from e
        finally:
            UPSTREAM_LATENCY.labels(endpoint=endpoint).observe(time.perf_counter() - start)

        if response.status_code == 429:
            UPSTREAM_REQUESTS.labels(endpoint=endpoint, outcome="rate_limited").inc()
            log.warning(f"CoinGecko 429 (Too Many Requests) on {path}.")
            raise PriceProviderError("CoinGecko rate limit exceeded", status_code=429)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            UPSTREAM_REQUESTS.labels(endpoint=endpoint, outcome="http_error").inc()
            log.error(f"CoinGecko HTTP error on {path}: {e.response.status_code}")
            raise PriceProviderError(
                f"CoinGecko returned HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            UPSTREAM_REQUESTS.labels(endpoint=endpoint, outcome="bad_payload").inc()
            log.error(f"CoinGecko returned a non-JSON body on {path}")
            raise PriceProviderError("CoinGecko returned an invalid JSON body") from e

        UPSTREAM_REQUESTS.labels(endpoint=endpoint, outcome="ok").inc()
        return data

    async def fetch_simple_prices(self, ids: Sequence[str]) -> Dict[str, Dict[str, float]]:
        """
        Spot USD prices for the given coin ids, e.g. {"bitcoin": {"usd": 50000.0}}.
        Ids the provider does not know are simply missing from the result.
        """
        params = {"ids": ",".join(ids), "vs_currencies": "usd"}
        data = await self._get_json("simple_price", "/simple/price", params)
        if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
            raise PriceProviderError("Unexpected simple/price payload from CoinGecko")
        return data

    async def fetch_daily_history(self, coin_id: str, days: int) -> List[List[float]]:
        """
        [[timestamp_ms, price], ...] for the last ``days`` days. Missing series -> [].
        """
        params = {"vs_currency": "usd", "days": days}
        data = await self._get_json("market_chart", f"/coins/{coin_id}/market_chart", params)
        prices = data.get("prices") if isinstance(data, dict) else None
        if prices is None:
            return []
        if not isinstance(prices, list) or not all(isinstance(p, list) and len(p) >= 2 for p in prices):
            raise PriceProviderError("Unexpected market_chart payload from CoinGecko")
        return prices

    async def aclose(self) -> None:
        await self._client.aclose()
