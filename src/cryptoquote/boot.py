# File: src/cryptoquote/boot.py
import logging
from typing import Any, Dict, Optional

from cryptoquote.config import Settings, settings as default_settings
from cryptoquote.application.services import PriceService
from cryptoquote.infrastructure.cache import TTLCache
from cryptoquote.infrastructure.pricing.coingecko_client import CoinGeckoClient

log = logging.getLogger(__name__)


def build_services(settings: Optional[Settings] = None, client: Optional[CoinGeckoClient] = None) -> Dict[str, Any]:
    """Build and wire all application services. Called once at startup."""
    settings = settings or default_settings
    log.info("Building application services...")
    services: Dict[str, Any] = {}

    if client is None:
        client = CoinGeckoClient(
            base_url=settings.COINGECKO_BASE_URL,
            timeout=settings.COINGECKO_TIMEOUT,
            api_key=settings.COINGECKO_API_KEY,
            min_request_interval=settings.COINGECKO_MIN_REQUEST_INTERVAL,
        )
    services["coingecko_client"] = client
    services["spot_cache"] = TTLCache(settings.SPOT_CACHE_TTL_MS)
    services["history_cache"] = TTLCache(settings.HISTORY_CACHE_TTL_MS)
    services["price_service"] = PriceService(
        client=client,
        spot_cache=services["spot_cache"],
        history_cache=services["history_cache"],
        default_days=settings.MA_DEFAULT_DAYS,
        min_days=settings.MA_MIN_DAYS,
        max_days=settings.MA_MAX_DAYS,
    )

    log.info(
        "Services ready (spot TTL %d ms, history TTL %d ms).",
        settings.SPOT_CACHE_TTL_MS,
        settings.HISTORY_CACHE_TTL_MS,
    )
    return services


async def close_services(services: Dict[str, Any]) -> None:
    client = services.get("coingecko_client")
    if client is not None:
        await client.aclose()
