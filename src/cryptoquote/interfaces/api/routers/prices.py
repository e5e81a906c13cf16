# File: src/cryptoquote/interfaces/api/routers/prices.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from cryptoquote.application.services.price_service import PriceService
from cryptoquote.domain.errors import PriceProviderError
from cryptoquote.domain.symbols import SUPPORTED_SYMBOLS, parse_symbols
from cryptoquote.interfaces.api.deps import get_price_service
from cryptoquote.interfaces.api.schemas import ErrorOut, MovingAverageOut, PricesOut, SymbolsOut

log = logging.getLogger(__name__)
router = APIRouter(tags=["prices"])

_ERROR_RESPONSES = {400: {"model": ErrorOut}, 500: {"model": ErrorOut}}


def _provider_failure(message: str, exc: PriceProviderError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": message, "detail": str(exc)})


# e.g. /prices?symbols=BTC,ETH,SOL
@router.get("/prices", response_model=PricesOut, responses=_ERROR_RESPONSES)
async def get_prices(
    symbols: Optional[str] = Query(default=None, description="Comma-separated tickers"),
    service: PriceService = Depends(get_price_service),
):
    try:
        quote = await service.get_spot_prices(parse_symbols(symbols))
    except PriceProviderError as e:
        log.error("Failed to fetch prices for %s: %s", symbols, e)
        return _provider_failure("Failed to fetch prices", e)
    return PricesOut.model_validate(quote)


# e.g. /ma?symbol=BTC&days=7
@router.get("/ma", response_model=MovingAverageOut, responses=_ERROR_RESPONSES)
async def get_moving_average(
    symbol: Optional[str] = Query(default=None),
    days: Optional[int] = Query(default=None, description="Window in days, clamped to the configured range"),
    service: PriceService = Depends(get_price_service),
):
    try:
        result = await service.get_moving_average(symbol, days)
    except PriceProviderError as e:
        log.error("Failed to compute moving average for %s: %s", symbol, e)
        return _provider_failure("Failed to compute moving average", e)
    return MovingAverageOut.model_validate(result)


@router.get("/symbols", response_model=SymbolsOut)
def get_symbols():
    return SymbolsOut(symbols=SUPPORTED_SYMBOLS)
