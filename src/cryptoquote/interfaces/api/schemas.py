# --- START OF FILE: src/cryptoquote/interfaces/api/schemas.py ---
from __future__ import annotations
from typing import List, Literal
from pydantic import BaseModel, ConfigDict


class PriceItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    symbol: str
    usd: float | None = None


class PricesOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    source: Literal["live", "cache"]
    data: List[PriceItemOut]


class MovingAverageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    symbol: str
    days: int
    points: int
    sma: float | None = None


class SymbolsOut(BaseModel):
    symbols: List[str]


class ErrorOut(BaseModel):
    error: str
    detail: str | None = None
# --- END OF FILE ---
