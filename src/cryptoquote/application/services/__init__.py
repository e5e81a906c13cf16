from .price_service import PriceService

__all__ = [
    "PriceService",
]
