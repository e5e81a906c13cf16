# src/cryptoquote/interfaces/api/deps.py
from __future__ import annotations

from fastapi import HTTPException, Request

from cryptoquote.application.services.price_service import PriceService


def get_price_service(request: Request) -> PriceService:
    """Dependency to get the PriceService instance from the app state."""
    services = getattr(request.app.state, "services", None) or {}
    service = services.get("price_service")
    if not service:
        raise HTTPException(status_code=503, detail="Price service is currently unavailable.")
    return service
