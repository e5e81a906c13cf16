# File: src/cryptoquote/interfaces/api/main.py
import logging
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware

from cryptoquote import __version__
from cryptoquote.boot import build_services, close_services
from cryptoquote.config import Settings, settings as default_settings
from cryptoquote.domain.errors import InvalidRequestError
from cryptoquote.interfaces.api.metrics import router as metrics_router
from cryptoquote.interfaces.api.routers import prices as prices_router
from cryptoquote.logging_conf import setup_logging

log = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def create_app(services: Optional[Dict[str, Any]] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the API. Pass ``services`` to run against pre-built (e.g. test) services;
    otherwise they are built from settings on startup.
    """
    settings = settings or default_settings
    setup_logging()

    app = FastAPI(title="CryptoQuote API", version=__version__)
    app.state.services = services
    app.state.owns_services = services is None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def on_startup():
        if app.state.services is None:
            app.state.services = build_services(settings)
        log.info("Application startup complete.")

    @app.on_event("shutdown")
    async def on_shutdown():
        if app.state.owns_services and app.state.services:
            await close_services(app.state.services)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        rid = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        start = time.time()
        response = await call_next(request)
        duration_ms = int((time.time() - start) * 1000)
        log.info("%s %s -> %s (%d ms) rid=%s", request.method, request.url.path, response.status_code, duration_ms, rid)
        response.headers["X-Request-Id"] = rid
        return response

    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(request: Request, exc: InvalidRequestError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(str(err["loc"][-1]) for err in exc.errors() if err.get("loc"))
        return JSONResponse(status_code=400, content={"error": f"Invalid query parameter: {fields}"})

    @app.get("/health", tags=["system"])
    def health_check():
        return {"ok": True}

    @app.get("/", include_in_schema=False)
    async def serve_ui():
        return FileResponse(STATIC_DIR / "index.html")

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    app.include_router(prices_router.router)
    # The browser UI talks to the API through an /api prefix.
    app.include_router(prices_router.router, prefix="/api")
    if settings.METRICS_ENABLED:
        app.include_router(metrics_router)

    return app


app = create_app()
