"""
FastAPI server: mining dashboard API.

create_app() builds the service container once and mounts the mining,
accounts and market/advisor routers. Config comes from env via get_settings()
unless a Settings (and optionally a prepared container) is passed in.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend_minewatch import __version__
from backend_minewatch.api_server.accounts_routes import router as accounts_router
from backend_minewatch.api_server.container import ServiceContainer, build_services
from backend_minewatch.api_server.market_routes import router as market_router
from backend_minewatch.api_server.middleware import request_logging_middleware
from backend_minewatch.api_server.mining_routes import router as mining_router
from backend_minewatch.config.settings import Settings, get_settings
from backend_minewatch.core.exceptions import MinewatchError, ValidationError
from backend_minewatch.minewatch_logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.services.settings
    logger.info(
        "api_started",
        pool_base_url=settings.pool_base_url,
        default_credentials=settings.has_default_credentials,
        refresh_cache_ttl_sec=settings.refresh_cache_ttl_sec,
    )
    yield
    app.state.services.cache.clear()
    logger.info("api_stopped")


def minewatch_error_handler(request: Any, exc: MinewatchError) -> JSONResponse:
    """Domain errors -> {success: false, message, error} with the error's status code."""
    if exc.status_code >= 500:
        logger.warning("api_error", error=exc.code, status=exc.status_code, detail=getattr(exc, "detail", None))
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def request_validation_handler(request: Any, exc: RequestValidationError) -> JSONResponse:
    """Malformed or missing request fields -> 400 in the domain error shape."""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    error = ValidationError(f"Invalid request: {problems}" if problems else None)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app(
    settings: Settings | None = None,
    services: ServiceContainer | None = None,
) -> FastAPI:
    if services is None:
        services = build_services(settings or get_settings())

    app = FastAPI(
        title="Backend Minewatch API",
        description="Mining pool statistics with simulated fallback, market data and advisor.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.services = services

    app.middleware("http")(request_logging_middleware)
    app.add_exception_handler(MinewatchError, minewatch_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(mining_router)
    app.include_router(accounts_router)
    app.include_router(market_router)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok"}

    return app
