"""
FastAPI router: /api/mining: refresh, cached pool data, connection tests.

Read endpoints (GET data, histories, workers, activity) always answer 200
with live or simulated data and report which in "source". fetch and
test-connection surface pool and credential errors as non-200 responses.
"""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from backend_minewatch.api_server.container import ServiceContainer, get_services
from backend_minewatch.api_server.schemas import DirectConnectionRequest, PoolCredentialsRequest
from backend_minewatch.core.exceptions import MinewatchError, ValidationError
from backend_minewatch.minewatch_logging import get_logger
from backend_minewatch.mining.currencies import (
    CURRENCIES,
    DEFAULT_CURRENCY,
    HASHRATE_SUPPORTED_CURRENCIES,
    is_supported,
)
from backend_minewatch.mining.workers import DEFAULT_PAGE_SIZE, paginate, summarize, worker_view

logger = get_logger(__name__)

router = APIRouter(prefix="/api/mining", tags=["mining"])


def _require_currency(currency: str) -> str:
    currency = (currency or "").strip()
    if not currency:
        raise ValidationError("Currency is required")
    if not is_supported(currency):
        raise ValidationError(f"Unsupported currency: {currency}")
    return currency


@router.post("/fetch")
async def fetch_mining_data(
    body: PoolCredentialsRequest,
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    """
    Run one refresh cycle and return the fresh mining data. Errors (missing
    credentials, auth, not found, rate limit, upstream) become non-200.
    """
    currency = _require_currency(body.currency)
    snapshot = await services.mining.refresh(body.api_key, body.mining_user_name, currency)
    return {
        "success": True,
        "message": "Mining data fetched successfully",
        "source": snapshot.source.value,
        "data": snapshot.data_dict(),
    }


@router.get("/data")
async def get_mining_data(
    currency: str = Query(DEFAULT_CURRENCY),
    mining_user_name: str | None = Query(None, alias="miningUserName"),
    api_key: str | None = Query(None, alias="apiKey"),
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    snapshot = await services.mining.get_mining_data(api_key, mining_user_name, currency)
    return snapshot.to_dict()


@router.get("/hashrate-history")
async def get_hashrate_history(
    currency: str = Query(DEFAULT_CURRENCY),
    mining_user_name: str | None = Query(None, alias="miningUserName"),
    api_key: str | None = Query(None, alias="apiKey"),
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    snapshot = await services.mining.get_hashrate_history(api_key, mining_user_name, currency)
    return snapshot.to_dict()


@router.get("/income-history")
async def get_income_history(
    currency: str = Query(DEFAULT_CURRENCY),
    mining_user_name: str | None = Query(None, alias="miningUserName"),
    api_key: str | None = Query(None, alias="apiKey"),
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    snapshot = await services.mining.get_income_history(api_key, mining_user_name, currency)
    return snapshot.to_dict()


@router.get("/workers")
async def get_workers(
    currency: str = Query(DEFAULT_CURRENCY),
    mining_user_name: str | None = Query(None, alias="miningUserName"),
    api_key: str | None = Query(None, alias="apiKey"),
    page: int | None = Query(None, ge=1),
    per_page: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    """Worker list with derived online flag and efficiency. Pass page to get one page."""
    snapshot = await services.mining.get_workers(api_key, mining_user_name, currency)
    now = time.time()
    out = snapshot.to_dict()
    if page is None:
        out["data"] = [worker_view(w, now) for w in snapshot.data]
        return out
    worker_page = paginate(snapshot.data, page, per_page).to_dict(now)
    out["data"] = worker_page.pop("items")
    out.update(worker_page)
    return out


@router.get("/workers/summary")
async def get_workers_summary(
    currency: str = Query(DEFAULT_CURRENCY),
    mining_user_name: str | None = Query(None, alias="miningUserName"),
    api_key: str | None = Query(None, alias="apiKey"),
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    snapshot = await services.mining.get_workers(api_key, mining_user_name, currency)
    summary = summarize(snapshot.data, time.time())
    summary["source"] = snapshot.source.value
    return summary


@router.get("/activity")
async def get_activity(
    currency: str = Query(DEFAULT_CURRENCY),
    mining_user_name: str | None = Query(None, alias="miningUserName"),
    api_key: str | None = Query(None, alias="apiKey"),
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    snapshot = await services.mining.get_activity(api_key, mining_user_name, currency)
    return snapshot.to_dict()


@router.get("/currencies")
def list_currencies() -> dict[str, list[str]]:
    return {
        "currencies": list(CURRENCIES),
        "hashrate_supported": list(HASHRATE_SUPPORTED_CURRENCIES),
    }


@router.post("/test-connection")
async def test_connection(
    body: PoolCredentialsRequest,
    services: ServiceContainer = Depends(get_services),
) -> JSONResponse:
    """
    Validate credentials with one hashrate call. 200 on success; 400 with a
    category message (authentication, unknown user, rate limit, ...) otherwise.
    Never touches the refresh cache.
    """
    try:
        currency = _require_currency(body.currency)
        await services.mining.test_connection(body.api_key, body.mining_user_name, currency)
    except MinewatchError as e:
        logger.warning("test_connection_failed", error=e.code, account=body.mining_user_name)
        return JSONResponse(status_code=400, content=e.to_dict())
    return JSONResponse(
        status_code=200,
        content={"success": True, "message": "Connection successful. API credentials are valid."},
    )


@router.post("/test-direct-connection")
async def test_direct_connection(
    body: DirectConnectionRequest | None = None,
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    """Validate the environment credentials. Always 200; outcome in success/message."""
    currency = body.currency if body is not None else DEFAULT_CURRENCY
    try:
        creds, _ = await services.mining.test_default_connection(currency)
    except MinewatchError as e:
        logger.warning("test_direct_connection_failed", error=e.code)
        return {"success": False, "message": e.message, "error": e.code}
    return {
        "success": True,
        "message": "Successfully connected to F2Pool API",
        "username": creds.account_name,
    }


@router.get("/env-connection-status")
async def env_connection_status(
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    """Whether default credentials are configured and whether the pool accepts them."""
    if not services.resolver.has_defaults:
        return {
            "success": False,
            "message": "API credentials not configured in environment variables",
            "configured": False,
        }
    try:
        creds, _ = await services.mining.test_default_connection(DEFAULT_CURRENCY)
    except MinewatchError as e:
        return {
            "success": False,
            "message": "Environment credentials are invalid",
            "configured": True,
            "error": e.message,
        }
    return {
        "success": True,
        "message": "Environment connection successful",
        "configured": True,
        "username": creds.account_name,
        "currency": DEFAULT_CURRENCY,
    }
