"""
FastAPI router: market snapshot and advisor recommendation.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from backend_minewatch.api_server.container import ServiceContainer, get_services
from backend_minewatch.core.exceptions import ValidationError

router = APIRouter(prefix="/api", tags=["market"])


@router.get("/market/data")
def get_market_data(
    currency: str | None = Query(None),
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    return services.market.get_market_data(currency).to_dict()


@router.get("/advisor/recommendation")
def get_recommendation(
    currency: str | None = Query(None),
    balance: float | None = Query(None, ge=0),
    price: float | None = Query(None, gt=0, description="BTC price in USD; market snapshot when omitted"),
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    if not currency or not currency.strip():
        raise ValidationError("Currency is required")
    verdict = services.advisor.get_recommendation(currency.strip(), balance, price)
    return verdict.to_dict()
