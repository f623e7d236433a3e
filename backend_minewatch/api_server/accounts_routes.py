"""
FastAPI router: /api/mining/accounts: CRUD over the in-memory account store.

Responses never include the stored API key (see MiningAccount.to_public_dict).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from backend_minewatch.api_server.container import ServiceContainer, get_services
from backend_minewatch.api_server.schemas import AccountCreateRequest, AccountUpdateRequest
from backend_minewatch.minewatch_logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/mining/accounts", tags=["accounts"])


@router.post("")
def create_account(
    body: AccountCreateRequest,
    services: ServiceContainer = Depends(get_services),
) -> JSONResponse:
    """Create an account. 201 on success, 409 if the username already exists."""
    account = services.accounts.create(body.username, currency=body.currency, api_key=body.api_key)
    return JSONResponse(status_code=201, content=account.to_public_dict())


@router.get("")
def list_accounts(services: ServiceContainer = Depends(get_services)) -> list[dict[str, Any]]:
    return [a.to_public_dict() for a in services.accounts.list()]


@router.get("/{account_id}")
def get_account(account_id: str, services: ServiceContainer = Depends(get_services)) -> dict[str, Any]:
    return services.accounts.get(account_id).to_public_dict()


@router.put("/{account_id}")
def update_account(
    account_id: str,
    body: AccountUpdateRequest,
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    account = services.accounts.update(
        account_id,
        username=body.username,
        currency=body.currency,
        api_key=body.api_key,
    )
    return account.to_public_dict()


@router.delete("/{account_id}")
def delete_account(account_id: str, services: ServiceContainer = Depends(get_services)) -> dict[str, Any]:
    services.accounts.delete(account_id)
    return {"success": True, "message": "Mining account deleted"}
