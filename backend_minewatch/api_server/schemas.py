"""
Request models for the HTTP API.

Field aliases keep the dashboard's camelCase names (apiKey, miningUserName);
snake_case names are accepted as well.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from backend_minewatch.mining.currencies import DEFAULT_CURRENCY


class PoolCredentialsRequest(BaseModel):
    """Body of POST /api/mining/fetch and /api/mining/test-connection."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str | None = Field(None, alias="apiKey", description="F2Pool API secret; env default when omitted")
    mining_user_name: str | None = Field(
        None, alias="miningUserName", max_length=128, description="F2Pool account name; env default when omitted"
    )
    currency: str = Field(DEFAULT_CURRENCY, min_length=1, max_length=64)


class DirectConnectionRequest(BaseModel):
    currency: str = Field(DEFAULT_CURRENCY, min_length=1, max_length=64)


class AccountCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=1, max_length=128, description="F2Pool account name")
    currency: str = Field(DEFAULT_CURRENCY, min_length=1, max_length=64)
    api_key: str | None = Field(None, alias="apiKey", description="Stored in memory only; never returned")


class AccountUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str | None = Field(None, min_length=1, max_length=128)
    currency: str | None = Field(None, min_length=1, max_length=64)
    api_key: str | None = Field(None, alias="apiKey")
