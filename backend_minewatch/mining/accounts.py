"""
In-memory mining account store.

One record per pool account (username, default currency, optional API key).
Lives for the process lifetime; records are created on first save, updated on
overwrite and never expire. Public serialisation never includes the API key.
"""

from __future__ import annotations

import secrets
import threading
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from backend_minewatch.core.exceptions import AccountNotFound, ConflictError, ValidationError
from backend_minewatch.minewatch_logging import get_logger

logger = get_logger(__name__)

DEFAULT_ACCOUNT_CURRENCY = "bitcoin"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_account_id() -> str:
    return f"mining_{int(time.time() * 1000)}_{secrets.token_hex(4)[:7]}"


@dataclass
class MiningAccount:
    id: str
    username: str
    currency: str = DEFAULT_ACCOUNT_CURRENCY
    api_key: str | None = None
    last_used: datetime | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def to_public_dict(self) -> dict[str, Any]:
        """Serialise without the API key."""
        return {
            "id": self.id,
            "username": self.username,
            "currency": self.currency,
            "has_api_key": bool(self.api_key),
            "last_used": self.last_used.isoformat() if self.last_used else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class AccountStore:
    """Thread-safe id -> MiningAccount map."""

    def __init__(self) -> None:
        self._accounts: dict[str, MiningAccount] = {}
        self._lock = threading.Lock()

    def _find_by_username(self, username: str) -> MiningAccount | None:
        for account in self._accounts.values():
            if account.username == username:
                return account
        return None

    def create(
        self,
        username: str,
        currency: str = DEFAULT_ACCOUNT_CURRENCY,
        api_key: str | None = None,
    ) -> MiningAccount:
        """Create a new account. Raises ConflictError if the username is already stored."""
        username = (username or "").strip()
        if not username:
            raise ValidationError("username must be non-empty")
        with self._lock:
            if self._find_by_username(username) is not None:
                raise ConflictError(f"Mining account {username!r} already exists")
            account = MiningAccount(
                id=_new_account_id(),
                username=username,
                currency=(currency or DEFAULT_ACCOUNT_CURRENCY).strip(),
                api_key=(api_key or "").strip() or None,
            )
            self._accounts[account.id] = account
        logger.info("account_created", account_id=account.id, account=username)
        return account

    def get(self, account_id: str) -> MiningAccount:
        with self._lock:
            account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFound(f"Mining account {account_id} not found")
        return account

    def get_by_username(self, username: str) -> MiningAccount | None:
        with self._lock:
            return self._find_by_username(username)

    def list(self) -> list[MiningAccount]:
        with self._lock:
            return list(self._accounts.values())

    def update(self, account_id: str, **updates: Any) -> MiningAccount:
        """Apply partial updates (username, currency, api_key, last_used); bumps updated_at."""
        allowed = {"username", "currency", "api_key", "last_used"}
        unknown = set(updates) - allowed
        if unknown:
            raise ValidationError(f"Unknown account fields: {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in updates.items() if v is not None}
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                raise AccountNotFound(f"Mining account {account_id} not found")
            new_username = changes.get("username")
            if new_username and new_username != account.username:
                other = self._find_by_username(new_username)
                if other is not None:
                    raise ConflictError(f"Mining account {new_username!r} already exists")
            updated = replace(account, **changes, updated_at=_now())
            self._accounts[account_id] = updated
        logger.info("account_updated", account_id=account_id, fields=sorted(changes))
        return updated

    def delete(self, account_id: str) -> None:
        with self._lock:
            removed = self._accounts.pop(account_id, None)
        if removed is None:
            raise AccountNotFound(f"Mining account {account_id} not found")
        logger.info("account_deleted", account_id=account_id)

    def get_api_token(self, username: str) -> str | None:
        account = self.get_by_username(username)
        return account.api_key if account else None

    def set_api_token(self, username: str, api_key: str) -> MiningAccount:
        """Upsert the key for username. Last write wins."""
        account = self.get_by_username(username)
        if account is not None:
            if account.api_key == api_key:
                return account
            return self.update(account.id, api_key=api_key)
        try:
            return self.create(username, api_key=api_key)
        except ConflictError:
            # Created concurrently; overwrite
            existing = self.get_by_username(username)
            if existing is None:
                raise
            return self.update(existing.id, api_key=api_key)

    def touch(self, username: str) -> None:
        """Record that the stored credentials for username were used."""
        with self._lock:
            account = self._find_by_username(username)
            if account is not None:
                account.last_used = _now()
