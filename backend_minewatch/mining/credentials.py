"""
Credential resolver: effective API key and account name for an upstream call.

Order: explicit request values > stored account key > process-wide default
(F2POOL_API_KEY / F2POOL_USERNAME). An explicit key + account pair is
remembered in the account store for later lookups.
"""

from __future__ import annotations

from backend_minewatch.core.exceptions import CredentialsMissing
from backend_minewatch.minewatch_logging import get_logger
from backend_minewatch.mining.accounts import AccountStore
from backend_minewatch.mining.models import Credentials

logger = get_logger(__name__)


class CredentialResolver:
    def __init__(
        self,
        store: AccountStore,
        default_api_key: str = "",
        default_account: str = "",
    ) -> None:
        self._store = store
        self._default_api_key = default_api_key.strip()
        self._default_account = default_account.strip()

    @property
    def has_defaults(self) -> bool:
        return bool(self._default_api_key and self._default_account)

    def default_credentials(self) -> Credentials:
        """Process-wide default pair. Raises CredentialsMissing when not configured."""
        if not self.has_defaults:
            raise CredentialsMissing(
                "API credentials not properly configured in environment variables"
            )
        return Credentials(api_key=self._default_api_key, account_name=self._default_account)

    def account_name(self, account_name: str | None = None) -> str:
        """Effective account name without requiring a key (used for cache keys on fallback)."""
        return (account_name or "").strip() or self._default_account

    def peek(self, api_key: str | None = None, account_name: str | None = None) -> tuple[str, str]:
        """
        Best-effort (api_key, account) with no side effects and no error.
        Either part may be empty.
        """
        account = self.account_name(account_name)
        key = (api_key or "").strip()
        if not key and account:
            key = self._store.get_api_token(account) or ""
        if not key:
            key = self._default_api_key
        return key, account

    def resolve(
        self,
        api_key: str | None = None,
        account_name: str | None = None,
        *,
        remember: bool = True,
    ) -> Credentials:
        """
        Return the credentials to use. Raises CredentialsMissing if no key or
        no account name resolves. remember=False skips storing an explicit pair
        (connection tests must not persist unverified keys).
        """
        explicit_key = (api_key or "").strip()
        explicit_account = (account_name or "").strip()
        account = explicit_account or self._default_account
        if not account:
            raise CredentialsMissing()

        if explicit_key:
            if explicit_account and remember:
                self._store.set_api_token(explicit_account, explicit_key)
            return Credentials(api_key=explicit_key, account_name=account)

        stored = self._store.get_api_token(account)
        if stored:
            self._store.touch(account)
            logger.debug("credentials_from_store", account=account)
            return Credentials(api_key=stored, account_name=account)

        if self._default_api_key:
            return Credentials(api_key=self._default_api_key, account_name=account)
        raise CredentialsMissing()
