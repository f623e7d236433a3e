"""
Application-level exceptions.

Every error carries a stable ``code``, the HTTP ``status_code`` the API
answers with, and a user-facing ``message``. Upstream pool failures are
subclasses of MiningPoolError so read paths can catch them in one place and
fall back to simulated data.
"""

from __future__ import annotations

from typing import Any


class MinewatchError(Exception):
    """Base class for all Minewatch errors."""

    code = "internal_error"
    status_code = 500
    default_message = "An unknown error occurred"

    def __init__(self, message: str | None = None, **context: Any) -> None:
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "message": self.message, "error": self.code}


class ValidationError(MinewatchError):
    """A required request field is missing or malformed."""

    code = "validation_error"
    status_code = 400
    default_message = "Invalid request"


class ConflictError(MinewatchError):
    """Creating a record that already exists (e.g. duplicate mining account)."""

    code = "conflict"
    status_code = 409
    default_message = "Resource already exists"


class AccountNotFound(MinewatchError):
    code = "account_not_found"
    status_code = 404
    default_message = "Mining account not found"


class CredentialsMissing(MinewatchError):
    """No API key / account name could be resolved for an authenticated call."""

    code = "credentials_missing"
    status_code = 400
    default_message = "API credentials not configured. Provide an API key and mining username."


class MiningPoolError(MinewatchError):
    """Base for failures talking to the pool API."""

    code = "upstream_error"
    status_code = 502
    default_message = "Failed to connect to F2Pool API. Please check your credentials."

    def __init__(
        self,
        message: str | None = None,
        *,
        http_status: int | None = None,
        detail: str | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, **context)
        self.http_status = http_status
        self.detail = detail


class AuthFailure(MiningPoolError):
    code = "auth_failure"
    status_code = 401
    default_message = "Authentication failed. Your API key appears to be invalid."


class NotFound(MiningPoolError):
    code = "not_found"
    status_code = 404
    default_message = "Mining username not found. Please check your F2Pool username."


class RateLimited(MiningPoolError):
    code = "rate_limited"
    status_code = 429
    default_message = "Too many requests to F2Pool API. Please try again later."


class MalformedResponse(MiningPoolError):
    code = "malformed_response"
    status_code = 502
    default_message = "Invalid response from F2Pool API."


class UnknownUpstreamError(MiningPoolError):
    code = "upstream_error"
    status_code = 502


def classify_http_status(status: int) -> type[MiningPoolError]:
    """Map a non-success pool HTTP status to its error class."""
    if status in (401, 403):
        return AuthFailure
    if status == 404:
        return NotFound
    if status == 429:
        return RateLimited
    return UnknownUpstreamError
