"""
F2Pool v2 API client.

Responsibilities:
- Issue one authenticated POST per data kind (balance, hashrate, workers,
  hashrate history, transactions) with the F2P-API-SECRET header.
- Map JSON responses to typed records (mining.models).
- Classify failures: HTTP status, application error code in a 200 body,
  unparseable bodies, timeouts. No retries; callers decide on fallback.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

import httpx

from backend_minewatch.core.exceptions import (
    MalformedResponse,
    MiningPoolError,
    UnknownUpstreamError,
    classify_http_status,
)
from backend_minewatch.minewatch_logging import get_logger
from backend_minewatch.mining.models import (
    BalanceSnapshot,
    Credentials,
    HashratePoint,
    HashrateSnapshot,
    Transaction,
    WorkerRecord,
)

logger = get_logger(__name__)

AUTH_HEADER = "F2P-API-SECRET"

PATH_BALANCE = "/assets/balance"
PATH_HASHRATE_INFO = "/hash_rate/info"
PATH_WORKER_LIST = "/hash_rate/worker/list"
PATH_HASHRATE_HISTORY = "/hash_rate/history"
PATH_TRANSACTIONS = "/assets/transactions/list"

HISTORY_INTERVAL_SEC = 3600
HISTORY_DURATION_SEC = 24 * 60 * 60

TX_TYPE_ALL = "all"
TX_TYPE_REVENUE = "revenue"
TX_TYPE_PAYOUT = "payout"


class PoolClient:
    """
    Async client for the pool HTTP API.

    A new httpx.AsyncClient is opened per call so independent calls can run
    concurrently from one refresh cycle. transport is injectable for tests
    (httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_sec: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url.strip():
            raise ValueError("base_url must be non-empty")
        if timeout_sec <= 0:
            raise ValueError("timeout_sec must be positive")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_sec
        self._transport = transport

    async def _post(self, path: str, credentials: Credentials, body: dict[str, Any]) -> dict[str, Any]:
        """POST body to path; return the decoded JSON object or raise a MiningPoolError."""
        started = time.monotonic()
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            ) as client:
                response = await client.post(
                    path,
                    json=body,
                    headers={AUTH_HEADER: credentials.api_key},
                )
        except httpx.TimeoutException as e:
            logger.warning("pool_call_timeout", path=path, account=credentials.account_name, timeout_sec=self._timeout)
            raise UnknownUpstreamError(detail=f"Timed out after {self._timeout}s calling {path}") from e
        except httpx.HTTPError as e:
            logger.warning("pool_call_transport_error", path=path, account=credentials.account_name, error=str(e))
            raise UnknownUpstreamError(detail=str(e)) from e

        elapsed_ms = round((time.monotonic() - started) * 1000, 2)
        if not response.is_success:
            error_cls = classify_http_status(response.status_code)
            logger.warning(
                "pool_call_http_error",
                path=path,
                account=credentials.account_name,
                status=response.status_code,
                error=error_cls.code,
                elapsed_ms=elapsed_ms,
            )
            raise error_cls(
                http_status=response.status_code,
                detail=f"F2Pool API Error: {response.status_code} {response.reason_phrase}",
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("pool_call_malformed_body", path=path, body=response.text[:100])
            raise MalformedResponse(
                http_status=response.status_code,
                detail=f"Invalid JSON response from F2Pool API: {response.text[:100]}",
            ) from e
        if not isinstance(data, dict):
            raise MalformedResponse(http_status=response.status_code, detail="Expected a JSON object")

        code = data.get("code")
        if code not in (None, 0):
            msg = str(data.get("msg") or "")
            logger.warning("pool_call_api_error", path=path, account=credentials.account_name, code=code, msg=msg)
            raise UnknownUpstreamError(
                f"API Error: {msg}" if msg else None,
                http_status=response.status_code,
                detail=f"F2Pool API Error: {msg}",
            )

        logger.debug("pool_call_ok", path=path, account=credentials.account_name, elapsed_ms=elapsed_ms)
        return data

    @staticmethod
    def _base_body(credentials: Credentials, currency: str) -> dict[str, Any]:
        return {"currency": currency, "user_name": credentials.account_name}

    async def fetch_balance(self, credentials: Credentials, currency: str) -> BalanceSnapshot:
        data = await self._post(PATH_BALANCE, credentials, self._base_body(credentials, currency))
        return _parse(lambda: BalanceSnapshot.from_api(data["balance_info"]), PATH_BALANCE)

    async def fetch_hashrate(self, credentials: Credentials, currency: str) -> HashrateSnapshot:
        data = await self._post(PATH_HASHRATE_INFO, credentials, self._base_body(credentials, currency))
        return _parse(lambda: HashrateSnapshot.from_api(data["info"]), PATH_HASHRATE_INFO)

    async def fetch_workers(self, credentials: Credentials, currency: str) -> list[WorkerRecord]:
        data = await self._post(PATH_WORKER_LIST, credentials, self._base_body(credentials, currency))
        return _parse(lambda: [WorkerRecord.from_api(w) for w in data["workers"]], PATH_WORKER_LIST)

    async def fetch_hashrate_history(
        self,
        credentials: Credentials,
        currency: str,
        *,
        interval_sec: int = HISTORY_INTERVAL_SEC,
        duration_sec: int = HISTORY_DURATION_SEC,
    ) -> list[HashratePoint]:
        body = self._base_body(credentials, currency)
        body.update(interval=interval_sec, duration=duration_sec)
        data = await self._post(PATH_HASHRATE_HISTORY, credentials, body)

        def build() -> list[HashratePoint]:
            return [
                HashratePoint(
                    timestamp=datetime.fromtimestamp(int(item["timestamp"]), tz=timezone.utc).isoformat(),
                    hashrate=float(item["hash_rate"]),
                )
                for item in data["history"]
            ]

        return _parse(build, PATH_HASHRATE_HISTORY)

    async def fetch_transactions(
        self,
        credentials: Credentials,
        currency: str,
        *,
        tx_type: str = TX_TYPE_ALL,
        start_time: int,
        end_time: int,
    ) -> list[Transaction]:
        body = self._base_body(credentials, currency)
        body.update(type=tx_type, start_time=start_time, end_time=end_time)
        data = await self._post(PATH_TRANSACTIONS, credentials, body)
        return _parse(lambda: [Transaction.from_api(t) for t in data["transactions"]], PATH_TRANSACTIONS)


def _parse(build: Any, path: str) -> Any:
    """Run a record builder; missing, mistyped or out-of-range fields become MalformedResponse."""
    try:
        return build()
    except MiningPoolError:
        raise
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        logger.warning("pool_response_shape_error", path=path, error=str(e))
        raise MalformedResponse(detail=f"Unexpected response shape from {path}: {e}") from e
