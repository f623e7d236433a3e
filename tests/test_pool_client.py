"""
Pytest tests for the pool client: request shape, record mapping, error classification.

The pool is faked with httpx.MockTransport (see conftest.FakePool).
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from backend_minewatch.core.exceptions import (
    AuthFailure,
    MalformedResponse,
    NotFound,
    RateLimited,
    UnknownUpstreamError,
)
from backend_minewatch.mining.models import Credentials
from backend_minewatch.mining.pool_client import AUTH_HEADER, PoolClient

from conftest import ACCOUNT, API_KEY, NOW, FakePool

CREDS = Credentials(api_key=API_KEY, account_name=ACCOUNT)


def _client(pool: FakePool) -> PoolClient:
    return PoolClient("https://pool.test/v2", timeout_sec=2, transport=pool.transport)


def test_fetch_balance_request_shape(fake_pool):
    balance = asyncio.run(_client(fake_pool).fetch_balance(CREDS, "bitcoin"))
    assert balance.balance == pytest.approx(0.0123)
    assert balance.yesterday_income == pytest.approx(0.004)
    path, headers, body = fake_pool.calls[0]
    assert path == "/assets/balance"
    assert headers[AUTH_HEADER.lower()] == API_KEY
    assert body == {"currency": "bitcoin", "user_name": ACCOUNT}


def test_fetch_hashrate_and_workers(fake_pool):
    client = _client(fake_pool)
    hashrate = asyncio.run(client.fetch_hashrate(CREDS, "bitcoin"))
    assert hashrate.h24_hash_rate == pytest.approx(1.0e14)
    assert hashrate.h24_delay_hash_rate is None
    assert "h24_delay_hash_rate" not in hashrate.to_dict()

    workers = asyncio.run(client.fetch_workers(CREDS, "bitcoin"))
    assert [w.hash_rate_info.name for w in workers] == ["rig-a", "rig-b"]
    assert workers[1].host is None


def test_fetch_history_window(fake_pool):
    points = asyncio.run(_client(fake_pool).fetch_hashrate_history(CREDS, "bitcoin"))
    assert len(points) == 2
    assert points[0].timestamp.endswith("+00:00")
    _, _, body = fake_pool.calls[0]
    assert body["interval"] == 3600
    assert body["duration"] == 86400


def test_fetch_transactions_passes_window(fake_pool):
    end = int(NOW)
    txs = asyncio.run(
        _client(fake_pool).fetch_transactions(CREDS, "bitcoin", tx_type="revenue", start_time=end - 100, end_time=end)
    )
    assert [t.id for t in txs] == [11, 12]
    _, _, body = fake_pool.calls[0]
    assert body["type"] == "revenue"
    assert body["start_time"] == end - 100
    assert body["end_time"] == end


@pytest.mark.parametrize(
    "status,error_cls",
    [
        (401, AuthFailure),
        (403, AuthFailure),
        (404, NotFound),
        (429, RateLimited),
        (500, UnknownUpstreamError),
        (503, UnknownUpstreamError),
    ],
)
def test_http_status_classification(fake_pool, status, error_cls):
    fake_pool.fail("/hash_rate/info", status)
    with pytest.raises(error_cls) as exc_info:
        asyncio.run(_client(fake_pool).fetch_hashrate(CREDS, "bitcoin"))
    assert exc_info.value.http_status == status
    assert type(exc_info.value) is error_cls


def test_auth_failure_message(fake_pool):
    fake_pool.fail("/hash_rate/info", 401)
    with pytest.raises(AuthFailure, match="Authentication failed"):
        asyncio.run(_client(fake_pool).fetch_hashrate(CREDS, "bitcoin"))


def test_nonzero_code_is_upstream_error(fake_pool):
    fake_pool.fail("/assets/balance", {"code": 1001, "msg": "user not exist"})
    with pytest.raises(UnknownUpstreamError, match="API Error: user not exist"):
        asyncio.run(_client(fake_pool).fetch_balance(CREDS, "bitcoin"))


def test_invalid_json_is_malformed(fake_pool):
    fake_pool.fail("/assets/balance", "<html>gateway</html>")
    with pytest.raises(MalformedResponse):
        asyncio.run(_client(fake_pool).fetch_balance(CREDS, "bitcoin"))


def test_missing_fields_is_malformed(fake_pool):
    fake_pool.fail("/assets/balance", {"code": 0, "unexpected": {}})
    with pytest.raises(MalformedResponse):
        asyncio.run(_client(fake_pool).fetch_balance(CREDS, "bitcoin"))
    fake_pool.fail("/hash_rate/worker/list", {"workers": [{"status": "active"}]})
    with pytest.raises(MalformedResponse):
        asyncio.run(_client(fake_pool).fetch_workers(CREDS, "bitcoin"))


def test_timeout_is_upstream_error(fake_pool):
    fake_pool.fail("/hash_rate/info", httpx.ReadTimeout("timed out"))
    with pytest.raises(UnknownUpstreamError, match="Failed to connect"):
        asyncio.run(_client(fake_pool).fetch_hashrate(CREDS, "bitcoin"))


def test_transport_error_is_upstream_error(fake_pool):
    fake_pool.fail("/hash_rate/info", httpx.ConnectError("connection refused"))
    with pytest.raises(UnknownUpstreamError):
        asyncio.run(_client(fake_pool).fetch_hashrate(CREDS, "bitcoin"))


def test_client_rejects_bad_config():
    with pytest.raises(ValueError):
        PoolClient("")
    with pytest.raises(ValueError):
        PoolClient("https://pool.test/v2", timeout_sec=0)


def test_infinite_transaction_timestamp_is_malformed(fake_pool):
    fake_pool.fail(
        "/assets/transactions/list",
        '{"code":0,"transactions":[{"id":1,"type":"revenue","changed_balance":0.1,"created_at":Infinity}]}',
    )
    with pytest.raises(MalformedResponse):
        asyncio.run(
            _client(fake_pool).fetch_transactions(CREDS, "bitcoin", start_time=0, end_time=int(NOW))
        )


def test_out_of_range_history_timestamp_is_malformed(fake_pool):
    fake_pool.fail("/hash_rate/history", {"code": 0, "history": [{"timestamp": 10**20, "hash_rate": 1.0e14}]})
    with pytest.raises(MalformedResponse):
        asyncio.run(_client(fake_pool).fetch_hashrate_history(CREDS, "bitcoin"))
