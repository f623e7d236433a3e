"""
Pytest fixtures for Minewatch tests. The pool API is faked with an
httpx.MockTransport so no test talks to the network.
"""

from __future__ import annotations

import json
import time
from typing import Any

import httpx
import pytest

NOW = time.time()

API_KEY = "secret-key-123"
ACCOUNT = "alice"


def pool_ok(**payload: Any) -> dict[str, Any]:
    return {"code": 0, "msg": "", **payload}


def default_pool_responses(now: float = NOW) -> dict[str, Any]:
    """Successful payload per pool path."""
    return {
        "/assets/balance": pool_ok(
            balance_info={
                "balance": 0.0123,
                "immature_balance": 0.001,
                "paid": 1.5,
                "total_income": 1.5123,
                "yesterday_income": 0.004,
                "estimated_today_income": 0.002,
            }
        ),
        "/hash_rate/info": pool_ok(
            info={
                "name": ACCOUNT,
                "hash_rate": 1.2e14,
                "h1_hash_rate": 1.1e14,
                "h24_hash_rate": 1.0e14,
                "h24_stale_hash_rate": 1.0e12,
            }
        ),
        "/hash_rate/worker/list": pool_ok(
            workers=[
                {
                    "hash_rate_info": {
                        "name": "rig-a",
                        "hash_rate": 4.5e12,
                        "h1_hash_rate": 4.4e12,
                        "h24_hash_rate": 4.0e12,
                        "h24_stale_hash_rate": 0.2e12,
                    },
                    "last_share_at": int(now) - 300,
                    "status": "active",
                    "host": "10.0.0.2",
                },
                {
                    "hash_rate_info": {"name": "rig-b", "hash_rate": 0, "h1_hash_rate": 0, "h24_hash_rate": 0},
                    "last_share_at": int(now) - 4000,
                    "status": "inactive",
                },
            ]
        ),
        "/hash_rate/history": pool_ok(
            history=[
                {"timestamp": int(now) - 7200, "hash_rate": 0.9e14},
                {"timestamp": int(now) - 3600, "hash_rate": 1.0e14},
            ]
        ),
        "/assets/transactions/list": pool_ok(
            transactions=[
                {"id": 11, "type": "revenue", "changed_balance": 0.002, "created_at": int(now) - 600},
                {"id": 12, "type": "payout", "changed_balance": -0.01, "created_at": int(now) - 1200},
            ]
        ),
    }


class FakePool:
    """
    Programmable pool. responses maps path -> JSON payload, an int (HTTP
    status with an empty error body) or an exception instance to raise.
    Every request is recorded in calls as (path, headers, body).
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses = responses if responses is not None else default_pool_responses()
        self.calls: list[tuple[str, dict[str, str], dict[str, Any]]] = []

    def fail(self, path: str, outcome: Any) -> None:
        self.responses[path] = outcome

    def fail_all(self, outcome: Any) -> None:
        for path in list(self.responses):
            self.responses[path] = outcome

    def paths(self) -> list[str]:
        return [path for path, _, _ in self.calls]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/v2")
        body = json.loads(request.content or b"{}")
        self.calls.append((path, dict(request.headers), body))
        outcome = self.responses.get(path, 404)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            return httpx.Response(outcome, json={"msg": "error"})
        if isinstance(outcome, (str, bytes)):
            return httpx.Response(200, content=outcome)
        return httpx.Response(200, json=outcome)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_pool():
    return FakePool()


@pytest.fixture
def settings():
    """Settings with no process-wide default credentials."""
    from backend_minewatch.config.settings import Settings

    return Settings(pool_base_url="https://pool.test/v2", fallback_worker_count=10)


@pytest.fixture
def env_settings():
    """Settings with default credentials configured."""
    from backend_minewatch.config.settings import Settings

    return Settings(
        pool_base_url="https://pool.test/v2",
        default_api_key=API_KEY,
        default_username=ACCOUNT,
        fallback_worker_count=10,
    )


@pytest.fixture
def services(settings, fake_pool):
    from backend_minewatch.api_server.container import build_services

    return build_services(settings, transport=fake_pool.transport, fallback_seed=7)


@pytest.fixture
def client(services):
    """FastAPI TestClient over an isolated app with a faked pool."""
    from fastapi.testclient import TestClient

    from backend_minewatch.api_server.server import create_app

    with TestClient(create_app(services=services)) as c:
        yield c


@pytest.fixture
def env_client(env_settings, fake_pool):
    """TestClient whose app has default credentials configured."""
    from fastapi.testclient import TestClient

    from backend_minewatch.api_server.container import build_services
    from backend_minewatch.api_server.server import create_app

    services = build_services(env_settings, transport=fake_pool.transport, fallback_seed=7)
    with TestClient(create_app(services=services)) as c:
        yield c
