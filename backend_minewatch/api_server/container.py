"""
Service container: every stateful service, built once per application.

Handlers receive it through the get_services dependency; nothing is held in
module-level globals, so tests can build an isolated app per case.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from fastapi import Request

from backend_minewatch.advisor.service import AdvisorService
from backend_minewatch.config.settings import Settings
from backend_minewatch.market.service import MarketService
from backend_minewatch.mining.accounts import AccountStore
from backend_minewatch.mining.cache import RefreshCache
from backend_minewatch.mining.credentials import CredentialResolver
from backend_minewatch.mining.fallback import FallbackGenerator
from backend_minewatch.mining.pool_client import PoolClient
from backend_minewatch.mining.service import MiningService


@dataclass
class ServiceContainer:
    settings: Settings
    accounts: AccountStore
    resolver: CredentialResolver
    cache: RefreshCache
    mining: MiningService
    market: MarketService
    advisor: AdvisorService


def build_services(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    fallback_seed: int | None = None,
) -> ServiceContainer:
    """Wire the services for one application instance. transport overrides the pool HTTP transport."""
    accounts = AccountStore()
    resolver = CredentialResolver(
        accounts,
        default_api_key=settings.default_api_key,
        default_account=settings.default_username,
    )
    cache = RefreshCache(default_ttl_sec=settings.refresh_cache_ttl_sec)
    client = PoolClient(settings.pool_base_url, timeout_sec=settings.pool_timeout_sec, transport=transport)
    mining = MiningService(
        client,
        cache,
        resolver,
        FallbackGenerator(seed=fallback_seed, worker_count=settings.fallback_worker_count),
        simulated_ttl_sec=settings.simulated_cache_ttl_sec,
    )
    market = MarketService(ttl_sec=settings.market_cache_ttl_sec)
    advisor = AdvisorService(market, ttl_sec=settings.advisor_cache_ttl_sec)
    return ServiceContainer(
        settings=settings,
        accounts=accounts,
        resolver=resolver,
        cache=cache,
        mining=mining,
        market=market,
        advisor=advisor,
    )


def get_services(request: Request) -> ServiceContainer:
    """Dependency: the app's service container."""
    return request.app.state.services
