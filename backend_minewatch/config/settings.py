"""
Application settings.

Responsibilities:
- Load configuration from environment variables and .env files.
- Provide defaults for optional values.
- Expose typed settings (pool URL, default credentials, cache TTLs, API port)
  for the mining service, advisor, market service and API server.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend_minewatch.config.env import (
    DEFAULT_POOL_TIMEOUT_SEC,
    env_float,
    env_int,
    env_str,
    get_default_pool_credentials,
    get_pool_base_url,
    load_minewatch_env,
)

DEFAULT_SIMULATED_CACHE_TTL_SEC = 60.0
DEFAULT_MARKET_CACHE_TTL_SEC = 60.0
DEFAULT_ADVISOR_CACHE_TTL_SEC = 300.0
DEFAULT_FALLBACK_WORKER_COUNT = 25


@dataclass(frozen=True)
class Settings:
    """Typed, immutable service configuration."""

    pool_base_url: str = "https://api.f2pool.com/v2"
    pool_timeout_sec: float = DEFAULT_POOL_TIMEOUT_SEC
    default_api_key: str = ""
    default_username: str = ""
    # None: live snapshots never expire; refresh invalidates explicitly
    refresh_cache_ttl_sec: float | None = None
    simulated_cache_ttl_sec: float | None = DEFAULT_SIMULATED_CACHE_TTL_SEC
    market_cache_ttl_sec: float = DEFAULT_MARKET_CACHE_TTL_SEC
    advisor_cache_ttl_sec: float = DEFAULT_ADVISOR_CACHE_TTL_SEC
    fallback_worker_count: int = DEFAULT_FALLBACK_WORKER_COUNT
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @property
    def has_default_credentials(self) -> bool:
        return bool(self.default_api_key and self.default_username)


def get_settings() -> Settings:
    """
    Build settings from the current environment.

    Not cached: tests and the app factory may change env between calls.
    """
    load_minewatch_env()
    api_key, username = get_default_pool_credentials()
    return Settings(
        pool_base_url=get_pool_base_url(),
        pool_timeout_sec=env_float("F2POOL_TIMEOUT_SEC", DEFAULT_POOL_TIMEOUT_SEC) or DEFAULT_POOL_TIMEOUT_SEC,
        default_api_key=api_key,
        default_username=username,
        refresh_cache_ttl_sec=env_float("REFRESH_CACHE_TTL_SEC", None),
        simulated_cache_ttl_sec=env_float("SIMULATED_CACHE_TTL_SEC", DEFAULT_SIMULATED_CACHE_TTL_SEC),
        market_cache_ttl_sec=env_float("MARKET_CACHE_TTL_SEC", DEFAULT_MARKET_CACHE_TTL_SEC) or DEFAULT_MARKET_CACHE_TTL_SEC,
        advisor_cache_ttl_sec=env_float("ADVISOR_CACHE_TTL_SEC", DEFAULT_ADVISOR_CACHE_TTL_SEC) or DEFAULT_ADVISOR_CACHE_TTL_SEC,
        fallback_worker_count=max(0, env_int("FALLBACK_WORKER_COUNT", DEFAULT_FALLBACK_WORKER_COUNT)),
        api_host=env_str("API_HOST", "0.0.0.0"),
        api_port=env_int("API_PORT", 8000),
    )
