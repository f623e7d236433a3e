"""
Environment variable loading for Minewatch.

- F2POOL_API_KEY / F2POOL_USERNAME: default credentials when a request has none
- F2POOL_API_BASE_URL: pool API base (default: https://api.f2pool.com/v2)
- F2POOL_TIMEOUT_SEC: per-call upstream timeout (default: 10)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_minewatch/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_POOL_BASE_URL = "https://api.f2pool.com/v2"
DEFAULT_POOL_TIMEOUT_SEC = 10.0


def load_minewatch_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides the real environment."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def env_str(name: str, default: str = "") -> str:
    """Return a stripped string env var, or default when unset or blank."""
    return (os.getenv(name) or "").strip() or default


def env_float(name: str, default: float | None) -> float | None:
    """
    Return a float env var. Unset/blank gives default; "none" or a value <= 0
    gives None (used for "no expiry" TTLs).
    """
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in ("none", "off", "never"):
        return None
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else None


def env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_default_pool_credentials() -> tuple[str, str]:
    """Return (api_key, username) from F2POOL_API_KEY / F2POOL_USERNAME; empty strings when unset."""
    load_minewatch_env()
    return env_str("F2POOL_API_KEY"), env_str("F2POOL_USERNAME")


def get_pool_base_url() -> str:
    load_minewatch_env()
    return env_str("F2POOL_API_BASE_URL", DEFAULT_POOL_BASE_URL).rstrip("/")
