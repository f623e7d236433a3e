"""
Mining pool data: pool client, refresh cache, fallback generator and the
mining service that orchestrates them.
"""

from backend_minewatch.mining.accounts import AccountStore, MiningAccount
from backend_minewatch.mining.cache import CacheKey, RefreshCache, fingerprint
from backend_minewatch.mining.credentials import CredentialResolver
from backend_minewatch.mining.fallback import FallbackGenerator
from backend_minewatch.mining.pool_client import PoolClient
from backend_minewatch.mining.service import MiningService

__all__ = [
    "AccountStore",
    "CacheKey",
    "CredentialResolver",
    "FallbackGenerator",
    "MiningAccount",
    "MiningService",
    "PoolClient",
    "RefreshCache",
    "fingerprint",
]
