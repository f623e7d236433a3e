"""
Refresh cache: latest snapshot per (data kind, account, currency, credential fingerprint).

Thread-safe; a get after a put for the same key returns that put. Entries
carry an optional expiry: live snapshots default to none (they are replaced
by the next refresh, which invalidates the key first), simulated snapshots
get a short TTL so read paths retry the pool. Expired entries are swept on
every put, so keys that are never read again do not accumulate.
"""

from __future__ import annotations

import hashlib
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from backend_minewatch.minewatch_logging import get_logger
from backend_minewatch.mining.models import DataKind, Snapshot

logger = get_logger(__name__)


def fingerprint(api_key: str) -> str:
    """Stable 64-bit digest of an API key. Separates cache entries per caller; not reversible."""
    return hashlib.blake2b(api_key.encode("utf-8"), digest_size=8).hexdigest()


@dataclass(frozen=True)
class CacheKey:
    account: str
    currency: str
    credential_fingerprint: str

    @classmethod
    def build(cls, account: str, currency: str, api_key: str) -> "CacheKey":
        return cls(account=account, currency=currency, credential_fingerprint=fingerprint(api_key))

    def __str__(self) -> str:
        return f"{self.account}:{self.currency}:{self.credential_fingerprint}"


class RefreshCache:
    """Snapshot store. Key -> (snapshot, expiry_ts or None)."""

    def __init__(
        self,
        default_ttl_sec: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = default_ttl_sec
        self._clock = clock
        self._store: dict[tuple[DataKind, CacheKey], tuple[Snapshot, float | None]] = {}
        self._lock = threading.Lock()

    def get(self, kind: DataKind, key: CacheKey) -> Snapshot | None:
        with self._lock:
            entry = self._store.get((kind, key))
            if entry is None:
                return None
            snapshot, expiry = entry
            if expiry is not None and self._clock() > expiry:
                del self._store[(kind, key)]
                logger.debug("refresh_cache_expired", kind=kind.value, key=str(key))
                return None
            return snapshot

    def put(
        self,
        kind: DataKind,
        key: CacheKey,
        snapshot: Snapshot,
        ttl_sec: float | None = None,
    ) -> None:
        """Store snapshot. ttl_sec overrides the default; both None means no expiry."""
        ttl = ttl_sec if ttl_sec is not None else self._default_ttl
        now = self._clock()
        expiry = now + ttl if ttl is not None else None
        with self._lock:
            self._sweep(now)
            self._store[(kind, key)] = (snapshot, expiry)

    def _sweep(self, now: float) -> None:
        """Drop expired entries. Caller holds the lock."""
        expired = [k for k, (_, expiry) in self._store.items() if expiry is not None and now > expiry]
        for k in expired:
            del self._store[k]
        if expired:
            logger.debug("refresh_cache_swept", removed=len(expired))

    def invalidate(self, key: CacheKey, kinds: Iterable[DataKind] | None = None) -> int:
        """Drop entries for key (all kinds by default). Returns the number removed."""
        targets = list(kinds) if kinds is not None else list(DataKind)
        removed = 0
        with self._lock:
            for kind in targets:
                if self._store.pop((kind, key), None) is not None:
                    removed += 1
        if removed:
            logger.debug("refresh_cache_invalidated", key=str(key), removed=removed)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
