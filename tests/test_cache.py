"""
Pytest tests for the refresh cache and credential fingerprints.
"""

from __future__ import annotations

from backend_minewatch.mining.cache import CacheKey, RefreshCache, fingerprint
from backend_minewatch.mining.models import DataKind, Snapshot, Source


def _snap(kind: DataKind = DataKind.WORKERS, source: Source = Source.LIVE) -> Snapshot:
    return Snapshot(kind=kind, data=[], source=source, fetched_at=0.0)


def test_fingerprint_stable_and_opaque():
    fp = fingerprint("secret-key")
    assert fp == fingerprint("secret-key")
    assert fp != fingerprint("other-key")
    assert len(fp) == 16
    assert "secret" not in fp


def test_cache_key_separates_credentials():
    a = CacheKey.build("alice", "bitcoin", "k1")
    b = CacheKey.build("alice", "bitcoin", "k2")
    assert a != b
    assert a == CacheKey.build("alice", "bitcoin", "k1")
    assert str(a).startswith("alice:bitcoin:")


def test_get_after_put_returns_put():
    cache = RefreshCache()
    key = CacheKey.build("alice", "bitcoin", "k1")
    assert cache.get(DataKind.WORKERS, key) is None
    first = _snap()
    cache.put(DataKind.WORKERS, key, first)
    assert cache.get(DataKind.WORKERS, key) is first
    second = _snap()
    cache.put(DataKind.WORKERS, key, second)
    assert cache.get(DataKind.WORKERS, key) is second
    assert cache.get(DataKind.ACTIVITY, key) is None


def test_live_entries_do_not_expire_by_default():
    now = [0.0]
    cache = RefreshCache(clock=lambda: now[0])
    key = CacheKey.build("alice", "bitcoin", "k1")
    cache.put(DataKind.WORKERS, key, _snap())
    now[0] = 10**9
    assert cache.get(DataKind.WORKERS, key) is not None


def test_ttl_entries_expire():
    now = [0.0]
    cache = RefreshCache(clock=lambda: now[0])
    key = CacheKey.build("alice", "bitcoin", "k1")
    cache.put(DataKind.WORKERS, key, _snap(source=Source.SIMULATED), ttl_sec=60)
    now[0] = 59.0
    assert cache.get(DataKind.WORKERS, key) is not None
    now[0] = 61.0
    assert cache.get(DataKind.WORKERS, key) is None
    assert len(cache) == 0


def test_invalidate_all_kinds_for_key():
    cache = RefreshCache()
    key = CacheKey.build("alice", "bitcoin", "k1")
    other = CacheKey.build("bob", "bitcoin", "k1")
    for kind in DataKind:
        cache.put(kind, key, _snap(kind))
    cache.put(DataKind.WORKERS, other, _snap())
    assert cache.invalidate(key) == len(DataKind)
    assert all(cache.get(kind, key) is None for kind in DataKind)
    assert cache.get(DataKind.WORKERS, other) is not None
    assert cache.invalidate(other, kinds=[DataKind.ACTIVITY]) == 0


def test_snapshot_to_dict_carries_source():
    body = Snapshot(kind=DataKind.WORKERS, data=[], source=Source.SIMULATED, fetched_at=0.0).to_dict()
    assert body == {"source": "simulated", "fetched_at": "1970-01-01T00:00:00+00:00", "data": []}


def test_put_sweeps_expired_entries():
    """Simulated entries for keys never read again are dropped on a later put; live ones stay."""
    now = [0.0]
    cache = RefreshCache(clock=lambda: now[0])
    live_key = CacheKey.build("alice", "bitcoin", "k1")
    cache.put(DataKind.WORKERS, live_key, _snap())
    for i in range(20):
        key = CacheKey.build(f"guest-{i}", "bitcoin", "")
        cache.put(DataKind.WORKERS, key, _snap(source=Source.SIMULATED), ttl_sec=60)
    assert len(cache) == 21
    now[0] = 61.0
    cache.put(DataKind.ACTIVITY, live_key, _snap(DataKind.ACTIVITY))
    assert len(cache) == 2
    assert cache.get(DataKind.WORKERS, live_key) is not None
