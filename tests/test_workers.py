"""
Pytest tests for worker analytics: online window, efficiency, pagination, summary.
"""

from __future__ import annotations

import pytest

from backend_minewatch.mining.models import HashrateSnapshot, WorkerRecord
from backend_minewatch.mining.workers import efficiency, is_online, paginate, summarize, worker_view

NOW = 1_700_000_000.0


def _worker(age_sec: float, rate: float = 4e12, stale: float | None = None, name: str = "rig") -> WorkerRecord:
    return WorkerRecord(
        hash_rate_info=HashrateSnapshot(
            name=name, hash_rate=rate, h1_hash_rate=rate, h24_hash_rate=rate, h24_stale_hash_rate=stale
        ),
        last_share_at=NOW - age_sec,
        status="active",
    )


@pytest.mark.parametrize(
    "age,online",
    [(300, True), (3599, True), (3600, False), (3601, False), (4000, False)],
)
def test_online_window(age, online):
    assert is_online(_worker(age), NOW) is online


def test_efficiency():
    assert efficiency(_worker(0, rate=100.0, stale=5.0)) == pytest.approx(95.0)
    assert efficiency(_worker(0, stale=None)) is None
    assert efficiency(_worker(0, rate=0.0, stale=0.0)) is None


def test_worker_view_adds_derived_fields():
    view = worker_view(_worker(4000), NOW)
    assert view["online"] is False
    assert view["efficiency"] is None
    assert view["hash_rate_info"]["name"] == "rig"


def test_paginate_clamps():
    workers = [_worker(0, name=f"rig-{i}") for i in range(25)]
    page = paginate(workers, page=3, per_page=10)
    assert (page.page, page.total, page.total_pages, len(page.items)) == (3, 25, 3, 5)
    assert paginate(workers, page=99, per_page=10).page == 3
    assert paginate(workers, page=1, per_page=1000).per_page == 100
    empty = paginate([], page=5)
    assert (empty.page, empty.total_pages, empty.items) == (1, 1, [])


def test_summarize_counts_online_only_hashrate():
    workers = [_worker(10, rate=4e12, stale=4e10), _worker(20, rate=5e12), _worker(5000, rate=3e12)]
    summary = summarize(workers, NOW)
    assert summary["total"] == 3
    assert summary["online"] == 2
    assert summary["offline"] == 1
    assert summary["total_hash_rate"] == pytest.approx(9e12)
    assert summary["mean_efficiency"] == pytest.approx(99.0)


def test_zero_stale_is_full_efficiency():
    """A worker with no stale shares is 100% efficient and counts toward the mean."""
    clean = _worker(10, rate=4e12, stale=0.0)
    assert efficiency(clean) == pytest.approx(100.0)
    summary = summarize([clean, _worker(10, rate=100.0, stale=10.0)], NOW)
    assert summary["mean_efficiency"] == pytest.approx(95.0)
