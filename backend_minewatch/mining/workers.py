"""
Worker list analytics: online status, efficiency, pagination, summary.

A worker is online iff its last share is less than ONLINE_WINDOW_SEC old;
exactly ONLINE_WINDOW_SEC counts as offline.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from backend_minewatch.mining.models import WorkerRecord

ONLINE_WINDOW_SEC = 3600
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def is_online(worker: WorkerRecord, now: float, window_sec: int = ONLINE_WINDOW_SEC) -> bool:
    return now - worker.last_share_at < window_sec


def efficiency(worker: WorkerRecord) -> float | None:
    """Share efficiency in percent (100 - stale ratio). None when stale rate is unknown or the 24h rate is zero."""
    info = worker.hash_rate_info
    stale = info.h24_stale_hash_rate
    if stale is None or not info.h24_hash_rate:
        return None
    return 100.0 - (stale / info.h24_hash_rate) * 100.0


@dataclass
class WorkerPage:
    items: list[WorkerRecord]
    page: int
    per_page: int
    total: int
    total_pages: int

    def to_dict(self, now: float) -> dict[str, Any]:
        return {
            "items": [worker_view(w, now) for w in self.items],
            "page": self.page,
            "per_page": self.per_page,
            "total": self.total,
            "total_pages": self.total_pages,
        }


def paginate(workers: list[WorkerRecord], page: int = 1, per_page: int = DEFAULT_PAGE_SIZE) -> WorkerPage:
    """Slice one page. per_page is clamped to 1..MAX_PAGE_SIZE and page to 1..total_pages."""
    per_page = min(max(per_page, 1), MAX_PAGE_SIZE)
    total = len(workers)
    total_pages = max(math.ceil(total / per_page), 1)
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return WorkerPage(
        items=workers[start:start + per_page],
        page=page,
        per_page=per_page,
        total=total,
        total_pages=total_pages,
    )


def worker_view(worker: WorkerRecord, now: float) -> dict[str, Any]:
    """Worker dict plus derived online flag and efficiency."""
    out = worker.to_dict()
    out["online"] = is_online(worker, now)
    out["efficiency"] = efficiency(worker)
    return out


def summarize(workers: list[WorkerRecord], now: float) -> dict[str, Any]:
    online = [w for w in workers if is_online(w, now)]
    efficiencies = [e for e in (efficiency(w) for w in workers) if e is not None]
    return {
        "total": len(workers),
        "online": len(online),
        "offline": len(workers) - len(online),
        "total_hash_rate": sum(w.hash_rate_info.hash_rate for w in online),
        "mean_efficiency": sum(efficiencies) / len(efficiencies) if efficiencies else None,
    }
