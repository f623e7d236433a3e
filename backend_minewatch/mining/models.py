"""
Data models for pool statistics.

Dataclasses for balance, hashrate, worker, history and activity records.
Field names follow the F2Pool v2 wire format so to_dict() output is the JSON
shape served by the API.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class DataKind(str, Enum):
    """Kinds of snapshot held in the refresh cache."""

    MINING_DATA = "mining_data"
    HASHRATE_HISTORY = "hashrate_history"
    INCOME_HISTORY = "income_history"
    WORKERS = "workers"
    ACTIVITY = "activity"


class Source(str, Enum):
    """Provenance of a snapshot: fetched from the pool, or generated locally."""

    LIVE = "live"
    SIMULATED = "simulated"


class ActivityType(str, Enum):
    PAYMENT = "payment"
    WORKER_ONLINE = "worker_online"
    WORKER_OFFLINE = "worker_offline"
    ADVISOR_UPDATE = "advisor_update"


@dataclass(frozen=True)
class Credentials:
    """Effective API key and account name for one upstream call chain."""

    api_key: str
    account_name: str

    def __repr__(self) -> str:
        return f"Credentials(account_name={self.account_name!r}, api_key=***)"


@dataclass
class BalanceSnapshot:
    """Account balance in the mined currency's native unit. total_income >= paid is not enforced."""

    balance: float
    immature_balance: float
    paid: float
    total_income: float
    yesterday_income: float
    estimated_today_income: float

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "BalanceSnapshot":
        return cls(
            balance=float(item["balance"]),
            immature_balance=float(item.get("immature_balance") or 0),
            paid=float(item.get("paid") or 0),
            total_income=float(item.get("total_income") or 0),
            yesterday_income=float(item.get("yesterday_income") or 0),
            estimated_today_income=float(item.get("estimated_today_income") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "balance": self.balance,
            "immature_balance": self.immature_balance,
            "paid": self.paid,
            "total_income": self.total_income,
            "yesterday_income": self.yesterday_income,
            "estimated_today_income": self.estimated_today_income,
        }


@dataclass
class HashrateSnapshot:
    """Hash rates in H/s. h24_stale_hash_rate <= h24_hash_rate when present."""

    name: str
    hash_rate: float
    h1_hash_rate: float
    h24_hash_rate: float
    h24_stale_hash_rate: float | None = None
    h24_delay_hash_rate: float | None = None

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "HashrateSnapshot":
        stale = item.get("h24_stale_hash_rate")
        delay = item.get("h24_delay_hash_rate")
        return cls(
            name=str(item.get("name") or ""),
            hash_rate=float(item["hash_rate"]),
            h1_hash_rate=float(item.get("h1_hash_rate") or 0),
            h24_hash_rate=float(item.get("h24_hash_rate") or 0),
            h24_stale_hash_rate=float(stale) if stale is not None else None,
            h24_delay_hash_rate=float(delay) if delay is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "hash_rate": self.hash_rate,
            "h1_hash_rate": self.h1_hash_rate,
            "h24_hash_rate": self.h24_hash_rate,
        }
        if self.h24_stale_hash_rate is not None:
            out["h24_stale_hash_rate"] = self.h24_stale_hash_rate
        if self.h24_delay_hash_rate is not None:
            out["h24_delay_hash_rate"] = self.h24_delay_hash_rate
        return out


@dataclass
class WorkerRecord:
    """One mining rig. Online status is derived from last_share_at (see mining.workers)."""

    hash_rate_info: HashrateSnapshot
    last_share_at: float  # Unix seconds
    status: str
    host: str | None = None

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "WorkerRecord":
        return cls(
            hash_rate_info=HashrateSnapshot.from_api(item["hash_rate_info"]),
            last_share_at=float(item.get("last_share_at") or 0),
            status=str(item.get("status") or ""),
            host=item.get("host") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash_rate_info": self.hash_rate_info.to_dict(),
            "last_share_at": self.last_share_at,
            "status": self.status,
            "host": self.host,
        }


@dataclass(frozen=True)
class HashratePoint:
    timestamp: str  # ISO 8601, UTC
    hashrate: float

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, "hashrate": self.hashrate}


@dataclass(frozen=True)
class IncomePoint:
    date: str  # "Oct 5"
    income: float

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "income": self.income}


@dataclass(frozen=True)
class Transaction:
    """Raw pool transaction from /assets/transactions/list."""

    id: int
    type: str
    changed_balance: float
    created_at: int  # Unix seconds

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "Transaction":
        return cls(
            id=int(item["id"]),
            type=str(item.get("type") or ""),
            changed_balance=float(item.get("changed_balance") or 0),
            created_at=int(item["created_at"]),
        )


@dataclass(frozen=True)
class ActivityEvent:
    id: str
    type: ActivityType
    description: str
    timestamp: float  # Unix seconds
    simulated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "description": self.description,
            "timestamp": self.timestamp,
            "simulated": self.simulated,
        }


@dataclass
class MiningData:
    """Combined account snapshot returned by fetch and /api/mining/data."""

    balance: BalanceSnapshot
    hashrate: HashrateSnapshot
    currency: str
    timestamp: str
    workers: list[WorkerRecord] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "balance": self.balance.to_dict(),
            "hashrate": self.hashrate.to_dict(),
            "currency": self.currency,
            "timestamp": self.timestamp,
        }
        if self.workers is not None:
            out["workers"] = [w.to_dict() for w in self.workers]
        return out


@dataclass(frozen=True)
class Snapshot:
    """
    A cached value with provenance.

    data is a MiningData or a list of records of the given kind; source says
    whether it came from the pool or from the fallback generator.
    """

    kind: DataKind
    data: Any
    source: Source
    fetched_at: float = field(default_factory=time.time)

    @property
    def is_live(self) -> bool:
        return self.source is Source.LIVE

    def data_dict(self) -> Any:
        if isinstance(self.data, list):
            return [item.to_dict() for item in self.data]
        return self.data.to_dict()

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source.value,
            "fetched_at": datetime.fromtimestamp(self.fetched_at, tz=timezone.utc).isoformat(),
            "data": self.data_dict(),
        }


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
