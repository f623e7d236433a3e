"""
Transaction history -> income history and activity feed.

Pure functions over mining.models.Transaction. Income sums only positive
balance changes per UTC calendar day over a trailing window; activity maps
each transaction 1:1 to a payment event and merges simulated worker status
events (the pool API does not report worker status changes).
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable

from backend_minewatch.mining.models import ActivityEvent, ActivityType, IncomePoint, Transaction
from backend_minewatch.mining.pool_client import TX_TYPE_PAYOUT, TX_TYPE_REVENUE

INCOME_WINDOW_SEC = 7 * 24 * 60 * 60
ACTIVITY_WINDOW_SEC = 24 * 60 * 60

WORKER_EVENT_TYPES = (ActivityType.WORKER_ONLINE, ActivityType.WORKER_OFFLINE)


def day_label(day: date) -> str:
    """Short label like 'Oct 5'."""
    return f"{day:%b} {day.day}"


def aggregate_income(
    transactions: Iterable[Transaction],
    now: float,
    window_sec: int = INCOME_WINDOW_SEC,
) -> list[IncomePoint]:
    """
    Daily income over the trailing window, oldest day first.

    Payouts and other negative changes are ignored; a day with only
    negative changes does not appear.
    """
    cutoff = now - window_sec
    by_day: dict[date, float] = {}
    for tx in transactions:
        if tx.created_at < cutoff or tx.created_at > now:
            continue
        if tx.changed_balance <= 0:
            continue
        day = datetime.fromtimestamp(tx.created_at, tz=timezone.utc).date()
        by_day[day] = by_day.get(day, 0.0) + tx.changed_balance
    return [IncomePoint(date=day_label(day), income=income) for day, income in sorted(by_day.items())]


def describe_transaction(tx: Transaction, currency: str) -> str:
    if tx.type == TX_TYPE_PAYOUT:
        return f"{abs(tx.changed_balance):.6f} {currency} paid out"
    if tx.type == TX_TYPE_REVENUE:
        return f"{tx.changed_balance:.6f} {currency} earned from mining"
    return f"{tx.changed_balance:.6f} {currency} balance change ({tx.type or 'unknown'})"


def transactions_to_activity(
    transactions: Iterable[Transaction],
    currency: str,
    now: float,
    window_sec: int = ACTIVITY_WINDOW_SEC,
) -> list[ActivityEvent]:
    cutoff = now - window_sec
    return [
        ActivityEvent(
            id=str(tx.id),
            type=ActivityType.PAYMENT,
            description=describe_transaction(tx, currency),
            timestamp=float(tx.created_at),
        )
        for tx in transactions
        if cutoff <= tx.created_at <= now
    ]


def merge_activity(real: list[ActivityEvent], simulated: list[ActivityEvent]) -> list[ActivityEvent]:
    """Real events plus simulated worker status events, newest first."""
    worker_events = [e for e in simulated if e.type in WORKER_EVENT_TYPES]
    return sort_activity(real + worker_events)


def sort_activity(events: list[ActivityEvent]) -> list[ActivityEvent]:
    return sorted(events, key=lambda e: e.timestamp, reverse=True)
