"""
Pytest tests for transaction mapping: income aggregation and the activity feed.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from backend_minewatch.mining.models import ActivityEvent, ActivityType, Transaction
from backend_minewatch.mining.transactions import (
    aggregate_income,
    day_label,
    describe_transaction,
    merge_activity,
    transactions_to_activity,
)

# 2024-10-05 12:00:00 UTC
NOON = datetime(2024, 10, 5, 12, tzinfo=timezone.utc).timestamp()
HOUR = 3600
DAY = 24 * HOUR


def _tx(id: int, type: str, amount: float, created_at: float) -> Transaction:
    return Transaction(id=id, type=type, changed_balance=amount, created_at=int(created_at))


def test_day_label():
    assert day_label(datetime(2024, 10, 5).date()) == "Oct 5"
    assert day_label(datetime(2024, 1, 15).date()) == "Jan 15"


def test_income_sums_positive_changes_per_day():
    txs = [
        _tx(1, "revenue", 0.001, NOON - HOUR),
        _tx(2, "revenue", 0.002, NOON - 2 * HOUR),
        _tx(3, "payout", -0.0005, NOON - 3 * HOUR),
    ]
    points = aggregate_income(txs, now=NOON)
    assert len(points) == 1
    assert points[0].date == "Oct 5"
    assert points[0].income == pytest.approx(0.003)


def test_income_chronological_and_windowed():
    txs = [
        _tx(1, "revenue", 0.004, NOON - DAY),
        _tx(2, "revenue", 0.001, NOON - 3 * DAY),
        _tx(3, "revenue", 0.5, NOON - 8 * DAY),  # outside the 7 day window
        _tx(4, "revenue", 0.002, NOON),
    ]
    points = aggregate_income(txs, now=NOON)
    assert [p.date for p in points] == ["Oct 2", "Oct 4", "Oct 5"]
    assert [p.income for p in points] == pytest.approx([0.001, 0.004, 0.002])


def test_income_payout_only_day_is_omitted():
    assert aggregate_income([_tx(1, "payout", -0.01, NOON - HOUR)], now=NOON) == []


def test_describe_transaction():
    assert describe_transaction(_tx(1, "payout", -0.01, NOON), "BTC") == "0.010000 BTC paid out"
    assert describe_transaction(_tx(1, "revenue", 0.002, NOON), "BTC") == "0.002000 BTC earned from mining"
    assert describe_transaction(_tx(1, "fee", -0.0001, NOON), "BTC") == "-0.000100 BTC balance change (fee)"


def test_transactions_to_activity_last_24h():
    txs = [
        _tx(1, "payout", -0.01, NOON - HOUR),
        _tx(2, "revenue", 0.002, NOON - 2 * DAY),
    ]
    events = transactions_to_activity(txs, "bitcoin", now=NOON)
    assert [e.id for e in events] == ["1"]
    assert events[0].type is ActivityType.PAYMENT
    assert events[0].simulated is False


def test_merge_keeps_only_simulated_worker_events_newest_first():
    real = [ActivityEvent("1", ActivityType.PAYMENT, "paid", NOON - 5 * HOUR)]
    simulated = [
        ActivityEvent("sim-1", ActivityType.PAYMENT, "fake payment", NOON - HOUR, simulated=True),
        ActivityEvent("sim-2", ActivityType.WORKER_ONLINE, "rig up", NOON - 2 * HOUR, simulated=True),
        ActivityEvent("sim-3", ActivityType.WORKER_OFFLINE, "rig down", NOON - 8 * HOUR, simulated=True),
        ActivityEvent("sim-4", ActivityType.ADVISOR_UPDATE, "advice", NOON, simulated=True),
    ]
    merged = merge_activity(real, simulated)
    assert [e.id for e in merged] == ["sim-2", "1", "sim-3"]
