"""
Simulated pool data for when the pool is unreachable or no credentials exist.

Values stay in plausible ranges (account hashrate ~10^14 H/s, 85% of workers
online, 0-10% stale shares). History generators perturb around a base value
(±10% hashrate, ±20% income) so a simulated continuation stays close to the
last real reading. The mining service tags everything produced here as
simulated.
"""

from __future__ import annotations

import random
import time
from datetime import datetime, timedelta, timezone

from backend_minewatch.mining.models import (
    ActivityEvent,
    ActivityType,
    BalanceSnapshot,
    HashratePoint,
    HashrateSnapshot,
    IncomePoint,
    MiningData,
    WorkerRecord,
)
from backend_minewatch.mining.transactions import day_label

WORKER_ONLINE_PROBABILITY = 0.85
HASHRATE_HISTORY_POINTS = 24
INCOME_HISTORY_DAYS = 7
HASHRATE_VARIATION = 0.10
INCOME_VARIATION = 0.20
TH = 1e12


class FallbackGenerator:
    """Seedable generator; pass seed for deterministic output in tests."""

    def __init__(self, seed: int | None = None, worker_count: int = 25) -> None:
        self._rng = random.Random(seed)
        self._worker_count = worker_count

    def balance(self) -> BalanceSnapshot:
        rng = self._rng
        return BalanceSnapshot(
            balance=rng.random() * 0.1,
            immature_balance=rng.random() * 0.01,
            paid=rng.random() * 10,
            total_income=rng.random() * 11,
            yesterday_income=rng.random() * 0.005,
            estimated_today_income=rng.random() * 0.002,
        )

    def hashrate(self, name: str) -> HashrateSnapshot:
        rng = self._rng
        return HashrateSnapshot(
            name=name,
            hash_rate=(rng.random() * 20 + 110) * TH,
            h1_hash_rate=(rng.random() * 20 + 105) * TH,
            h24_hash_rate=(rng.random() * 20 + 100) * TH,
            h24_stale_hash_rate=rng.random() * 2 * TH,
            h24_delay_hash_rate=rng.random() * TH,
        )

    def mining_data(self, account: str, currency: str) -> MiningData:
        return MiningData(
            balance=self.balance(),
            hashrate=self.hashrate(account or "unknown"),
            currency=currency,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    def workers(self, count: int | None = None, now: float | None = None) -> list[WorkerRecord]:
        rng = self._rng
        now = time.time() if now is None else now
        out: list[WorkerRecord] = []
        for i in range(self._worker_count if count is None else count):
            online = rng.random() < WORKER_ONLINE_PROBABILITY
            if online:
                rate = (4 + rng.random()) * TH
                last_share = now - rng.random() * 300
                info = HashrateSnapshot(
                    name=f"rig-{i + 1}",
                    hash_rate=rate,
                    h1_hash_rate=(4 + rng.random()) * TH,
                    h24_hash_rate=rate,
                    h24_stale_hash_rate=rate * rng.random() * 0.1,
                )
            else:
                last_share = now - (3600 + rng.random() * 10000)
                info = HashrateSnapshot(
                    name=f"rig-{i + 1}",
                    hash_rate=0.0,
                    h1_hash_rate=0.0,
                    h24_hash_rate=0.0,
                    h24_stale_hash_rate=0.0,
                )
            out.append(
                WorkerRecord(
                    hash_rate_info=info,
                    last_share_at=last_share,
                    status="active" if online else "inactive",
                    host=f"192.168.1.{100 + i}",
                )
            )
        return out

    def hashrate_history(self, base_hashrate: float, now: float | None = None) -> list[HashratePoint]:
        """24 hourly points, oldest first, each within ±10% of base_hashrate."""
        rng = self._rng
        end = datetime.fromtimestamp(time.time() if now is None else now, tz=timezone.utc)
        points = []
        for i in range(HASHRATE_HISTORY_POINTS):
            variation = (rng.random() * 2 - 1) * HASHRATE_VARIATION * base_hashrate
            ts = end - timedelta(hours=HASHRATE_HISTORY_POINTS - 1 - i)
            points.append(HashratePoint(timestamp=ts.isoformat(), hashrate=base_hashrate + variation))
        return points

    def income_history(self, base_income: float, now: float | None = None) -> list[IncomePoint]:
        """7 daily points, oldest first, each within ±20% of base_income."""
        rng = self._rng
        today = datetime.fromtimestamp(time.time() if now is None else now, tz=timezone.utc).date()
        points = []
        for i in range(INCOME_HISTORY_DAYS):
            variation = (rng.random() * 2 - 1) * INCOME_VARIATION * base_income
            day = today - timedelta(days=INCOME_HISTORY_DAYS - 1 - i)
            points.append(IncomePoint(date=day_label(day), income=base_income + variation))
        return points

    def activity(self, now: float | None = None) -> list[ActivityEvent]:
        now = time.time() if now is None else now
        return [
            ActivityEvent(
                id="sim-1",
                type=ActivityType.PAYMENT,
                description="0.0452 BTC paid to wallet 3FZbgi29...8Cu7",
                timestamp=now - 7200,
                simulated=True,
            ),
            ActivityEvent(
                id="sim-2",
                type=ActivityType.WORKER_ONLINE,
                description="rig-02 is back online after 23m downtime",
                timestamp=now - 18000,
                simulated=True,
            ),
            ActivityEvent(
                id="sim-3",
                type=ActivityType.WORKER_OFFLINE,
                description="rig-05 went offline. Maintenance required.",
                timestamp=now - 28800,
                simulated=True,
            ),
            ActivityEvent(
                id="sim-4",
                type=ActivityType.ADVISOR_UPDATE,
                description="New trading recommendation: Trade BTC for ETH",
                timestamp=now - 43200,
                simulated=True,
            ),
        ]
