"""
Market snapshot models: USD price and trend per currency symbol.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass(frozen=True)
class MarketPrice:
    usd_price: float
    trend: Trend = Trend.STABLE

    def to_dict(self) -> dict[str, Any]:
        return {"usd_price": self.usd_price, "trend": self.trend.value}


@dataclass(frozen=True)
class MarketSnapshot:
    """Prices keyed by currency symbol ("bitcoin", "ethereum", ...)."""

    prices: dict[str, MarketPrice]
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def get(self, currency: str) -> MarketPrice | None:
        return self.prices.get(currency)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {symbol: p.to_dict() for symbol, p in self.prices.items()}
        out["timestamp"] = self.timestamp
        return out
