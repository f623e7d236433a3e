"""
Advisor rules: map (currency, balance, market snapshot) to a recommendation.

Deterministic; no ML. First matching rule wins:
1. BTC > 64000 USD, balance > 0.1, BTC trending up            -> SELL
2. BTC > 58000, ETH trending down below 2900, balance > 0.05  -> TRADE
3. BTC < 57000 or BTC trending down                           -> HODL
4. otherwise                                                  -> HODL (stable)

The accuracy profile is a fixed placeholder, not measured from outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from backend_minewatch.market.models import MarketPrice, MarketSnapshot, Trend

DEFAULT_BALANCE = 0.05
DEFAULT_BTC_PRICE = 60000.0
DEFAULT_ETH_PRICE = 3000.0

SELL_BTC_PRICE = 64000.0
SELL_MIN_BALANCE = 0.1
TRADE_BTC_PRICE = 58000.0
TRADE_ETH_PRICE = 2900.0
TRADE_MIN_BALANCE = 0.05
HODL_BTC_PRICE = 57000.0

ACCURACY_PROFILE: dict[str, int] = {"hodl": 92, "sell": 87, "trade": 79}

STABLE_REASON = "Market conditions stable, accumulation phase."


class Recommendation(str, Enum):
    HODL = "HODL"
    SELL = "SELL"
    TRADE = "TRADE"


@dataclass(frozen=True)
class AdvisorVerdict:
    recommendation: Recommendation
    reason: str
    accuracy: dict[str, int] = field(default_factory=lambda: dict(ACCURACY_PROFILE))
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "recommendation": {
                "recommendation": self.recommendation.value,
                "reason": self.reason,
            },
            "accuracy": dict(self.accuracy),
            "timestamp": self.timestamp,
        }


def _price(market: MarketSnapshot | None, symbol: str, default_price: float) -> MarketPrice:
    found = market.get(symbol) if market is not None else None
    if found is None:
        return MarketPrice(usd_price=default_price, trend=Trend.STABLE)
    return found


def recommend(
    currency: str,
    balance: float | None = None,
    market: MarketSnapshot | None = None,
) -> AdvisorVerdict:
    """Pure rule evaluation; missing inputs take the DEFAULT_* values."""
    bal = DEFAULT_BALANCE if balance is None else balance
    btc = _price(market, "bitcoin", DEFAULT_BTC_PRICE)
    eth = _price(market, "ethereum", DEFAULT_ETH_PRICE)
    unit = currency.upper()

    if btc.usd_price > SELL_BTC_PRICE and bal > SELL_MIN_BALANCE and btc.trend is Trend.UP:
        return AdvisorVerdict(
            Recommendation.SELL,
            f"BTC price ({btc.usd_price:.0f} USD) is high and trend is up. "
            f"Consider taking profits on balance ({bal:.4f} {unit}).",
        )
    if (
        btc.usd_price > TRADE_BTC_PRICE
        and eth.trend is Trend.DOWN
        and eth.usd_price < TRADE_ETH_PRICE
        and bal > TRADE_MIN_BALANCE
    ):
        return AdvisorVerdict(
            Recommendation.TRADE,
            f"BTC price is strong ({btc.usd_price:.0f} USD), while ETH price ({eth.usd_price:.0f} USD) "
            f"shows potential entry point. Consider trading a portion of {bal:.4f} {unit} for ETH.",
        )
    if btc.usd_price < HODL_BTC_PRICE or btc.trend is Trend.DOWN:
        return AdvisorVerdict(
            Recommendation.HODL,
            f"BTC price ({btc.usd_price:.0f} USD) is currently low or trending down. "
            "Continue accumulation strategy.",
        )
    return AdvisorVerdict(Recommendation.HODL, STABLE_REASON)
