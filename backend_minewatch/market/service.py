"""
Simulated market data.

Random prices in fixed bands (BTC 60-65k, ETH 2.8-3.3k, LTC 80-120,
BCH 200-250 USD) with random up/down trends, cached per requested currency
for MARKET_CACHE_TTL_SEC. No real market feed is queried.
"""

from __future__ import annotations

import random

from backend_minewatch.core.ttl_cache import TTLCache
from backend_minewatch.minewatch_logging import get_logger
from backend_minewatch.market.models import MarketPrice, MarketSnapshot, Trend

logger = get_logger(__name__)

# symbol -> (low, high) USD
PRICE_BANDS: dict[str, tuple[float, float]] = {
    "bitcoin": (60000.0, 65000.0),
    "ethereum": (2800.0, 3300.0),
    "litecoin": (80.0, 120.0),
    "bitcoin-cash": (200.0, 250.0),
}

DEFAULT_MARKET_CURRENCY = "bitcoin"


class MarketService:
    def __init__(self, ttl_sec: float = 60.0, seed: int | None = None) -> None:
        self._cache = TTLCache(ttl_sec)
        self._rng = random.Random(seed)

    def get_market_data(self, currency: str | None = None) -> MarketSnapshot:
        key = (currency or DEFAULT_MARKET_CURRENCY).strip() or DEFAULT_MARKET_CURRENCY
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        snapshot = self._generate()
        self._cache.set(key, snapshot)
        logger.debug(
            "market_snapshot_generated",
            currency=key,
            btc_price=round(snapshot.prices["bitcoin"].usd_price, 2),
        )
        return snapshot

    def _generate(self) -> MarketSnapshot:
        rng = self._rng
        prices = {}
        for symbol, (low, high) in PRICE_BANDS.items():
            prices[symbol] = MarketPrice(
                usd_price=low + rng.random() * (high - low),
                trend=Trend.UP if rng.random() > 0.5 else Trend.DOWN,
            )
        return MarketSnapshot(prices=prices)
