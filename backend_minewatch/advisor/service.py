"""
Advisor service: cached recommendations.

Results are cached per (currency, balance, btc_price) for
ADVISOR_CACHE_TTL_SEC (5 minutes by default). Without an explicit BTC price
the current market snapshot is used; with one, a minimal snapshot
{bitcoin: price, trend up} is evaluated.
"""

from __future__ import annotations

from backend_minewatch.advisor.engine import AdvisorVerdict, recommend
from backend_minewatch.core.ttl_cache import TTLCache
from backend_minewatch.minewatch_logging import get_logger
from backend_minewatch.market.models import MarketPrice, MarketSnapshot, Trend
from backend_minewatch.market.service import MarketService

logger = get_logger(__name__)


class AdvisorService:
    def __init__(self, market: MarketService, ttl_sec: float = 300.0) -> None:
        self._market = market
        self._cache = TTLCache(ttl_sec)

    def get_recommendation(
        self,
        currency: str,
        balance: float | None = None,
        btc_price: float | None = None,
    ) -> AdvisorVerdict:
        key = (currency, balance, btc_price)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if btc_price:
            snapshot = MarketSnapshot(prices={"bitcoin": MarketPrice(usd_price=btc_price, trend=Trend.UP)})
        else:
            snapshot = self._market.get_market_data(currency)
        verdict = recommend(currency, balance, snapshot)
        self._cache.set(key, verdict)
        logger.info(
            "advisor_recommendation",
            currency=currency,
            balance=balance,
            btc_price=btc_price,
            recommendation=verdict.recommendation.value,
        )
        return verdict
