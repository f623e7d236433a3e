"""
Advisor: rule-based HODL / SELL / TRADE recommendation from market data and balance.
"""

from backend_minewatch.advisor.engine import (
    ACCURACY_PROFILE,
    AdvisorVerdict,
    Recommendation,
    recommend,
)
from backend_minewatch.advisor.service import AdvisorService

__all__ = ["ACCURACY_PROFILE", "AdvisorService", "AdvisorVerdict", "Recommendation", "recommend"]
