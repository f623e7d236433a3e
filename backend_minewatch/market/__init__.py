"""
Market data: simulated USD prices and trends per currency.
"""

from backend_minewatch.market.models import MarketPrice, MarketSnapshot, Trend
from backend_minewatch.market.service import MarketService

__all__ = ["MarketPrice", "MarketService", "MarketSnapshot", "Trend"]
