"""
Backend Minewatch: mining pool dashboard service.

Fetches pool statistics (balance, hashrate, workers, income, activity) from
the F2Pool API, keeps the latest snapshot per account in memory, falls back
to simulated data when the pool is unreachable, and serves a rule-based
HODL/SELL/TRADE advisor over simulated market prices.
"""

__version__ = "0.1.0"
