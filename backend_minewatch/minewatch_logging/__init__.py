"""
Structured logging for Backend Minewatch.

JSON logs with timestamp, event_type, and request/account context.
Use get_logger() in all modules for aggregation-friendly output.
"""

from backend_minewatch.minewatch_logging.logger import bind_account, configure_logging, get_logger

__all__ = ["bind_account", "configure_logging", "get_logger"]
