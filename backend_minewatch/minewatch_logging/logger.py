"""
Structured logging for Minewatch.

Every line is one JSON object with event_type, level, timestamp and logger,
plus whatever context is bound (request_id from the HTTP middleware, account
and currency from bind_account). Pool API keys must never reach a log line:
known secret keys are masked before rendering as a second line of defence.

LOG_LEVEL (default INFO) and LOG_FORMAT (json | console) are read when
configure_logging() runs, which happens once on first import.

Stdlib logging and structlog only; no backend_minewatch imports here so any
module can import the logger without cycles.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

SECRET_KEYS = frozenset({"api_key", "apikey", "apiKey", "secret", "f2p_api_secret"})
MASK = "***"


def _add_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _event_to_event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type, mirrored in message."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "event_type" in event_dict:
        event_dict.setdefault("message", str(event_dict["event_type"]))
    return event_dict


def _mask_secrets(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in SECRET_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = MASK
    return event_dict


def _renderer(log_format: str) -> Any:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.processors.JSONRenderer()


def configure_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structlog for the process. Arguments override LOG_LEVEL / LOG_FORMAT."""
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    fmt = (log_format or os.getenv("LOG_FORMAT") or "json").strip().lower()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            _add_timestamp,
            _event_to_event_type,
            _mask_secrets,
            _renderer(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger. Pass the event type first and context as keywords:

        logger = get_logger(__name__)
        logger.info("pool_call_ok", path="/assets/balance", account="alice", elapsed_ms=84.2)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_account(account: str, currency: str | None = None) -> structlog.BoundLogger:
    """Logger with account (and currency) bound for one refresh cycle."""
    log = get_logger("backend_minewatch.mining").bind(account=account)
    return log.bind(currency=currency) if currency else log
