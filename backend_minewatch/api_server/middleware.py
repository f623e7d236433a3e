"""
HTTP middleware: request logging and correlation IDs.

Binds request_id, method and path into structlog contextvars so every log
line emitted while serving a request carries them, and logs one
request_completed event with status and timing. Query strings are not
logged (they may carry apiKey).
"""

from __future__ import annotations

import time
import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response

from backend_minewatch.minewatch_logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def request_logging_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )
    started = time.monotonic()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request_failed", elapsed_ms=round((time.monotonic() - started) * 1000, 2))
        raise
    response.headers[REQUEST_ID_HEADER] = request_id
    logger.info(
        "request_completed",
        status=response.status_code,
        elapsed_ms=round((time.monotonic() - started) * 1000, 2),
    )
    structlog.contextvars.clear_contextvars()
    return response
