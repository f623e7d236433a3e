"""
Main entrypoint: FastAPI server for the mining dashboard.

Env: F2POOL_API_KEY, F2POOL_USERNAME (optional defaults), API_HOST, API_PORT,
LOG_LEVEL, LOG_FORMAT. See backend_minewatch/config/env.py for the rest.

Equivalent: uvicorn backend_minewatch.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os

from backend_minewatch.minewatch_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Build the app from env settings and serve it with uvicorn."""
    import uvicorn

    from backend_minewatch.api_server.server import create_app
    from backend_minewatch.config import get_settings

    settings = get_settings()
    if not settings.has_default_credentials:
        logger.warning(
            "main_no_default_credentials",
            message="F2POOL_API_KEY / F2POOL_USERNAME not set; requests without credentials get simulated data",
        )
    app = create_app(settings)
    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
