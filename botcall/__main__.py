"""
Registry server entry point.

    python -m botcall
    botcall-server

Configuration comes from the environment (see botcall.config).
"""

import logging

import uvicorn

from botcall.config import settings_from_env
from botcall.transport import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    """Serve the registry until SIGINT/SIGTERM."""
    settings = settings_from_env()
    app = create_app(settings)

    logger.info(f"BotCall discovery registry starting on {settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
    )
    logger.info("Server stopped")


if __name__ == "__main__":
    main()
