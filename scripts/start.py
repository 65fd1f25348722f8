"""Startup script for the FastAPI application.

    python scripts/start.py

Or run uvicorn directly:
    uvicorn sitetracker.main:app --reload --port 3333
"""

import sys
from pathlib import Path

import structlog
import uvicorn

sys.path.append(str(Path(__file__).parent.parent))

from sitetracker.core.config import get_settings  # noqa: E402
from sitetracker.core.logging import configure_logging  # noqa: E402

logger = structlog.get_logger()


def main():
    """Main function to start the application."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    logger.info(
        "Starting Production Site Tracker",
        host=settings.HOST,
        port=settings.PORT,
        debug=settings.DEBUG,
        reload=settings.RELOAD,
        environment=settings.ENVIRONMENT,
    )

    uvicorn.run(
        "sitetracker.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
