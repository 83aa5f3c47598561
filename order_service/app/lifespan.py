"""Application lifespan management.

Startup order:
1. Logging
2. Database (connectivity check with retry, optional table creation)

Shutdown runs in reverse: the engine is disposed, then the log listener is
flushed.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from order_service.core.settings import get_app_settings
from order_service.infra.database.session import close_database, init_database
from order_service.infra.logging.config import setup_logging, shutdown

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start and stop the service's resources around the app's lifetime."""
    setup_logging()
    app_settings = get_app_settings()

    logger.info(
        "Starting application",
        extra={
            "service": app_settings.service_name,
            "version": app_settings.version,
            "environment": app_settings.environment,
        },
    )
    await init_database()
    logger.info("Application startup complete")

    try:
        yield
    finally:
        logger.info("Shutting down application")
        await close_database()
        logger.info("Application shutdown complete")
        shutdown()
