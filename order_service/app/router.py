"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from order_service.core.settings import get_app_settings
from order_service.features.categories.router import router as categories_router
from order_service.features.health.router import router as health_router
from order_service.features.items.router import router as items_router
from order_service.features.metrics.router import router as metrics_router
from order_service.features.orders.router import router as orders_router
from order_service.features.tags.router import router as tags_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from order_service.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
    """
    app_settings = app_settings or get_app_settings()
    api_prefix = app_settings.api_prefix

    # Include metrics endpoint (no prefix - accessible at /metrics)
    app.include_router(metrics_router)

    app.include_router(items_router, prefix=api_prefix)
    app.include_router(orders_router, prefix=api_prefix)
    app.include_router(tags_router, prefix=api_prefix)
    app.include_router(categories_router, prefix=api_prefix)
    app.include_router(health_router, prefix=api_prefix)

    logger.info("Routers configured", extra={"api_prefix": api_prefix})
