"""Uvicorn entry point: ``python -m order_service.main``."""

from __future__ import annotations

import uvicorn

from order_service.core.settings import get_app_settings, get_logging_settings


def run() -> None:
    app_settings = get_app_settings()
    uvicorn.run(
        "order_service.app.main:app",
        host=app_settings.host,
        port=app_settings.port,
        reload=app_settings.reload,
        log_config=None,
        log_level=get_logging_settings().level.lower(),
    )


if __name__ == "__main__":
    run()
