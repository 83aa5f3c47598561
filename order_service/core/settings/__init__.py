"""Environment-driven settings, one frozen pydantic-settings model per concern.

Read them through the cached loaders:

    from order_service.core.settings import get_pagination_settings

    limit = get_pagination_settings().default_limit

Values come from init kwargs, then environment variables, then ``.env``.
"""

from __future__ import annotations

from .loader import (
    clear_all_caches,
    get_app_settings,
    get_db_settings,
    get_logging_settings,
    get_pagination_settings,
)

__all__ = [
    "clear_all_caches",
    "get_app_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_pagination_settings",
]
