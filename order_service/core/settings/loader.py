"""Cached settings accessors.

Each settings model is read from the environment once per process. Tests that
change the environment call ``clear_all_caches()`` before and after.
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .postgres import PostgresSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    return AppSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> PostgresSettings:
    return PostgresSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Limits for every cursor and offset listing."""
    return PaginationSettings()


def clear_all_caches() -> None:
    for loader in (get_app_settings, get_db_settings, get_logging_settings, get_pagination_settings):
        loader.cache_clear()
