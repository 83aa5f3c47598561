"""Structured logging for the order service.

- ``setup_logging`` / ``configure_logging``: dictConfig + QueueHandler setup
- ``JSONFormatter``: JSON Lines output with trace correlation
- ``set_log_context`` and friends: request-scoped fields injected into records
- ``get_lazy_logger``: debug messages built only when the level is enabled
"""

from __future__ import annotations

from .config import configure_logging, setup_logging, shutdown
from .context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from .formatters import JSONFormatter
from .lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
