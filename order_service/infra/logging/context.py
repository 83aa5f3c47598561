"""Request-scoped logging context backed by contextvars.

Fields set here (request id, path, ...) are copied onto every log record
emitted in the same async task by ``ContextInjectingFilter``.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        set_log_context(request_id="abc-123", path="/api/v1/orders")
        logger.info("Listing orders")  # record carries request_id and path
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Drop all context fields for the current task."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Copy the current logging context onto each record.

    Attached to the root logger by ``configure_logging``; attributes already
    present on the record are left untouched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
