"""Lazy evaluation support for logging.

Debug messages on hot paths (every page fetch, every bulk load) are passed as
callables and only rendered when the logger is enabled for that level.
"""

from __future__ import annotations

import logging
from typing import Any


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that evaluates callable messages and args on demand.

    Example:
        logger = get_lazy_logger(__name__)
        logger.debug(lambda: f"db.page: fetched {len(rows)} rows")
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return

        if callable(msg):
            msg = msg()
        if args:
            args = tuple(arg() if callable(arg) else arg for arg in args)

        super().log(level, msg, *args, **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Get a logger with lazy evaluation support.

    Args:
        name: Logger name (usually __name__).
        **context: Optional context bound to every record.

    Returns:
        Logger adapter with lazy evaluation support.
    """
    return LazyLoggerAdapter(logging.getLogger(name), context or {})
