"""Logging configuration setup.

- dictConfig for the root logger level and third-party loggers
- QueueHandler on the root logger, QueueListener owning the real handlers
- ContextInjectingFilter so request context reaches every record
- JSONL output for machine parsing, plain text for local runs
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from collections.abc import Callable
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from order_service.infra.logging.context import ContextInjectingFilter
from order_service.infra.logging.formatters import DEFAULT_FMT_KEYS, JSONFormatter

if TYPE_CHECKING:
    from order_service.core.settings.logs import LoggingSettings

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_LOGGING_INITIALIZED = False

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def shutdown() -> None:
    """Stop the QueueListener, flushing pending records."""
    global _log_queue, _listener

    if _listener is not None:
        _listener.stop()
        _listener = None
    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from order_service.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    log_config = {**log_settings.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    include_uvicorn: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "order-service",
) -> None:
    """Configure logging with dictConfig and the QueueHandler pattern.

    All handlers sit behind a single QueueHandler on the root logger;
    application loggers propagate up to it.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file_path: Path to log file. None disables file logging.
        json_logs: Emit JSON Lines instead of plain text.
        console_enabled: Enable the stderr handler.
        include_context: Inject the request logging context into records.
        capture_warnings: Forward Python warnings to logging.
        include_uvicorn: Let uvicorn loggers propagate to the root handlers.
        file_max_bytes: Maximum log file size before rotation.
        file_backup_count: Number of rotated log files to keep.
        service_name: Static ``service`` field on JSON records.
    """
    shutdown()

    if capture_warnings:
        logging.captureWarnings(True)

    path = Path(file_path) if file_path else None
    if path:
        path.parent.mkdir(parents=True, exist_ok=True)

    loggers: dict[str, Any] = {}
    if include_uvicorn:
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            loggers[name] = {"handlers": [], "propagate": True}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "loggers": loggers,
            "root": {"level": log_level.upper(), "handlers": []},
        }
    )

    _setup_queue_logging(
        console_enabled=console_enabled,
        file_path=path,
        file_max_bytes=file_max_bytes,
        file_backup_count=file_backup_count,
        include_context=include_context,
        formatter_factory=lambda: _build_formatter(json_logs, service_name),
    )
    logger.debug(
        "Logging configured",
        extra={"log_level": log_level, "json_logs": json_logs, "file_path": str(path) if path else None},
    )


def _build_formatter(json_logs: bool, service_name: str) -> logging.Formatter:
    if json_logs:
        return JSONFormatter(fmt_keys=dict(DEFAULT_FMT_KEYS), static={"service": service_name})
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def _setup_queue_logging(
    *,
    console_enabled: bool,
    file_path: Path | None,
    file_max_bytes: int,
    file_backup_count: int,
    include_context: bool,
    formatter_factory: Callable[[], logging.Formatter],
) -> None:
    """Create the real handlers behind a QueueListener and queue the root logger."""
    global _log_queue, _listener

    _log_queue = Queue()
    handlers: list[logging.Handler] = []

    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter_factory())
        handlers.append(console_handler)

    if file_path:
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=file_max_bytes,
            backupCount=file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter_factory())
        handlers.append(file_handler)

    if handlers:
        _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown)

    root = logging.getLogger()
    queue_handler = QueueHandler(_log_queue)
    # Logger-level filters do not see propagated records; handler filters do.
    if include_context:
        queue_handler.addFilter(ContextInjectingFilter())
    root.addHandler(queue_handler)
