"""JSON Lines formatter with trace correlation."""
from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from opentelemetry import trace

# LogRecord attributes that are never copied into the output as extras.
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
    }
)

DEFAULT_FMT_KEYS = {"level": "levelname", "logger": "name", "message": "message"}


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Output always carries a UTC ``timestamp`` with millisecond precision,
    the keys in ``fmt_keys``, the ``static`` fields, the active OpenTelemetry
    trace/span ids when a span is recording, and every extra attribute set on
    the record (request context, ``extra={...}`` from the call site).

    Example output:
        {"level": "INFO", "logger": "repository.Order", "message": "Order not found",
         "timestamp": "2025-01-01T00:00:00.123Z", "service": "order-service", "request_id": "..."}
    """

    def __init__(
        self,
        fmt_keys: dict[str, str] | None = None,
        static: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.fmt_keys = fmt_keys or dict(DEFAULT_FMT_KEYS)
        self.static = static or {}

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()

        data: dict[str, Any] = {
            key: getattr(record, attr, None) for key, attr in self.fmt_keys.items()
        }
        data["timestamp"] = (
            datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            data["trace_id"] = format(span_context.trace_id, "032x")
            data["span_id"] = format(span_context.span_id, "016x")

        # Newlines are escaped so a record stays on one line.
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info).replace("\n", "\\n")
        if record.stack_info:
            data["stack_trace"] = record.stack_info.replace("\n", "\\n")

        data.update(self.static)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in data:
                data[key] = value

        return json.dumps(data, ensure_ascii=False, default=str)
