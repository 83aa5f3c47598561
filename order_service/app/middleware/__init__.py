"""HTTP middleware and its registration order."""

from __future__ import annotations

from typing import TYPE_CHECKING

from order_service.app.middleware.metrics import MetricsMiddleware
from order_service.app.middleware.request_id import RequestIDMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI


def configure_middleware(app: FastAPI) -> None:
    """Register middleware; the last one added runs first.

    Request ids are assigned before metrics are taken so every log line of a
    request, including the metrics middleware's, carries the id.
    """
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)


__all__ = ["MetricsMiddleware", "RequestIDMiddleware", "configure_middleware"]
