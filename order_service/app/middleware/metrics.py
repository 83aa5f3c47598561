"""Metrics middleware for HTTP request instrumentation with trace correlation."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

from order_service.infra.metrics.prometheus import (
    http_request_duration_seconds,
    http_requests_total,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import Request, Response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request counts and durations per route template.

    Route templates (``/api/v1/orders/{order_id}``) keep label cardinality
    low. Durations carry the current trace id as an exemplar when a span is
    active. An ``X-Process-Time`` header reports the handler time.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        method = request.method
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Process-Time"] = f"{time.perf_counter() - start_time:.6f}"
            return response
        finally:
            duration = time.perf_counter() - start_time
            route = request.scope.get("route")
            endpoint = getattr(route, "path", None) or request.url.path

            http_requests_total.labels(
                method=method, endpoint=endpoint, status=str(status_code)
            ).inc()

            span_context = trace.get_current_span().get_span_context()
            histogram = http_request_duration_seconds.labels(method=method, endpoint=endpoint)
            if span_context.is_valid:
                histogram.observe(duration, exemplar={"trace_id": format(span_context.trace_id, "032x")})
            else:
                histogram.observe(duration)
