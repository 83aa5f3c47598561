"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics exposed (all on the service's own registry):
    - http_requests_total, http_request_duration_seconds
    - database_query_duration_seconds, database_connections_active
    - keyset_page_rows, keyset_pages_total, relation_batch_parents
    - errors_total, retry_attempts_total, retry_exhausted_total, slow_queries_total
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from order_service.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus metrics in the text exposition format."""
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
