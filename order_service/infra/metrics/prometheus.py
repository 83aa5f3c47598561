"""Request and database collectors on the service's own registry.

``/metrics`` renders ``REGISTRY`` only, so library default collectors
(process, GC) are not exported.
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

REGISTRY = CollectorRegistry()

# Keyset pages are single indexed range scans; most land under 50ms
LATENCY_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)

http_requests_total = Counter(
    "http_requests_total",
    "Requests served, by route template and status code",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "Handler time per route template",
    ["method", "endpoint"],
    buckets=LATENCY_BUCKETS,
    registry=REGISTRY,
)

database_query_duration_seconds = Histogram(
    "database_query_duration_seconds",
    "Statement execution time, by statement kind",
    ["operation"],
    buckets=LATENCY_BUCKETS,
    registry=REGISTRY,
)
database_connections_active = Gauge(
    "database_connections_active",
    "Pool connections currently checked out",
    registry=REGISTRY,
)
database_pool_invalidations_total = Counter(
    "database_pool_invalidations_total",
    "Pooled connections discarded as broken",
    registry=REGISTRY,
)
