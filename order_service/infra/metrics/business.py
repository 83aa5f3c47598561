"""Application-level counters and histograms."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

from order_service.infra.metrics.prometheus import REGISTRY

# ============================================================================
# Error and Exception Metrics
# ============================================================================

errors_total = Counter(
    "errors_total",
    "Total number of errors by type and endpoint",
    ["error_type", "endpoint", "status_code"],
    registry=REGISTRY,
)

exceptions_unhandled_total = Counter(
    "exceptions_unhandled_total",
    "Total number of unhandled exceptions",
    ["exception_type", "endpoint"],
    registry=REGISTRY,
)

validation_errors_total = Counter(
    "validation_errors_total",
    "Total number of validation errors",
    ["endpoint", "field"],
    registry=REGISTRY,
)

# ============================================================================
# Retry Metrics
# ============================================================================

retry_attempts_total = Counter(
    "retry_attempts_total",
    "Total number of retry attempts",
    ["operation", "attempt_number"],
    registry=REGISTRY,
)

retry_exhausted_total = Counter(
    "retry_exhausted_total",
    "Total number of operations that exhausted all retries",
    ["operation"],
    registry=REGISTRY,
)

retry_success_after_failure_total = Counter(
    "retry_success_after_failure_total",
    "Total number of operations that succeeded after retry",
    ["operation", "attempts_needed"],
    registry=REGISTRY,
)

# ============================================================================
# Query Metrics
# ============================================================================

slow_queries_total = Counter(
    "slow_queries_total",
    "Total number of database queries slower than the configured threshold",
    ["operation"],
    registry=REGISTRY,
)

keyset_page_rows = Histogram(
    "keyset_page_rows",
    "Rows returned per keyset page",
    ["resource"],
    buckets=(0, 1, 5, 10, 25, 50, 100),
    registry=REGISTRY,
)

keyset_pages_total = Counter(
    "keyset_pages_total",
    "Keyset pages served, split by whether more rows remain",
    ["resource", "has_more"],
    registry=REGISTRY,
)

relation_batch_parents = Histogram(
    "relation_batch_parents",
    "Parent ids per bulk relation load",
    ["relation"],
    buckets=(0, 1, 5, 10, 25, 50, 100),
    registry=REGISTRY,
)
