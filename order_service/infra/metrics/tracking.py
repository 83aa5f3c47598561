"""Helper functions for tracking business and operational metrics."""

from __future__ import annotations

import logging
from typing import Any

from order_service.infra.metrics import business

logger = logging.getLogger(__name__)


# ============================================================================
# Error Tracking
# ============================================================================


def track_error(
    error_type: str,
    endpoint: str,
    status_code: int,
    extra: dict[str, Any] | None = None,
) -> None:
    """Track an error occurrence.

    Args:
        error_type: Type of error (e.g., 'malformed-cursor', 'not-found')
        endpoint: API endpoint where error occurred
        status_code: HTTP status code
        extra: Additional context for logging

    Example:
        track_error("malformed-cursor", "/api/v1/orders", 400)
    """
    business.errors_total.labels(
        error_type=error_type,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()

    logger.debug(
        f"Tracked error: {error_type}",
        extra={"endpoint": endpoint, "status_code": status_code, **(extra or {})},
    )


def track_validation_error(endpoint: str, field: str) -> None:
    """Track a validation error for a specific field."""
    business.validation_errors_total.labels(endpoint=endpoint, field=field).inc()


def track_unhandled_exception(exception_type: str, endpoint: str) -> None:
    """Track an unhandled exception."""
    business.exceptions_unhandled_total.labels(
        exception_type=exception_type,
        endpoint=endpoint,
    ).inc()


# ============================================================================
# Retry Tracking
# ============================================================================


def track_retry_attempt(operation: str, attempt_number: int) -> None:
    """Track a retry attempt.

    Args:
        operation: Name of the operation being retried
        attempt_number: Attempt that just failed (1-indexed)
    """
    business.retry_attempts_total.labels(
        operation=operation,
        attempt_number=str(attempt_number),
    ).inc()


def track_retry_exhausted(operation: str) -> None:
    """Track when all retry attempts are exhausted."""
    business.retry_exhausted_total.labels(operation=operation).inc()


def track_retry_success(operation: str, attempts_needed: int) -> None:
    """Track successful operation after retries."""
    business.retry_success_after_failure_total.labels(
        operation=operation,
        attempts_needed=str(attempts_needed),
    ).inc()


# ============================================================================
# Query Tracking
# ============================================================================


def track_slow_query(operation: str) -> None:
    """Track a database query slower than the configured threshold."""
    business.slow_queries_total.labels(operation=operation).inc()


def track_keyset_page(resource: str, rows: int, has_more: bool) -> None:
    """Record the size of a keyset page and whether a next page exists.

    Example:
        track_keyset_page("orders", 10, True)
    """
    business.keyset_page_rows.labels(resource=resource).observe(rows)
    business.keyset_pages_total.labels(
        resource=resource,
        has_more="true" if has_more else "false",
    ).inc()


def track_relation_batch(relation: str, parents: int) -> None:
    """Record how many parent ids one bulk relation load covered."""
    business.relation_batch_parents.labels(relation=relation).observe(parents)
