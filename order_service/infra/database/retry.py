"""Retry policy for reads that hit transient database failures.

Only failures that are likely to succeed on a second try are retried:
a dropped or invalidated connection, a timeout, or a driver error whose
message points at the network. Everything else (including a malformed
cursor) propagates on the first attempt.

Usage:
    page = await execute_with_retry(
        session,
        "orders.find_cursor",
        lambda: repository.find_cursor(session, limit=limit, cursor=cursor),
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from order_service.core.settings import get_db_settings
from order_service.utils.retry import retry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from order_service.core.settings.postgres import PostgresSettings

logger = logging.getLogger(__name__)

TRANSIENT_MESSAGE_MARKERS = (
    "econnrefused",
    "econnreset",
    "etimedout",
    "timeout",
    "network",
    "connection",
)


def is_transient_error(exc: BaseException) -> bool:
    """Whether ``exc`` is a database failure worth retrying."""
    if isinstance(exc, (ConnectionError, TimeoutError, PoolTimeoutError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    if isinstance(exc, (OperationalError, DBAPIError, OSError)):
        message = str(exc).lower()
        return any(marker in message for marker in TRANSIENT_MESSAGE_MARKERS)
    return False


async def execute_with_retry[R](
    session: AsyncSession,
    operation: str,
    func: Callable[[], Awaitable[R]],
    *,
    settings: PostgresSettings | None = None,
) -> R:
    """Run ``func`` under the query retry policy.

    The session is rolled back after a transient failure so the next attempt
    starts from a clean transaction.

    Args:
        session: Session ``func`` uses
        operation: Name for logs and retry metrics
        func: Zero-argument coroutine factory, called once per attempt
        settings: Database settings (defaults to the cached ones)

    Raises:
        RetryError: Every attempt failed with a transient error.
    """
    settings = settings or get_db_settings()

    async def _rollback(exc: Exception, attempt: int) -> None:
        logger.warning(
            "Transient database error, rolling back before retry",
            extra={"operation": operation, "attempt": attempt, "error": str(exc)},
        )
        await session.rollback()

    @retry(
        max_attempts=settings.query_retry_attempts,
        initial_delay=settings.query_retry_initial_delay,
        max_delay=settings.query_retry_max_delay,
        jitter=True,
        retry_if=is_transient_error,
        on_retry=_rollback,
        operation=operation,
    )
    async def _attempt() -> R:
        return await func()

    return await _attempt()


__all__ = ["TRANSIENT_MESSAGE_MARKERS", "execute_with_retry", "is_transient_error"]
