"""Database session management (psycopg3 async, aiosqlite fallback)."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from order_service.core.settings import get_app_settings, get_db_settings
from order_service.infra.metrics.prometheus import (
    database_connections_active,
    database_pool_invalidations_total,
    database_query_duration_seconds,
)
from order_service.infra.metrics.tracking import track_slow_query
from order_service.utils.retry import retry

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

db_settings = get_db_settings()
app_settings = get_app_settings()

_SQL_OPERATIONS = ("SELECT", "INSERT", "UPDATE", "DELETE", "BEGIN", "COMMIT", "ROLLBACK")


def _engine_kwargs() -> dict[str, Any]:
    if db_settings.is_configured:
        kwargs = db_settings.sqlalchemy_engine_kwargs()
        kwargs["echo"] = db_settings.echo or app_settings.debug
        return kwargs
    # SQLite: no server-side pool options.
    return {"echo": db_settings.echo}


engine: AsyncEngine = create_async_engine(db_settings.get_sqlalchemy_url(), **_engine_kwargs())

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


def statement_operation(statement: str | None) -> str:
    """Leading SQL keyword of ``statement`` for metric labels."""
    parts = statement.split(None, 1) if statement else []
    if not parts:
        return "UNKNOWN"
    head = parts[0].upper()
    return head if head in _SQL_OPERATIONS else "UNKNOWN"


# ============================================================================
# Pool instrumentation
# ============================================================================


@event.listens_for(engine.sync_engine.pool, "checkout")
def _receive_checkout(dbapi_conn: Any, connection_record: Any, connection_proxy: Any) -> None:
    _ = dbapi_conn, connection_record, connection_proxy
    database_connections_active.inc()


@event.listens_for(engine.sync_engine.pool, "checkin")
def _receive_checkin(dbapi_conn: Any, connection_record: Any) -> None:
    _ = dbapi_conn, connection_record
    database_connections_active.dec()


@event.listens_for(engine.sync_engine.pool, "invalidate")
def _receive_invalidate(dbapi_conn: Any, connection_record: Any, exception: Any) -> None:
    _ = dbapi_conn, connection_record
    database_pool_invalidations_total.inc()
    logger.warning(
        "Database connection invalidated",
        extra={"reason": type(exception).__name__ if exception else "explicit"},
    )


# ============================================================================
# Query timing
# ============================================================================


def _before_cursor_execute(
    conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
) -> None:
    _ = conn, cursor, statement, parameters, executemany
    context._query_start_time = time.perf_counter()


def _after_cursor_execute(
    conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
) -> None:
    """Record query duration, linking the current trace as an exemplar."""
    _ = conn, cursor, parameters, executemany
    started = getattr(context, "_query_start_time", None)
    if started is None:
        return
    duration = time.perf_counter() - started
    operation = statement_operation(statement)

    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        database_query_duration_seconds.labels(operation=operation).observe(
            duration, exemplar={"trace_id": format(span_context.trace_id, "032x")}
        )
    else:
        database_query_duration_seconds.labels(operation=operation).observe(duration)

    if duration > db_settings.slow_query_threshold:
        track_slow_query(operation)
        logger.warning(
            "Slow query",
            extra={"operation": operation, "duration_ms": round(duration * 1000, 2)},
        )


def instrument_engine(target: AsyncEngine) -> None:
    """Attach query timing listeners to ``target`` (idempotent)."""
    sync_engine = target.sync_engine
    if not event.contains(sync_engine, "before_cursor_execute", _before_cursor_execute):
        event.listen(sync_engine, "before_cursor_execute", _before_cursor_execute)
        event.listen(sync_engine, "after_cursor_execute", _after_cursor_execute)


instrument_engine(engine)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Yields:
        Database session that is automatically closed.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(Order))
            orders = result.scalars().all()
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@retry(
    max_attempts=db_settings.startup_retry_attempts,
    initial_delay=db_settings.startup_retry_delay,
    max_delay=30.0,
    jitter=True,
    stop_after_delay=db_settings.startup_retry_timeout,
    operation="database.startup",
)
async def init_database() -> None:
    """Initialize the database connection with retry logic.

    Runs ``SELECT 1`` against the engine, retrying with exponential backoff
    while the database is still coming up. When ``create_tables_on_startup``
    is set, all mapped tables are created (local development).

    Raises:
        RetryError: The database stayed unreachable for every attempt.
    """
    url = engine.url.render_as_string(hide_password=True)
    logger.info(
        "Initializing database connection with retry",
        extra={
            "max_attempts": db_settings.startup_retry_attempts,
            "initial_delay": db_settings.startup_retry_delay,
        },
    )

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        if db_settings.create_tables_on_startup:
            from order_service.core.database import Base
            from order_service.features import models  # noqa: F401

            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables ensured")

        logger.info(
            "Database connection established successfully",
            extra={"url": url, "dialect": engine.dialect.name},
        )
    except Exception as e:
        logger.error("Failed to connect to database", extra={"url": url, "error": str(e)})
        raise


async def close_database() -> None:
    """Close database connection and cleanup resources.

    This should be called during application shutdown.
    """
    logger.info("Closing database connection")

    try:
        await engine.dispose()
        logger.info("Database connection closed successfully")
    except Exception as e:
        logger.exception("Error closing database connection", extra={"error": str(e)})


__all__ = [
    "AsyncSessionLocal",
    "close_database",
    "engine",
    "get_async_session",
    "init_database",
    "instrument_engine",
    "statement_operation",
]
