"""Database infrastructure: async engine, sessions and the query retry policy.

Example:
    from order_service.infra.database import get_async_session

    async with get_async_session() as session:
        result = await session.execute(...)
"""

from order_service.infra.database.retry import execute_with_retry, is_transient_error
from order_service.infra.database.session import (
    AsyncSessionLocal,
    close_database,
    engine,
    get_async_session,
    init_database,
    instrument_engine,
)

__all__ = [
    "AsyncSessionLocal",
    "close_database",
    "engine",
    "execute_with_retry",
    "get_async_session",
    "init_database",
    "instrument_engine",
    "is_transient_error",
]
