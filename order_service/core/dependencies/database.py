"""Database dependencies for FastAPI route handlers.

Route handlers take a request-scoped session with ``Depends(get_db_session)``.
Code outside a request (startup checks, scripts) uses
``order_service.infra.database.get_async_session`` directly; both share the
same session factory.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from order_service.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Yields:
        Database session that is automatically closed after request.

    Example:
        @router.get("/orders")
        async def list_orders(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with get_async_session() as session:
        yield session
