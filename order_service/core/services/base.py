"""Base service class for business logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from order_service.infra.database.retry import execute_with_retry
from order_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession


class BaseService:
    """Base class for request-scoped services.

    Loggers:
        - self.logger: Standard logger for INFO/WARNING/ERROR (always evaluated)
        - self._lazy: Lazy logger for DEBUG (zero overhead when DEBUG disabled)

    Example:
        class OrderService(BaseService):
            async def list_page(self, *, limit, cursor):
                return await self.run_query(
                    "orders.list_page",
                    lambda: self._repo.find_cursor(self._session, limit=limit, cursor=cursor),
                )
    """

    def __init__(self, session: AsyncSession) -> None:
        class_name = self.__class__.__name__
        self._session = session
        self.logger = logging.getLogger(class_name)
        self._lazy = get_lazy_logger(class_name)

    async def run_query[R](self, operation: str, func: Callable[[], Awaitable[R]]) -> R:
        """Run a read under the transient-error retry policy."""
        return await execute_with_retry(self._session, operation, func)
