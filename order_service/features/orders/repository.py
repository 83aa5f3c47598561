"""Repository for the orders feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from order_service.core.database import Attached, CollectionFilter, attach_children
from order_service.core.database.repository import BaseRepository
from order_service.core.pagination import KeysetPage
from order_service.features.orders.models import Order, OrderItem

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from order_service.core.database.enums import OrderStatus
    from order_service.core.pagination import PageCursor

type OrderWithItems = Attached[Order, OrderItem]

ITEM_ORDER = (OrderItem.id.asc(),)


class OrderRepository(BaseRepository[Order]):
    """Repository for Order model."""

    def __init__(self) -> None:
        super().__init__(Order)

    async def find_cursor(
        self,
        session: AsyncSession,
        *,
        limit: int | None,
        cursor: str | PageCursor | None = None,
        status: Sequence[OrderStatus] | None = None,
    ) -> KeysetPage[OrderWithItems]:
        """One page of orders, newest first, each with its order items.

        Two queries in total: the page and one batched load of order items.

        Args:
            session: Database session
            limit: Requested page size (clamped)
            cursor: Cursor from the previous page
            status: Only orders in one of these statuses (None means any)

        Raises:
            MalformedCursorError: ``cursor`` cannot be decoded.
        """
        page = await self.paginate_keyset(
            session,
            select(Order),
            sort_column=Order.created_at,
            limit=limit,
            cursor=cursor,
            filters=[CollectionFilter(Order.status, status)],
        )
        rows = await attach_children(
            session, page.rows, OrderItem, OrderItem.order_id, order_by=ITEM_ORDER
        )
        return KeysetPage(
            rows=rows,
            next_cursor=page.next_cursor,
            has_more=page.has_more,
            limit=page.limit,
        )

    async def get_with_items(self, session: AsyncSession, order_id: int) -> OrderWithItems:
        """Order by primary key with its order items.

        Raises:
            NotFoundError: No order with that id.
        """
        order = await self.get_or_raise(session, order_id)
        (row,) = await attach_children(
            session, [order], OrderItem, OrderItem.order_id, order_by=ITEM_ORDER
        )
        return row


_order_repository: OrderRepository | None = None


def get_order_repository() -> OrderRepository:
    """Get the shared OrderRepository instance."""
    global _order_repository
    if _order_repository is None:
        _order_repository = OrderRepository()
    return _order_repository
