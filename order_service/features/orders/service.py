"""Service layer for the orders feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from order_service.core.pagination import CursorPage
from order_service.core.services import BaseService
from order_service.features.orders.repository import (
    OrderRepository,
    OrderWithItems,
    get_order_repository,
)
from order_service.features.orders.schemas import OrderItemResponse, OrderResponse
from order_service.infra.metrics.tracking import track_keyset_page

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from order_service.core.database.enums import OrderStatus


def to_response(row: OrderWithItems) -> OrderResponse:
    response = OrderResponse.model_validate(row.parent)
    return response.model_copy(
        update={"items": [OrderItemResponse.model_validate(i) for i in row.children]}
    )


class OrderService(BaseService):
    """Order listings and lookups under the query retry policy."""

    def __init__(self, session: AsyncSession, repo: OrderRepository | None = None) -> None:
        super().__init__(session)
        self._repo = repo or get_order_repository()

    async def list_page(
        self,
        *,
        limit: int | None,
        cursor: str | None = None,
        status: Sequence[OrderStatus] | None = None,
    ) -> CursorPage[OrderResponse]:
        page = await self.run_query(
            "orders.find_cursor",
            lambda: self._repo.find_cursor(
                self._session, limit=limit, cursor=cursor, status=status
            ),
        )
        track_keyset_page("orders", len(page.rows), page.has_more)
        self._lazy.debug(
            lambda: f"service.list_page(status={status}) -> {len(page.rows)} orders, "
            f"has_more={page.has_more}"
        )
        return CursorPage[OrderResponse].build(
            [to_response(row) for row in page.rows],
            limit=page.limit,
            next_cursor=page.next_cursor,
            has_more=page.has_more,
        )

    async def get_order(self, order_id: int) -> OrderResponse:
        row = await self.run_query(
            "orders.get_with_items",
            lambda: self._repo.get_with_items(self._session, order_id),
        )
        return to_response(row)
