"""API router for the orders feature.

Endpoints:
    GET /orders             - Orders newest first, with line items (cursor pagination)
    GET /orders/{order_id}  - One order with its line items
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from order_service.core.database.enums import OrderStatus
from order_service.core.dependencies.database import get_db_session
from order_service.core.dependencies.pagination import CursorPagination
from order_service.core.pagination import CursorPage
from order_service.core.schemas.problem_details import ProblemDetail
from order_service.features.orders.schemas import OrderResponse
from order_service.features.orders.service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get(
    "",
    response_model=CursorPage[OrderResponse],
    summary="List orders",
    responses={400: {"model": ProblemDetail, "description": "Malformed cursor"}},
)
async def list_orders(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    pagination: CursorPagination,
    status: Annotated[
        list[OrderStatus] | None,
        Query(description="Only orders in these statuses (repeatable)"),
    ] = None,
) -> CursorPage[OrderResponse]:
    """List orders with their items, newest first."""
    return await OrderService(session).list_page(
        limit=pagination.limit, cursor=pagination.cursor, status=status
    )


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get an order",
    responses={404: {"model": ProblemDetail, "description": "Order not found"}},
)
async def get_order(
    order_id: int,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> OrderResponse:
    return await OrderService(session).get_order(order_id)
