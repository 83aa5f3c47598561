"""Cursor pagination parameters for list routes.

Out-of-range ``limit`` values are clamped rather than rejected, so the query
parameter carries no ``ge``/``le`` bounds; a non-integer ``limit`` is still a
422 from request validation.

Usage:
    from order_service.core.dependencies.pagination import CursorPagination

    @router.get("/orders")
    async def list_orders(pagination: CursorPagination) -> CursorPage[OrderResponse]:
        page = await service.list_page(limit=pagination.limit, cursor=pagination.cursor)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query
from pydantic import BaseModel, Field

from order_service.core.pagination import clamp_limit
from order_service.core.settings import get_pagination_settings


class CursorParams(BaseModel):
    """Resolved keyset pagination parameters.

    Attributes:
        limit: Effective page size, already clamped.
        cursor: Opaque cursor from the previous page, ``None`` for the first page.
    """

    limit: int = Field(ge=1, le=100)
    cursor: str | None = None

    model_config = {"frozen": True}


def get_cursor_params(
    limit: Annotated[
        int | None,
        Query(description="Page size; values outside 1-100 are clamped"),
    ] = None,
    cursor: Annotated[
        str | None,
        Query(description="Cursor returned as nextCursor by the previous page"),
    ] = None,
) -> CursorParams:
    """Resolve ``limit``/``cursor`` with defaults from pagination settings."""
    settings = get_pagination_settings()
    effective_limit = clamp_limit(
        limit,
        default=settings.default_limit,
        maximum=settings.max_limit,
    )
    return CursorParams(limit=effective_limit, cursor=cursor or None)


CursorPagination = Annotated[CursorParams, Depends(get_cursor_params)]
