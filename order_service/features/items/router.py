"""API router for the items feature.

Endpoints:
    GET    /items                    - Active items, newest first (cursor, or offset when ``page`` is given)
    GET    /items/deleted            - Soft-deleted items, most recently deleted first
    GET    /items/{item_id}          - One active item with designs, tags and categories
    DELETE /items/{item_id}          - Soft-delete an item
    POST   /items/{item_id}/restore  - Restore a soft-deleted item
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from order_service.core.dependencies.database import get_db_session
from order_service.core.dependencies.pagination import CursorPagination
from order_service.core.exceptions import BadRequestException
from order_service.core.pagination import CursorPage, OffsetPage
from order_service.core.schemas.problem_details import ProblemDetail
from order_service.features.items.schemas import ItemDetailResponse, ItemResponse
from order_service.features.items.service import ItemService

router = APIRouter(prefix="/items", tags=["items"])

SearchQuery = Annotated[
    str | None,
    Query(max_length=200, description="Case-insensitive match on name, color, fabric, features"),
]


@router.get(
    "",
    response_model=CursorPage[ItemDetailResponse] | OffsetPage[ItemDetailResponse],
    summary="List items",
    description=(
        "Cursor pagination by default. Passing `page` switches to offset pagination "
        "with a total count; `page` and `cursor` cannot be combined."
    ),
    responses={400: {"model": ProblemDetail, "description": "Malformed cursor or page with cursor"}},
)
async def list_items(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    pagination: CursorPagination,
    search: SearchQuery = None,
    page: Annotated[
        int | None,
        Query(ge=1, description="Switch to offset pagination and return this page"),
    ] = None,
) -> CursorPage[ItemDetailResponse] | OffsetPage[ItemDetailResponse]:
    """List active items with designs, tags and categories."""
    service = ItemService(session)
    if page is not None:
        if pagination.cursor:
            raise BadRequestException(
                detail="Use either page or cursor, not both",
                type="conflicting-pagination",
            )
        return await service.list_offset(page=page, limit=pagination.limit, search=search)
    return await service.list_page(
        limit=pagination.limit, cursor=pagination.cursor, search=search
    )


@router.get(
    "/deleted",
    response_model=CursorPage[ItemResponse],
    summary="List soft-deleted items",
    responses={400: {"model": ProblemDetail, "description": "Malformed cursor"}},
)
async def list_deleted_items(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    pagination: CursorPagination,
    search: SearchQuery = None,
) -> CursorPage[ItemResponse]:
    service = ItemService(session)
    return await service.list_deleted_page(
        limit=pagination.limit, cursor=pagination.cursor, search=search
    )


@router.get(
    "/{item_id}",
    response_model=ItemDetailResponse,
    summary="Get an item",
    responses={404: {"model": ProblemDetail, "description": "Item not found"}},
)
async def get_item(
    item_id: int,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ItemDetailResponse:
    return await ItemService(session).get_item(item_id)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Soft-delete an item",
    description="Sets `deleted_at`; the item then appears only in `/items/deleted`.",
    responses={404: {"model": ProblemDetail, "description": "Item not found or already deleted"}},
)
async def delete_item(
    item_id: int,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> None:
    await ItemService(session).delete_item(item_id)
    await session.commit()


@router.post(
    "/{item_id}/restore",
    response_model=ItemDetailResponse,
    summary="Restore a soft-deleted item",
    responses={404: {"model": ProblemDetail, "description": "Item not found"}},
)
async def restore_item(
    item_id: int,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ItemDetailResponse:
    item = await ItemService(session).restore_item(item_id)
    await session.commit()
    return item
