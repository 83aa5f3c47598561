"""Pagination response schemas.

Cursor pages serialise as::

    {"items": [...], "pagination": {"limit": 10, "nextCursor": "...", "hasMore": true}}

Offset pages (the search fallback of the items listing) carry page numbers
and a total count instead of a cursor.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Cursor pagination metadata."""

    model_config = ConfigDict(populate_by_name=True)

    limit: int = Field(description="Effective page size after clamping")
    next_cursor: str | None = Field(
        default=None,
        alias="nextCursor",
        description="Opaque cursor for the next page (null on the last page)",
    )
    has_more: bool = Field(alias="hasMore", description="Whether more items exist")


class CursorPage(BaseModel, Generic[T]):
    """Cursor-paginated list response."""

    items: list[T] = Field(description="Items in this page")
    pagination: PaginationMeta

    @classmethod
    def build(
        cls,
        items: list[T],
        *,
        limit: int,
        next_cursor: str | None,
        has_more: bool,
    ) -> CursorPage[T]:
        return cls(
            items=items,
            pagination=PaginationMeta(limit=limit, next_cursor=next_cursor, has_more=has_more),
        )


class OffsetMeta(BaseModel):
    """Offset pagination metadata."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(ge=1, description="Current page (1-indexed)")
    limit: int = Field(ge=1, description="Page size")
    total: int = Field(ge=0, description="Total matching items")
    total_pages: int = Field(alias="totalPages", ge=0, description="Number of pages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")


class OffsetPage(BaseModel, Generic[T]):
    """Offset-paginated list response."""

    items: list[T]
    pagination: OffsetMeta


__all__ = [
    "CursorPage",
    "OffsetMeta",
    "OffsetPage",
    "PaginationMeta",
]
