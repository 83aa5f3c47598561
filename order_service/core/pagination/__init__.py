"""Keyset (cursor) pagination over ``(timestamp, id)``.

Pages are ordered by ``(timestamp DESC, id DESC)``. Each response carries an
opaque cursor for the last returned row; passing it back continues the scan
with a seek predicate instead of an OFFSET, so rows are neither repeated nor
skipped when many share a timestamp.

REST usage:
    page = await fetch_page(
        session,
        select(Order),
        sort_column=Order.created_at,
        id_column=Order.id,
        limit=limit,
        cursor=cursor,
    )
    return CursorPage.build(
        [OrderResponse.model_validate(o) for o in page.rows],
        limit=page.limit,
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )
"""

from order_service.core.pagination.cursor import (
    CursorCodec,
    MalformedCursorError,
    PageCursor,
)
from order_service.core.pagination.filters import KeysetFilter
from order_service.core.pagination.keyset import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    KeysetPage,
    clamp_limit,
    fetch_page,
)
from order_service.core.pagination.schemas import (
    CursorPage,
    OffsetMeta,
    OffsetPage,
    PaginationMeta,
)

__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "CursorCodec",
    "CursorPage",
    "KeysetFilter",
    "KeysetPage",
    "MalformedCursorError",
    "OffsetMeta",
    "OffsetPage",
    "PageCursor",
    "PaginationMeta",
    "clamp_limit",
    "fetch_page",
]
