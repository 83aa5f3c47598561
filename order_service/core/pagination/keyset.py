"""Keyset page reader.

``fetch_page`` runs one query per page: it over-fetches a single probe row
to learn whether another page exists, trims it, and derives the next cursor
from the last row actually returned.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from order_service.core.pagination.cursor import CursorCodec, PageCursor
from order_service.core.pagination.filters import KeysetFilter
from order_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

    from order_service.core.database.filters import StatementFilter

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

_lazy = get_lazy_logger(__name__)


def clamp_limit(
    limit: int | None,
    *,
    default: int = DEFAULT_LIMIT,
    maximum: int = MAX_LIMIT,
) -> int:
    """Clamp a requested page size into ``[1, maximum]``.

    ``None`` means "not given" and yields ``default`` (itself clamped).
    """
    maximum = min(max(1, maximum), MAX_LIMIT)
    if limit is None:
        limit = default
    return min(max(1, limit), maximum)


@dataclass(slots=True, frozen=True)
class KeysetPage[T]:
    """One page of a keyset scan.

    Attributes:
        rows: At most ``limit`` rows in ``(sort DESC, id DESC)`` order
        next_cursor: Position of the last row, only when ``has_more``
        has_more: Whether at least one more row follows this page
        limit: Effective (clamped) page size
    """

    rows: Sequence[T]
    next_cursor: str | None
    has_more: bool
    limit: int

    @classmethod
    def empty(cls, limit: int) -> KeysetPage[T]:
        return cls(rows=[], next_cursor=None, has_more=False, limit=limit)

    def map[U](self, func: Callable[[T], U]) -> KeysetPage[U]:
        """Same page metadata, rows transformed by ``func``."""
        return KeysetPage(
            rows=[func(row) for row in self.rows],
            next_cursor=self.next_cursor,
            has_more=self.has_more,
            limit=self.limit,
        )


def resolve_cursor(cursor: str | PageCursor | None) -> PageCursor | None:
    """Decode a client token; ``None`` and ``""`` both mean the first page."""
    if isinstance(cursor, PageCursor):
        return cursor
    if not cursor:
        return None
    return CursorCodec.decode(cursor)


async def fetch_page[T](
    session: AsyncSession,
    statement: Select[tuple[T]],
    *,
    sort_column: InstrumentedAttribute[Any],
    id_column: InstrumentedAttribute[Any],
    limit: int | None,
    cursor: str | PageCursor | None = None,
    filters: Iterable[StatementFilter] = (),
    max_limit: int = MAX_LIMIT,
) -> KeysetPage[T]:
    """Fetch one page of ``statement`` in ``(sort_column DESC, id_column DESC)`` order.

    Args:
        session: Database session
        statement: Base select over a single entity, without ordering or limit
        sort_column: Timestamp column the scan is ordered by
        id_column: Unique integer column used as the tie-breaker
        limit: Requested page size, clamped into ``[1, max_limit]``
        cursor: Token from a previous page (or a decoded ``PageCursor``)
        filters: Extra predicates applied before the seek condition
        max_limit: Upper bound for the page size (never above 100)

    Returns:
        KeysetPage with the rows, ``has_more`` and the next cursor

    Raises:
        MalformedCursorError: ``cursor`` does not decode to a valid position.
    """
    page_size = clamp_limit(limit, maximum=max_limit)
    position = resolve_cursor(cursor)

    for statement_filter in filters:
        statement = statement_filter.apply(statement)
    statement = KeysetFilter(sort_column, id_column, position, limit=page_size).apply(statement)

    result = await session.execute(statement)
    rows = list(result.scalars().all())

    if not rows:
        _lazy.debug(lambda: f"keyset.page: {sort_column} -> empty (cursor={position})")
        return KeysetPage.empty(page_size)

    has_more = len(rows) > page_size
    if has_more:
        rows = rows[:page_size]

    next_cursor = None
    if has_more:
        next_cursor = CursorCodec.encode(
            CursorCodec.from_row(rows[-1], sort_column.key, id_column.key)
        )

    _lazy.debug(
        lambda: f"keyset.page: {sort_column} -> {len(rows)} rows, has_more={has_more}"
    )
    return KeysetPage(rows=rows, next_cursor=next_cursor, has_more=has_more, limit=page_size)
