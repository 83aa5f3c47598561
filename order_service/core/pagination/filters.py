"""Keyset seek filter.

Adds the continuation predicate, the ``(sort DESC, id DESC)`` ordering
and a ``LIMIT limit + 1`` probe to a select statement:

    WHERE sort_ts < :ts OR (sort_ts = :ts AND id < :id)
    ORDER BY sort_ts DESC, id DESC
    LIMIT :limit + 1
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, and_, or_

from order_service.core.database.filters import StatementFilter

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute

    from order_service.core.pagination.cursor import PageCursor


class KeysetFilter(StatementFilter):
    """Seek past ``cursor`` in descending ``(sort_column, id_column)`` order.

    Any ORDER BY already on the statement is replaced; the keyset order is
    the only one the cursor is valid for.

    Example:
        stmt = KeysetFilter(Order.created_at, Order.id, position, limit=10).apply(
            select(Order)
        )
    """

    def __init__(
        self,
        sort_column: InstrumentedAttribute[Any],
        id_column: InstrumentedAttribute[Any],
        cursor: PageCursor | None,
        *,
        limit: int,
    ) -> None:
        self.sort_column = sort_column
        self.id_column = id_column
        self.cursor = cursor
        self.limit = limit

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.cursor is not None:
            statement = statement.where(
                or_(
                    self.sort_column < self.cursor.timestamp,
                    and_(
                        self.sort_column == self.cursor.timestamp,
                        self.id_column < self.cursor.id,
                    ),
                )
            )
        return (
            statement.order_by(None)
            .order_by(self.sort_column.desc(), self.id_column.desc())
            .limit(self.limit + 1)
        )
