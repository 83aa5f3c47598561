"""Minimal generic repository for SQLAlchemy models.

Provides lookups, offset search, keyset pages and batched child loading
with explicit session passing. For anything else, use the session directly.

Example:
    class OrderRepository(BaseRepository[Order]):
        def __init__(self) -> None:
            super().__init__(Order)

        async def find_cursor(self, session, *, limit, cursor):
            return await self.paginate_keyset(
                session, select(Order), sort_column=Order.created_at,
                limit=limit, cursor=cursor,
            )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, func, select

from order_service.core.database.exceptions import NotFoundError
from order_service.core.database.relations import load_children_map
from order_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute
    from sqlalchemy.sql import ColumnElement

    from order_service.core.database.filters import StatementFilter
    from order_service.core.pagination import KeysetPage, PageCursor


@dataclass(slots=True, frozen=True)
class SearchResult[T]:
    """Offset search result container.

    Attributes:
        items: Items for the current page
        total: Total count across all pages
        limit: Page size
        offset: Current offset
    """

    items: Sequence[T]
    total: int
    limit: int
    offset: int

    @property
    def page(self) -> int:
        """Current page number (1-indexed)."""
        return (self.offset // self.limit) + 1 if self.limit else 1

    @property
    def pages(self) -> int:
        """Total number of pages."""
        if self.limit == 0:
            return 1
        return (self.total + self.limit - 1) // self.limit

    @property
    def has_next(self) -> bool:
        return self.offset + len(self.items) < self.total

    @property
    def has_prev(self) -> bool:
        return self.offset > 0


class BaseRepository[T]:
    """Generic repository bound to one model class.

    Provides:
        - get(session, id) -> T | None
        - get_or_raise(session, id) -> T (raises NotFoundError)
        - get_many(session, ids) -> dict[id, T]
        - search(session, statement, limit, offset) -> SearchResult[T]
        - paginate_keyset(session, statement, ...) -> KeysetPage[T]
        - load_children(session, ids, child_model, fk) -> dict[id, list[C]]
    """

    __slots__ = ("_lazy", "_logger", "model")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def get(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
        *,
        options: Iterable[Any] | None = None,
    ) -> T | None:
        """Get entity by primary key."""
        if options:
            stmt = select(self.model).where(self._pk_attr() == id).options(*options)
            instance = (await session.execute(stmt)).scalar_one_or_none()
        else:
            instance = await session.get(self.model, id)

        self._lazy.debug(
            lambda: f"db.get: {self.model.__name__}({id}) -> {'found' if instance else 'not found'}"
        )
        return instance

    async def get_or_raise(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
        *,
        options: Iterable[Any] | None = None,
    ) -> T:
        """Get entity by primary key or raise NotFoundError.

        Raises:
            NotFoundError: If entity doesn't exist
        """
        instance = await self.get(session, id, options=options)
        if instance is None:
            self._logger.info(
                "Entity not found",
                extra={
                    "entity": self.model.__name__,
                    "id": str(id),
                    "operation": "db.get_or_raise",
                },
            )
            raise NotFoundError(self.model.__name__, {"id": id})
        return instance

    async def get_many(self, session: AsyncSession, ids: Iterable[Any]) -> dict[Any, T]:
        """Load several entities by primary key in one query, keyed by id."""
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return {}
        pk = self._pk_attr()
        result = await session.execute(select(self.model).where(pk.in_(wanted)))
        found = {getattr(row, pk.key): row for row in result.scalars().all()}

        self._lazy.debug(
            lambda: f"db.get_many: {self.model.__name__} {len(found)}/{len(wanted)} found"
        )
        return found

    async def search(
        self,
        session: AsyncSession,
        statement: Select[tuple[T]],
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> SearchResult[T]:
        """Execute an offset-paginated search with total count.

        Apply filters and ordering to ``statement`` before calling.
        """
        count_stmt = select(func.count()).select_from(statement.order_by(None).subquery())
        total = (await session.execute(count_stmt)).scalar_one()

        result = await session.execute(statement.limit(limit).offset(offset))
        items = result.scalars().all()

        search_result = SearchResult(items=items, total=total, limit=limit, offset=offset)
        self._lazy.debug(
            lambda: f"db.search: {self.model.__name__}(limit={limit}, offset={offset}) "
            f"-> {len(items)}/{total} items, page {search_result.page}/{search_result.pages}"
        )
        return search_result

    async def paginate_keyset(
        self,
        session: AsyncSession,
        statement: Select[tuple[T]],
        *,
        sort_column: InstrumentedAttribute[Any],
        limit: int | None,
        cursor: str | PageCursor | None = None,
        filters: Iterable[StatementFilter] = (),
        id_column: InstrumentedAttribute[Any] | None = None,
        max_limit: int | None = None,
    ) -> KeysetPage[T]:
        """Fetch one keyset page ordered by ``(sort_column DESC, id DESC)``.

        Args:
            session: Database session
            statement: Base select (predicates only, no ordering or limit)
            sort_column: Timestamp column used as the primary sort key
            limit: Requested page size, clamped into ``[1, 100]``
            cursor: Opaque cursor from the previous page
            filters: Additional StatementFilters (search, status, ...)
            id_column: Tie-breaker column, defaults to the primary key
            max_limit: Lower upper bound for the page size

        Raises:
            MalformedCursorError: ``cursor`` cannot be decoded.
        """
        from order_service.core.pagination import MAX_LIMIT, fetch_page

        page = await fetch_page(
            session,
            statement,
            sort_column=sort_column,
            id_column=id_column if id_column is not None else self._pk_attr(),
            limit=limit,
            cursor=cursor,
            filters=filters,
            max_limit=max_limit or MAX_LIMIT,
        )
        self._lazy.debug(
            lambda: f"db.paginate_keyset: {self.model.__name__}(limit={page.limit}) "
            f"-> {len(page.rows)} rows, has_more={page.has_more}"
        )
        return page

    async def load_children[C](
        self,
        session: AsyncSession,
        parent_ids: Iterable[Any],
        child_model: type[C],
        foreign_key: InstrumentedAttribute[Any],
        *,
        order_by: Sequence[ColumnElement[Any] | InstrumentedAttribute[Any]] = (),
    ) -> dict[Any, list[C]]:
        """Batch-load children of this repository's rows (see ``load_children_map``)."""
        return await load_children_map(
            session, parent_ids, child_model, foreign_key, order_by=order_by
        )

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        """Get primary key attribute for the model."""
        return self.model.id  # type: ignore[attr-defined]
