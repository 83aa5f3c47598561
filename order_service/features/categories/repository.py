"""Repository for the categories feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from order_service.core.database.relations import load_related_map
from order_service.core.database.repository import BaseRepository
from order_service.features.categories.models import Category, item_categories

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model."""

    def __init__(self) -> None:
        super().__init__(Category)

    async def list_ordered(self, session: AsyncSession) -> Sequence[Category]:
        """All categories by display_order, then name."""
        stmt = select(Category).order_by(Category.display_order.asc(), Category.name.asc())
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(lambda: f"db.list_ordered() -> {len(items)} items")
        return items

    async def get_items_categories_bulk(
        self,
        session: AsyncSession,
        item_ids: Iterable[int],
    ) -> dict[int, list[Category]]:
        """Categories of many items in one joined query.

        Each list is ordered by display_order, then name. Items without
        categories are absent from the result.
        """
        return await load_related_map(
            session,
            item_ids,
            item_categories.c.item_id,
            Category,
            item_categories.c.category_id,
            order_by=(Category.display_order.asc(), Category.name.asc()),
        )


_category_repository: CategoryRepository | None = None


def get_category_repository() -> CategoryRepository:
    """Get the shared CategoryRepository instance."""
    global _category_repository
    if _category_repository is None:
        _category_repository = CategoryRepository()
    return _category_repository
