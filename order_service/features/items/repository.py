"""Repository for the items feature."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from order_service.core.database import NotFoundError, SearchFilter
from order_service.core.database.repository import BaseRepository
from order_service.features.categories.repository import get_category_repository
from order_service.features.items.models import Item, ItemDesign
from order_service.features.tags.repository import get_tag_repository

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from order_service.core.database import SearchResult
    from order_service.core.pagination import KeysetPage, PageCursor
    from order_service.features.categories.models import Category
    from order_service.features.tags.models import Tag

SEARCH_FIELDS = (Item.name, Item.color, Item.fabric, Item.special_features)

DESIGN_ORDER = (ItemDesign.is_primary.desc(), ItemDesign.display_order.asc(), ItemDesign.id.asc())


@dataclass(slots=True)
class ItemWithRelations:
    """An item together with its batch-loaded designs, tags and categories."""

    item: Item
    designs: list[ItemDesign] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)


class ItemRepository(BaseRepository[Item]):
    """Repository for Item model.

    Listing methods:
        - find_cursor: active items, keyset on created_at, enriched
        - find_deleted_cursor: soft-deleted items, keyset on deleted_at
        - find_offset: active items, offset page with total count
        - find_by_ids: many items keyed by id
    """

    def __init__(self) -> None:
        super().__init__(Item)

    @staticmethod
    def active_statement() -> Select[tuple[Item]]:
        return select(Item).where(Item.deleted_at.is_(None))

    @staticmethod
    def deleted_statement() -> Select[tuple[Item]]:
        return select(Item).where(Item.deleted_at.is_not(None))

    async def find_cursor(
        self,
        session: AsyncSession,
        *,
        limit: int | None,
        cursor: str | PageCursor | None = None,
        search: str | None = None,
    ) -> KeysetPage[ItemWithRelations]:
        """One page of active items, newest first, with relations attached.

        Uses one query for the page and one per relation (designs, tags,
        categories), whatever the page size.

        Raises:
            MalformedCursorError: ``cursor`` cannot be decoded.
        """
        page = await self.paginate_keyset(
            session,
            self.active_statement(),
            sort_column=Item.created_at,
            limit=limit,
            cursor=cursor,
            filters=[SearchFilter(list(SEARCH_FIELDS), search)],
        )
        if not page.rows:
            return page.map(ItemWithRelations)

        enriched = {row.item.id: row for row in await self.enrich(session, page.rows)}
        return page.map(lambda item: enriched[item.id])

    async def find_deleted_cursor(
        self,
        session: AsyncSession,
        *,
        limit: int | None,
        cursor: str | PageCursor | None = None,
        search: str | None = None,
    ) -> KeysetPage[Item]:
        """One page of soft-deleted items, most recently deleted first."""
        return await self.paginate_keyset(
            session,
            self.deleted_statement(),
            sort_column=Item.deleted_at,
            limit=limit,
            cursor=cursor,
            filters=[SearchFilter(list(SEARCH_FIELDS), search)],
        )

    async def find_offset(
        self,
        session: AsyncSession,
        *,
        page: int,
        limit: int,
        search: str | None = None,
    ) -> SearchResult[Item]:
        """Offset page of active items in the same order as the cursor listing."""
        stmt = SearchFilter(list(SEARCH_FIELDS), search).apply(self.active_statement())
        stmt = stmt.order_by(Item.created_at.desc(), Item.id.desc())
        return await self.search(session, stmt, limit=limit, offset=(page - 1) * limit)

    async def find_by_ids(self, session: AsyncSession, ids: Iterable[int]) -> dict[int, Item]:
        """Items (active or deleted) keyed by id; unknown ids are skipped."""
        return await self.get_many(session, ids)

    async def get_active(self, session: AsyncSession, item_id: int) -> Item:
        """Active item by id.

        Raises:
            NotFoundError: No item with that id, or it is soft-deleted.
        """
        item = await self.get(session, item_id)
        if item is None or item.is_deleted:
            self._logger.info(
                "Entity not found",
                extra={"entity": "Item", "id": str(item_id), "operation": "db.get_active"},
            )
            raise NotFoundError("Item", {"id": item_id})
        return item

    async def soft_delete(self, session: AsyncSession, item_id: int) -> Item:
        """Mark an active item deleted; it moves to the deleted listing.

        Raises:
            NotFoundError: No item with that id, or it is already deleted.
        """
        item = await self.get_active(session, item_id)
        item.soft_delete()
        await session.flush()

        self._lazy.debug(lambda: f"db.soft_delete: Item({item_id}) at {item.deleted_at}")
        return item

    async def restore(self, session: AsyncSession, item_id: int) -> Item:
        """Clear ``deleted_at``. Restoring an active item changes nothing.

        Raises:
            NotFoundError: No item with that id.
        """
        item = await self.get_or_raise(session, item_id)
        if item.is_deleted:
            item.restore()
            await session.flush()

        self._lazy.debug(lambda: f"db.restore: Item({item_id})")
        return item

    async def enrich(
        self,
        session: AsyncSession,
        items: Sequence[Item],
    ) -> list[ItemWithRelations]:
        """Attach designs, tags and categories with one query per relation."""
        if not items:
            return []
        ids: list[Any] = [item.id for item in items]

        designs = await self.load_children(
            session, ids, ItemDesign, ItemDesign.item_id, order_by=DESIGN_ORDER
        )
        tags = await get_tag_repository().get_items_tags_bulk(session, ids)
        categories = await get_category_repository().get_items_categories_bulk(session, ids)

        return [
            ItemWithRelations(
                item=item,
                designs=designs.get(item.id, []),
                tags=tags.get(item.id, []),
                categories=categories.get(item.id, []),
            )
            for item in items
        ]


_item_repository: ItemRepository | None = None


def get_item_repository() -> ItemRepository:
    """Get the shared ItemRepository instance."""
    global _item_repository
    if _item_repository is None:
        _item_repository = ItemRepository()
    return _item_repository
