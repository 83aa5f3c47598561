"""Service layer for the items feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from order_service.core.pagination import CursorPage, OffsetMeta, OffsetPage
from order_service.core.services import BaseService
from order_service.features.categories.schemas import CategoryResponse
from order_service.features.items.repository import (
    ItemRepository,
    ItemWithRelations,
    get_item_repository,
)
from order_service.features.items.schemas import (
    ItemDesignResponse,
    ItemDetailResponse,
    ItemResponse,
)
from order_service.features.tags.schemas import TagResponse
from order_service.infra.metrics.tracking import track_keyset_page

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


def to_detail(row: ItemWithRelations) -> ItemDetailResponse:
    return ItemDetailResponse(
        **ItemResponse.model_validate(row.item).model_dump(),
        designs=[ItemDesignResponse.model_validate(d) for d in row.designs],
        tags=[TagResponse.model_validate(t) for t in row.tags],
        categories=[CategoryResponse.model_validate(c) for c in row.categories],
    )


class ItemService(BaseService):
    """Item listings and lookups.

    Every read runs under the transient-error retry policy.
    """

    def __init__(self, session: AsyncSession, repo: ItemRepository | None = None) -> None:
        super().__init__(session)
        self._repo = repo or get_item_repository()

    async def list_page(
        self,
        *,
        limit: int | None,
        cursor: str | None = None,
        search: str | None = None,
    ) -> CursorPage[ItemDetailResponse]:
        page = await self.run_query(
            "items.find_cursor",
            lambda: self._repo.find_cursor(
                self._session, limit=limit, cursor=cursor, search=search
            ),
        )
        track_keyset_page("items", len(page.rows), page.has_more)
        self._lazy.debug(
            lambda: f"service.list_page(search={search!r}) -> {len(page.rows)} items"
        )
        return CursorPage[ItemDetailResponse].build(
            [to_detail(row) for row in page.rows],
            limit=page.limit,
            next_cursor=page.next_cursor,
            has_more=page.has_more,
        )

    async def list_deleted_page(
        self,
        *,
        limit: int | None,
        cursor: str | None = None,
        search: str | None = None,
    ) -> CursorPage[ItemResponse]:
        page = await self.run_query(
            "items.find_deleted_cursor",
            lambda: self._repo.find_deleted_cursor(
                self._session, limit=limit, cursor=cursor, search=search
            ),
        )
        track_keyset_page("items_deleted", len(page.rows), page.has_more)
        return CursorPage[ItemResponse].build(
            [ItemResponse.model_validate(item) for item in page.rows],
            limit=page.limit,
            next_cursor=page.next_cursor,
            has_more=page.has_more,
        )

    async def list_offset(
        self,
        *,
        page: int,
        limit: int,
        search: str | None = None,
    ) -> OffsetPage[ItemDetailResponse]:
        """Numbered page of active items, enriched like the cursor listing."""

        async def _load() -> tuple[list[ItemWithRelations], int]:
            result = await self._repo.find_offset(
                self._session, page=page, limit=limit, search=search
            )
            return await self._repo.enrich(self._session, result.items), result.total

        rows, total = await self.run_query("items.find_offset", _load)
        total_pages = (total + limit - 1) // limit
        return OffsetPage[ItemDetailResponse](
            items=[to_detail(row) for row in rows],
            pagination=OffsetMeta(
                page=page,
                limit=limit,
                total=total,
                total_pages=total_pages,
                has_next=page < total_pages,
                has_prev=page > 1,
            ),
        )

    async def get_item(self, item_id: int) -> ItemDetailResponse:
        """Active item with its relations.

        Raises:
            NotFoundError: Unknown or soft-deleted item.
        """

        async def _load() -> ItemWithRelations:
            item = await self._repo.get_active(self._session, item_id)
            (row,) = await self._repo.enrich(self._session, [item])
            return row

        return to_detail(await self.run_query("items.get", _load))

    async def delete_item(self, item_id: int) -> None:
        """Soft-delete an item. The caller commits.

        Raises:
            NotFoundError: Unknown or already deleted item.
        """
        item = await self._repo.soft_delete(self._session, item_id)
        self.logger.info(
            "Item soft deleted",
            extra={"item_id": item_id, "deleted_at": item.deleted_at.isoformat()},
        )

    async def restore_item(self, item_id: int) -> ItemDetailResponse:
        """Bring a soft-deleted item back into the active listing.

        Raises:
            NotFoundError: Unknown item.
        """
        item = await self._repo.restore(self._session, item_id)
        (row,) = await self._repo.enrich(self._session, [item])
        self.logger.info("Item restored", extra={"item_id": item_id})
        return to_detail(row)
