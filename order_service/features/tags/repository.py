"""Repository for the tags feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from order_service.core.database.filters import SearchFilter
from order_service.core.database.relations import load_related_map
from order_service.core.database.repository import BaseRepository
from order_service.features.tags.models import Tag, item_tags

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class TagRepository(BaseRepository[Tag]):
    """Repository for Tag model.

    Inherits from BaseRepository:
        - get(session, id) -> Tag | None
        - get_or_raise(session, id) -> Tag
        - get_many(session, ids) -> dict[int, Tag]

    Feature-specific methods below.
    """

    def __init__(self) -> None:
        super().__init__(Tag)

    async def list_with_search(
        self,
        session: AsyncSession,
        *,
        search: str | None = None,
    ) -> Sequence[Tag]:
        """List all tags ordered by name, optionally filtered by a literal name substring."""
        stmt = SearchFilter(Tag.name, search).apply(select(Tag)).order_by(Tag.name.asc())

        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(lambda: f"db.list_with_search(search={search!r}) -> {len(items)} items")
        return items

    async def get_items_tags_bulk(
        self,
        session: AsyncSession,
        item_ids: Iterable[int],
    ) -> dict[int, list[Tag]]:
        """Tags of many items in one joined query, each list ordered by tag name.

        Items without tags are absent from the result.
        """
        return await load_related_map(
            session,
            item_ids,
            item_tags.c.item_id,
            Tag,
            item_tags.c.tag_id,
            order_by=(Tag.name.asc(),),
        )


_tag_repository: TagRepository | None = None


def get_tag_repository() -> TagRepository:
    """Get the shared TagRepository instance."""
    global _tag_repository
    if _tag_repository is None:
        _tag_repository = TagRepository()
    return _tag_repository
