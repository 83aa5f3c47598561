"""Batched relation loading for pages of parent rows.

Loading children one parent at a time costs one query per row (N+1).
These helpers fetch every child of a page in a single ``IN`` query and
group the result in memory:

    designs = await load_children_map(
        session, [i.id for i in items], ItemDesign, ItemDesign.item_id,
        order_by=(ItemDesign.is_primary.desc(), ItemDesign.display_order),
    )
    for item in items:
        item_designs = designs.get(item.id, [])

Parents without children simply have no key in the map; callers default to
an empty list. Children keep the order the query returned them in.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect, select

from order_service.infra.logging import get_lazy_logger
from order_service.infra.metrics.tracking import track_relation_batch

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute
    from sqlalchemy.sql import ColumnElement

_lazy = get_lazy_logger(__name__)


@dataclass(slots=True, frozen=True)
class Attached[P, C]:
    """A parent row together with its ordered children."""

    parent: P
    children: list[C] = field(default_factory=list)


def unique_ids(ids: Iterable[Any]) -> list[Any]:
    """De-duplicate ids while keeping first-seen order."""
    return list(dict.fromkeys(ids))


async def load_children_map[C](
    session: AsyncSession,
    parent_ids: Iterable[Any],
    child_model: type[C],
    foreign_key: InstrumentedAttribute[Any],
    *,
    order_by: Sequence[ColumnElement[Any] | InstrumentedAttribute[Any]] = (),
) -> dict[Any, list[C]]:
    """Load the children of many parents with one query.

    Args:
        session: Database session
        parent_ids: Parent keys (duplicates are ignored)
        child_model: Child ORM class
        foreign_key: Child column referencing the parent key
        order_by: Ordering applied within the single query

    Returns:
        Mapping of parent key to its children, in query order. Empty input
        returns ``{}`` without touching the database.
    """
    ids = unique_ids(parent_ids)
    if not ids:
        return {}

    statement = select(child_model).where(foreign_key.in_(ids))
    if order_by:
        statement = statement.order_by(*order_by)

    result = await session.execute(statement)
    grouped: dict[Any, list[C]] = {}
    for child in result.scalars().all():
        grouped.setdefault(getattr(child, foreign_key.key), []).append(child)

    track_relation_batch(child_model.__name__, len(ids))
    _lazy.debug(
        lambda: f"relations.children: {child_model.__name__} for {len(ids)} parents "
        f"-> {sum(len(v) for v in grouped.values())} rows"
    )
    return grouped


async def load_related_map[R](
    session: AsyncSession,
    parent_ids: Iterable[Any],
    link_parent_column: ColumnElement[Any],
    target_model: type[R],
    link_target_column: ColumnElement[Any],
    *,
    order_by: Sequence[ColumnElement[Any] | InstrumentedAttribute[Any]] = (),
) -> dict[Any, list[R]]:
    """Load many-to-many targets through a junction table with one joined query.

    Example:
        tags = await load_related_map(
            session, item_ids, item_tags.c.item_id, Tag, item_tags.c.tag_id,
            order_by=(Tag.name,),
        )

    Returns:
        Mapping of parent key to its related targets, in query order.
    """
    ids = unique_ids(parent_ids)
    if not ids:
        return {}

    target_pk = inspect(target_model).primary_key[0]
    statement = (
        select(link_parent_column, target_model)
        .join(target_model, link_target_column == target_pk)
        .where(link_parent_column.in_(ids))
    )
    if order_by:
        statement = statement.order_by(*order_by)

    result = await session.execute(statement)
    grouped: dict[Any, list[R]] = {}
    for parent_id, target in result.all():
        grouped.setdefault(parent_id, []).append(target)

    track_relation_batch(target_model.__name__, len(ids))
    _lazy.debug(
        lambda: f"relations.related: {target_model.__name__} for {len(ids)} parents"
    )
    return grouped


async def attach_children[P, C](
    session: AsyncSession,
    parents: Sequence[P],
    child_model: type[C],
    foreign_key: InstrumentedAttribute[Any],
    *,
    order_by: Sequence[ColumnElement[Any] | InstrumentedAttribute[Any]] = (),
    parent_key: str = "id",
) -> list[Attached[P, C]]:
    """Pair every parent with its children using at most one query.

    Parents keep their input order; a parent with no children gets ``[]``.
    An empty ``parents`` sequence returns ``[]`` without querying.
    """
    if not parents:
        return []

    children = await load_children_map(
        session,
        (getattr(parent, parent_key) for parent in parents),
        child_model,
        foreign_key,
        order_by=order_by,
    )
    return [
        Attached(parent=parent, children=children.get(getattr(parent, parent_key), []))
        for parent in parents
    ]


__all__ = [
    "Attached",
    "attach_children",
    "load_children_map",
    "load_related_map",
    "unique_ids",
]
