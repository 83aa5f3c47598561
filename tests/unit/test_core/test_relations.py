"""Unit tests for batched relation loading."""

from __future__ import annotations

from decimal import Decimal

import pytest

from order_service.core.database import attach_children, load_children_map, load_related_map
from order_service.features.orders.models import Order, OrderItem
from order_service.features.tags.models import Tag, item_tags

pytestmark = pytest.mark.unit


class TestAttachChildren:
    """Tests for attach_children."""

    async def test_empty_parents_issue_no_query(self, db_session, query_counter):
        result = await attach_children(db_session, [], OrderItem, OrderItem.order_id)

        assert result == []
        assert query_counter.count == 0

    async def test_parents_without_children_get_empty_lists(
        self, db_session, make_order, query_counter
    ):
        first = await make_order()
        second = await make_order(lines=2)
        third = await make_order()
        query_counter.reset()

        attached = await attach_children(
            db_session, [first, second, third], OrderItem, OrderItem.order_id
        )

        assert [a.parent for a in attached] == [first, second, third]
        assert attached[0].children == []
        assert [c.name for c in attached[1].children] == ["Line 1", "Line 2"]
        assert attached[2].children == []
        assert query_counter.count == 1

    async def test_children_keep_query_order(self, db_session, make_order):
        order = await make_order(lines=3)

        (attached,) = await attach_children(
            db_session, [order], OrderItem, OrderItem.order_id, order_by=(OrderItem.id.desc(),)
        )

        ids = [c.id for c in attached.children]
        assert ids == sorted(ids, reverse=True)

    async def test_duplicate_parents_share_one_query(self, db_session, make_order, query_counter):
        order = await make_order(lines=1)
        query_counter.reset()

        attached = await attach_children(db_session, [order, order], OrderItem, OrderItem.order_id)

        assert len(attached) == 2
        assert attached[0].children == attached[1].children
        assert query_counter.count == 1


class TestLoadChildrenMap:
    async def test_empty_ids_issue_no_query(self, db_session, query_counter):
        assert await load_children_map(db_session, [], OrderItem, OrderItem.order_id) == {}
        assert query_counter.count == 0

    async def test_groups_by_parent(self, db_session, make_order):
        one = await make_order(lines=1)
        two = await make_order(lines=3)

        grouped = await load_children_map(db_session, [one.id, two.id], OrderItem, OrderItem.order_id)

        assert len(grouped[one.id]) == 1
        assert len(grouped[two.id]) == 3
        assert all(child.order_id == two.id for child in grouped[two.id])

    async def test_missing_parents_are_absent(self, db_session, make_order):
        order = await make_order()

        grouped = await load_children_map(db_session, [order.id, 999], OrderItem, OrderItem.order_id)

        assert grouped == {}


class TestLoadRelatedMap:
    async def test_junction_lookup_in_one_query(self, db_session, make_item, query_counter):
        shirt = await make_item(name="Shirt")
        scarf = await make_item(name="Scarf")
        bare = await make_item(name="Bare")
        tags = [Tag(name="zari"), Tag(name="bestseller"), Tag(name="cotton")]
        db_session.add_all(tags)
        await db_session.flush()
        await db_session.execute(
            item_tags.insert(),
            [
                {"item_id": shirt.id, "tag_id": tags[0].id},
                {"item_id": shirt.id, "tag_id": tags[1].id},
                {"item_id": scarf.id, "tag_id": tags[2].id},
            ],
        )
        query_counter.reset()

        grouped = await load_related_map(
            db_session,
            [shirt.id, scarf.id, bare.id],
            item_tags.c.item_id,
            Tag,
            item_tags.c.tag_id,
            order_by=(Tag.name,),
        )

        assert [t.name for t in grouped[shirt.id]] == ["bestseller", "zari"]
        assert [t.name for t in grouped[scarf.id]] == ["cotton"]
        assert bare.id not in grouped
        assert query_counter.count == 1


async def test_orders_and_items_take_two_queries(db_session, make_order, query_counter):
    """One query for the parents, one for all of their children."""
    from sqlalchemy import select

    for _ in range(5):
        await make_order(lines=2, total_price=Decimal("10.00"))
    db_session.expunge_all()
    query_counter.reset()

    orders = (await db_session.execute(select(Order))).scalars().all()
    attached = await attach_children(db_session, orders, OrderItem, OrderItem.order_id)

    assert len(attached) == 5
    assert all(len(a.children) == 2 for a in attached)
    assert query_counter.count == 2
