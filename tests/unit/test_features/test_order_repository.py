"""Tests for OrderRepository."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from order_service.core.database import NotFoundError
from order_service.core.database.enums import OrderStatus
from order_service.core.pagination import MalformedCursorError
from order_service.features.orders.repository import OrderRepository

pytestmark = pytest.mark.unit

BASE_TIME = datetime(2025, 1, 15, 10, 30, tzinfo=UTC)


@pytest.fixture
def repository() -> OrderRepository:
    return OrderRepository()


class TestFindCursor:
    async def test_newest_first_with_items(self, db_session, repository, make_order):
        older = await make_order(lines=2, created_at=BASE_TIME)
        newer = await make_order(lines=1, created_at=BASE_TIME + timedelta(hours=1))

        page = await repository.find_cursor(db_session, limit=10)

        assert [row.parent.id for row in page.rows] == [newer.id, older.id]
        assert [line.quantity for line in page.rows[1].children] == [1, 2]
        assert len(page.rows[0].children) == 1
        assert page.has_more is False
        assert page.next_cursor is None

    async def test_two_queries_per_page(self, db_session, repository, make_order, query_counter):
        for i in range(15):
            await make_order(lines=2, created_at=BASE_TIME + timedelta(minutes=i))
        query_counter.reset()

        page = await repository.find_cursor(db_session, limit=10)

        assert len(page.rows) == 10
        assert page.has_more is True
        assert query_counter.count == 2

    async def test_status_filter(self, db_session, repository, make_order):
        pending = await make_order(status=OrderStatus.PENDING)
        await make_order(status=OrderStatus.CANCELLED)
        completed = await make_order(status=OrderStatus.COMPLETED)

        page = await repository.find_cursor(
            db_session, limit=10, status=[OrderStatus.PENDING, OrderStatus.COMPLETED]
        )

        assert {row.parent.id for row in page.rows} == {pending.id, completed.id}

    async def test_empty_status_list_matches_nothing(self, db_session, repository, make_order):
        await make_order()

        page = await repository.find_cursor(db_session, limit=10, status=[])

        assert page.rows == []

    async def test_pages_through_shared_timestamp(self, db_session, repository, make_order):
        orders = [await make_order() for _ in range(5)]

        first = await repository.find_cursor(db_session, limit=2)
        second = await repository.find_cursor(db_session, limit=2, cursor=first.next_cursor)
        third = await repository.find_cursor(db_session, limit=2, cursor=second.next_cursor)

        ids = [row.parent.id for page in (first, second, third) for row in page.rows]
        assert ids == sorted((o.id for o in orders), reverse=True)
        assert third.has_more is False

    async def test_malformed_cursor(self, db_session, repository):
        with pytest.raises(MalformedCursorError):
            await repository.find_cursor(db_session, limit=10, cursor="!!not-a-cursor!!")


class TestGetWithItems:
    async def test_returns_order_and_lines(self, db_session, repository, make_order):
        order = await make_order(lines=3)

        row = await repository.get_with_items(db_session, order.id)

        assert row.parent is order
        assert [line.name for line in row.children] == ["Line 1", "Line 2", "Line 3"]

    async def test_unknown_order(self, db_session, repository):
        with pytest.raises(NotFoundError) as exc_info:
            await repository.get_with_items(db_session, 999)

        assert exc_info.value.model_name == "Order"
