"""Unit tests for the keyset page reader against SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from order_service.core.database import SearchFilter
from order_service.core.pagination import (
    CursorCodec,
    KeysetPage,
    MalformedCursorError,
    clamp_limit,
    fetch_page,
)
from order_service.features.items.models import Item

pytestmark = pytest.mark.unit


async def _page(session, *, limit, cursor=None, filters=()):
    return await fetch_page(
        session,
        select(Item),
        sort_column=Item.created_at,
        id_column=Item.id,
        limit=limit,
        cursor=cursor,
        filters=filters,
    )


async def _walk(session, *, limit, filters=()):
    pages: list[KeysetPage[Item]] = []
    cursor = None
    while True:
        page = await _page(session, limit=limit, cursor=cursor, filters=filters)
        pages.append(page)
        if not page.has_more:
            return pages
        cursor = page.next_cursor


class TestClampLimit:
    """Out-of-range limits are clamped, never rejected."""

    @pytest.mark.parametrize(
        ("requested", "expected"),
        [(None, 10), (0, 1), (-3, 1), (1, 1), (50, 50), (100, 100), (500, 100)],
    )
    def test_clamping(self, requested, expected):
        assert clamp_limit(requested) == expected

    def test_lower_maximum(self):
        assert clamp_limit(80, maximum=25) == 25

    def test_maximum_never_exceeds_hard_cap(self):
        assert clamp_limit(150, maximum=1000) == 100


class TestFetchPage:
    """Tests for fetch_page ordering, probing and cursors."""

    async def test_empty_table(self, db_session):
        page = await _page(db_session, limit=10)

        assert page.rows == []
        assert page.next_cursor is None
        assert page.has_more is False

    async def test_single_page_has_no_cursor(self, db_session, make_items):
        await make_items(3)

        page = await _page(db_session, limit=10)

        assert len(page.rows) == 3
        assert page.has_more is False
        assert page.next_cursor is None

    async def test_exact_fit_has_no_more(self, db_session, make_items):
        await make_items(5)

        page = await _page(db_session, limit=5)

        assert len(page.rows) == 5
        assert page.has_more is False
        assert page.next_cursor is None

    async def test_rows_are_newest_first(self, db_session, make_items):
        items = await make_items(4)

        page = await _page(db_session, limit=10)

        assert [row.id for row in page.rows] == [item.id for item in reversed(items)]

    async def test_twenty_five_rows_in_pages_of_ten(self, db_session, make_items):
        items = await make_items(25)

        pages = await _walk(db_session, limit=10)

        assert [len(p.rows) for p in pages] == [10, 10, 5]
        assert [p.has_more for p in pages] == [True, True, False]
        assert pages[-1].next_cursor is None
        seen = [row.id for p in pages for row in p.rows]
        assert seen == [item.id for item in reversed(items)]

    async def test_next_cursor_points_at_last_returned_row(self, db_session, make_items):
        await make_items(3)

        page = await _page(db_session, limit=2)
        last = page.rows[-1]
        position = CursorCodec.decode(page.next_cursor)

        assert position.id == last.id
        assert position.timestamp == last.created_at

    async def test_identical_timestamps_neither_repeat_nor_skip(self, db_session, make_items):
        items = await make_items(5, same_time=True)

        pages = await _walk(db_session, limit=2)

        seen = [row.id for p in pages for row in p.rows]
        assert [len(p.rows) for p in pages] == [2, 2, 1]
        assert seen == sorted((item.id for item in items), reverse=True)
        assert len(set(seen)) == 5

    async def test_rows_never_exceed_limit(self, db_session, make_items):
        await make_items(12)

        for limit in (1, 3, 7, 12, 13):
            for page in await _walk(db_session, limit=limit):
                assert len(page.rows) <= limit

    async def test_raw_cursor_is_accepted(self, db_session, make_items):
        await make_items(3)
        first = await _page(db_session, limit=1)
        raw = CursorCodec.to_raw(CursorCodec.decode(first.next_cursor))

        second = await _page(db_session, limit=1, cursor=raw)

        assert second.rows[0].id < first.rows[0].id

    async def test_raw_cursor_with_utc_offset_seeks_the_same_instant(
        self, db_session, make_items
    ):
        items = await make_items(3, same_time=True)

        page = await _page(
            db_session, limit=10, cursor=f"2025-01-15T12:30:00+02:00:{items[1].id}"
        )

        assert [row.id for row in page.rows] == [items[0].id]

    async def test_empty_cursor_means_first_page(self, db_session, make_items):
        await make_items(2)

        page = await _page(db_session, limit=1, cursor="")

        assert page.has_more is True

    async def test_malformed_cursor_raises(self, db_session):
        with pytest.raises(MalformedCursorError):
            await _page(db_session, limit=5, cursor="definitely-not-a-cursor")

    async def test_filters_apply_before_seek(self, db_session, make_items):
        await make_items(4, color="red")
        await make_items(3, color="blue")

        pages = await _walk(db_session, limit=2, filters=[SearchFilter(Item.color, "RED")])

        rows = [row for p in pages for row in p.rows]
        assert len(rows) == 4
        assert {row.color for row in rows} == {"red"}

    async def test_limit_is_clamped(self, db_session, make_items):
        await make_items(3)

        page = await _page(db_session, limit=0)

        assert page.limit == 1
        assert len(page.rows) == 1
        assert page.has_more is True


class TestKeysetPage:
    def test_map_keeps_metadata(self):
        page = KeysetPage(rows=[1, 2], next_cursor="abc", has_more=True, limit=2)

        mapped = page.map(str)

        assert mapped.rows == ["1", "2"]
        assert (mapped.next_cursor, mapped.has_more, mapped.limit) == ("abc", True, 2)

    def test_empty(self):
        page = KeysetPage.empty(10)

        assert (page.rows, page.next_cursor, page.has_more, page.limit) == ([], None, False, 10)
