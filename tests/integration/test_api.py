"""HTTP tests for the listing and lookup endpoints."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from order_service.core.database.enums import OrderStatus
from order_service.core.pagination import CursorCodec, PageCursor
from order_service.features.categories.models import Category
from order_service.features.tags.models import Tag

pytestmark = pytest.mark.integration

BASE_TIME = datetime(2025, 1, 15, 10, 30, tzinfo=UTC)
API = "/api/v1"


async def _walk(client, path, *, limit, **params):
    """Collect every page of a cursor listing."""
    pages = []
    cursor = None
    while True:
        query = {"limit": limit, **params}
        if cursor:
            query["cursor"] = cursor
        response = await client.get(path, params=query)
        assert response.status_code == 200
        body = response.json()
        pages.append(body)
        if not body["pagination"]["hasMore"]:
            return pages
        cursor = body["pagination"]["nextCursor"]


class TestOrdersListing:
    async def test_empty(self, client):
        response = await client.get(f"{API}/orders")

        assert response.status_code == 200
        assert response.json() == {
            "items": [],
            "pagination": {"limit": 10, "nextCursor": None, "hasMore": False},
        }

    async def test_first_page_shape(self, client, make_order):
        for i in range(3):
            await make_order(lines=2, created_at=BASE_TIME + timedelta(minutes=i))

        response = await client.get(f"{API}/orders", params={"limit": 2})

        body = response.json()
        assert [o["order_id"] for o in body["items"]] == ["ORD-0003", "ORD-0002"]
        assert len(body["items"][0]["items"]) == 2
        assert body["pagination"]["hasMore"] is True
        assert body["pagination"]["limit"] == 2

        cursor = CursorCodec.decode(body["pagination"]["nextCursor"])
        assert cursor.id == body["items"][-1]["id"]

    async def test_walk_returns_every_order_once(self, client, make_order):
        for i in range(25):
            await make_order(created_at=BASE_TIME + timedelta(seconds=i // 4))

        pages = await _walk(client, f"{API}/orders", limit=10)

        assert [len(p["items"]) for p in pages] == [10, 10, 5]
        ids = [o["id"] for p in pages for o in p["items"]]
        assert len(ids) == len(set(ids)) == 25
        assert pages[-1]["pagination"]["nextCursor"] is None

    async def test_status_filter_is_repeatable(self, client, make_order):
        await make_order(status=OrderStatus.PENDING)
        await make_order(status=OrderStatus.CANCELLED)
        await make_order(status=OrderStatus.COMPLETED)

        response = await client.get(
            f"{API}/orders", params=[("status", "pending"), ("status", "completed")]
        )

        assert sorted(o["status"] for o in response.json()["items"]) == ["completed", "pending"]

    async def test_unknown_status_is_rejected(self, client):
        response = await client.get(f"{API}/orders", params={"status": "lost"})

        assert response.status_code == 422

    @pytest.mark.parametrize(("requested", "effective"), [("0", 1), ("-5", 1), ("500", 100)])
    async def test_limit_is_clamped(self, client, requested, effective):
        response = await client.get(f"{API}/orders", params={"limit": requested})

        assert response.status_code == 200
        assert response.json()["pagination"]["limit"] == effective

    async def test_non_numeric_limit(self, client):
        response = await client.get(f"{API}/orders", params={"limit": "abc"})

        assert response.status_code == 422
        body = response.json()
        assert body["type"] == "validation-error"
        assert body["errors"][0]["field"] == "query.limit"

    @pytest.mark.parametrize(
        "cursor",
        [
            "!!!",
            "bm90LWEtY3Vyc29y",
            "2025-01-15T10:30:00:abc",
            "x" * 300,
            "é",
            "ééé",
            "2025-01-15T10:30:00Z:" + "9" * 30,
        ],
    )
    async def test_malformed_cursor(self, client, cursor):
        response = await client.get(f"{API}/orders", params={"cursor": cursor})

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "malformed-cursor"
        assert body["status"] == 400

    async def test_raw_cursor_accepted(self, client, make_order):
        older = await make_order(created_at=BASE_TIME)
        newer = await make_order(created_at=BASE_TIME + timedelta(hours=1))
        raw = CursorCodec.to_raw(PageCursor(timestamp=newer.created_at, id=newer.id))

        response = await client.get(f"{API}/orders", params={"cursor": raw})

        assert [o["id"] for o in response.json()["items"]] == [older.id]


class TestOrderDetail:
    async def test_found(self, client, make_order):
        order = await make_order(lines=2)

        response = await client.get(f"{API}/orders/{order.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["order_id"] == order.order_id
        assert [line["quantity"] for line in body["items"]] == [1, 2]

    async def test_not_found(self, client):
        response = await client.get(f"{API}/orders/999")

        assert response.status_code == 404
        body = response.json()
        assert body["type"] == "not-found"
        assert body["resource"] == "Order"
        assert body["instance"] == f"{API}/orders/999"


class TestItems:
    async def test_cursor_listing_includes_relations(self, client, make_item, make_design):
        item = await make_item(name="Block Print Kurta")
        await make_design(item, design_name="Indigo", is_primary=True)

        response = await client.get(f"{API}/items")

        (body,) = response.json()["items"]
        assert body["name"] == "Block Print Kurta"
        assert [d["design_name"] for d in body["designs"]] == ["Indigo"]
        assert body["tags"] == []
        assert body["categories"] == []

    async def test_walk_items(self, client, make_items):
        items = await make_items(12, same_time=True)

        pages = await _walk(client, f"{API}/items", limit=5)

        ids = [i["id"] for p in pages for i in p["items"]]
        assert ids == sorted((i.id for i in items), reverse=True)

    async def test_offset_fallback(self, client, make_items):
        await make_items(5)

        response = await client.get(f"{API}/items", params={"page": 2, "limit": 2})

        assert response.status_code == 200
        assert response.json()["pagination"] == {
            "page": 2,
            "limit": 2,
            "total": 5,
            "totalPages": 3,
            "hasNext": True,
            "hasPrev": True,
        }

    async def test_search(self, client, make_item):
        await make_item(name="Chanderi Dupatta")
        await make_item(name="Linen Shirt")

        response = await client.get(f"{API}/items", params={"search": "dupatta"})

        assert [i["name"] for i in response.json()["items"]] == ["Chanderi Dupatta"]

    async def test_deleted_listing(self, client, make_item):
        await make_item(name="Active")
        gone = await make_item(name="Gone", deleted_at=BASE_TIME + timedelta(days=2))

        response = await client.get(f"{API}/items/deleted")

        assert [i["id"] for i in response.json()["items"]] == [gone.id]

    async def test_deleted_item_detail_is_not_found(self, client, make_item):
        gone = await make_item(deleted_at=BASE_TIME)

        response = await client.get(f"{API}/items/{gone.id}")

        assert response.status_code == 404
        assert response.json()["resource"] == "Item"

    async def test_detail(self, client, make_item):
        item = await make_item(name="Ikat Stole")

        response = await client.get(f"{API}/items/{item.id}")

        assert response.status_code == 200
        assert response.json()["name"] == "Ikat Stole"

    async def test_page_with_cursor_is_rejected(self, client, make_items):
        await make_items(3)
        first = (await client.get(f"{API}/items", params={"limit": 1})).json()

        response = await client.get(
            f"{API}/items",
            params={"page": 2, "limit": 1, "cursor": first["pagination"]["nextCursor"]},
        )

        assert response.status_code == 400
        assert response.json()["type"] == "conflicting-pagination"

    async def test_delete_then_restore(self, client, make_items):
        kept, target = await make_items(2)

        deleted = await client.delete(f"{API}/items/{target.id}")

        assert deleted.status_code == 204
        assert deleted.content == b""
        assert (await client.get(f"{API}/items/{target.id}")).status_code == 404
        trash = (await client.get(f"{API}/items/deleted")).json()
        assert [i["id"] for i in trash["items"]] == [target.id]
        listed = (await client.get(f"{API}/items")).json()
        assert [i["id"] for i in listed["items"]] == [kept.id]

        restored = await client.post(f"{API}/items/{target.id}/restore")

        assert restored.status_code == 200
        assert restored.json()["id"] == target.id
        assert restored.json()["deleted_at"] is None
        assert (await client.get(f"{API}/items/{target.id}")).status_code == 200
        assert (await client.get(f"{API}/items/deleted")).json()["items"] == []

    async def test_delete_twice_is_not_found(self, client, make_item):
        item = await make_item()

        assert (await client.delete(f"{API}/items/{item.id}")).status_code == 204
        response = await client.delete(f"{API}/items/{item.id}")

        assert response.status_code == 404
        assert response.json()["resource"] == "Item"

    @pytest.mark.parametrize("method", ["delete", "post"])
    async def test_unknown_item_writes_are_not_found(self, client, method):
        path = f"{API}/items/9999" if method == "delete" else f"{API}/items/9999/restore"

        response = await client.request(method.upper(), path)

        assert response.status_code == 404
        assert response.json()["type"] == "not-found"


class TestCatalog:
    async def test_tags_sorted_by_name(self, client, db_session):
        db_session.add_all([Tag(name="sale"), Tag(name="bestseller")])
        await db_session.flush()

        response = await client.get(f"{API}/tags")

        body = response.json()
        assert [t["name"] for t in body["tags"]] == ["bestseller", "sale"]
        assert body["total"] == 2

    async def test_categories(self, client):
        response = await client.get(f"{API}/categories")

        assert response.status_code == 200
        assert response.json() == {"categories": [], "total": 0}

    async def test_tag_search_treats_wildcards_literally(self, client, db_session):
        db_session.add_all([Tag(name="50% off"), Tag(name="500 club"), Tag(name="new_in")])
        await db_session.flush()

        percent = await client.get(f"{API}/tags", params={"search": "0%"})
        underscore = await client.get(f"{API}/tags", params={"search": "_"})

        assert [t["name"] for t in percent.json()["tags"]] == ["50% off"]
        assert [t["name"] for t in underscore.json()["tags"]] == ["new_in"]

    async def test_category_tree(self, client, db_session):
        apparel = Category(name="Apparel", display_order=1)
        home = Category(name="Home", display_order=2)
        db_session.add_all([apparel, home])
        await db_session.flush()
        db_session.add_all(
            [
                Category(name="Sarees", parent_id=apparel.id, display_order=2),
                Category(name="Kurtas", parent_id=apparel.id, display_order=1),
            ]
        )
        await db_session.flush()

        response = await client.get(f"{API}/categories/tree")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 4
        assert [c["name"] for c in body["categories"]] == ["Apparel", "Home"]
        children = body["categories"][0]["children"]
        assert [c["name"] for c in children] == ["Kurtas", "Sarees"]
        assert all(c["parent_id"] == apparel.id for c in children)
        assert body["categories"][1]["children"] == []


class TestOperational:
    async def test_liveness(self, client):
        response = await client.get(f"{API}/health/live")

        assert response.status_code == 200
        assert response.json()["alive"] is True

    async def test_readiness(self, client):
        response = await client.get(f"{API}/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True}

    async def test_metrics(self, client):
        await client.get(f"{API}/health/live")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text

    async def test_request_id_generated(self, client):
        response = await client.get(f"{API}/health/live")

        assert response.headers["X-Request-ID"]

    async def test_request_id_propagated(self, client):
        response = await client.get(f"{API}/orders/999", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.json()["request_id"] == "req-123"
