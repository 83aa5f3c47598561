"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app and HTTP client
    - Database Fixtures: in-memory SQLite engine, session, query counter
    - Data Factories: items, designs, tags, categories, orders
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

    from order_service.features.items.models import Item, ItemDesign
    from order_service.features.orders.models import Order

# Ensure tests run without external infrastructure
os.environ.setdefault("DB_ENABLED", "false")
os.environ.setdefault("DB_SQLITE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("LOG_JSON_LOGS", "false")
os.environ.setdefault("LOG_FILE_ENABLED", "false")

BASE_TIME = datetime(2025, 1, 15, 10, 30, tzinfo=UTC)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app(db_session: AsyncSession) -> FastAPI:
    """FastAPI application whose request sessions are the test session."""
    from order_service.app.main import create_app
    from order_service.core.dependencies.database import get_db_session

    application = create_app()

    async def _override_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    application.dependency_overrides[get_db_session] = _override_session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the app (lifespan is not run)."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async engine on a private in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session over freshly created tables, dropped again afterwards."""
    from order_service.core.database import Base
    from order_service.features import models  # noqa: F401

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


class QueryCounter:
    """Collects SELECT statements executed on an engine."""

    def __init__(self) -> None:
        self.statements: list[str] = []

    def __call__(self, conn: Any, cursor: Any, statement: str, *args: Any) -> None:
        if statement.lstrip().upper().startswith("SELECT"):
            self.statements.append(statement)

    @property
    def count(self) -> int:
        return len(self.statements)

    def reset(self) -> None:
        self.statements.clear()


@pytest.fixture
def query_counter(db_engine: AsyncEngine) -> Any:
    """Count SELECTs issued through ``db_engine`` while the test runs."""
    counter = QueryCounter()
    event.listen(db_engine.sync_engine, "before_cursor_execute", counter)
    yield counter
    event.remove(db_engine.sync_engine, "before_cursor_execute", counter)


# ============================================================================
# Data Factories
# ============================================================================


@pytest.fixture
def make_item(db_session: AsyncSession) -> Callable[..., Awaitable[Item]]:
    """Factory persisting an Item; ``created_at`` defaults to BASE_TIME."""
    from order_service.features.items.models import Item

    counter = 0

    async def _make(**overrides: Any) -> Item:
        nonlocal counter
        counter += 1
        fields: dict[str, Any] = {
            "name": f"Item {counter}",
            "price": Decimal("100.00"),
            "created_at": BASE_TIME,
            "updated_at": BASE_TIME,
        }
        fields.update(overrides)
        item = Item(**fields)
        db_session.add(item)
        await db_session.flush()
        return item

    return _make


@pytest.fixture
def make_items(
    make_item: Callable[..., Awaitable[Item]],
) -> Callable[..., Awaitable[list[Item]]]:
    """Factory persisting ``count`` items one minute apart (oldest first)."""

    async def _make(count: int, *, same_time: bool = False, **overrides: Any) -> list[Item]:
        items = []
        for i in range(count):
            created = BASE_TIME if same_time else BASE_TIME + timedelta(minutes=i)
            items.append(await make_item(created_at=created, **overrides))
        return items

    return _make


@pytest.fixture
def make_design(db_session: AsyncSession) -> Callable[..., Awaitable[ItemDesign]]:
    from order_service.features.items.models import ItemDesign

    async def _make(item: Item, **overrides: Any) -> ItemDesign:
        fields: dict[str, Any] = {
            "item_id": item.id,
            "design_name": "Plain",
            "image_url": "https://img.example.com/plain.jpg",
        }
        fields.update(overrides)
        design = ItemDesign(**fields)
        db_session.add(design)
        await db_session.flush()
        return design

    return _make


@pytest.fixture
def make_order(db_session: AsyncSession) -> Callable[..., Awaitable[Order]]:
    """Factory persisting an Order with optional order item lines."""
    from order_service.core.database.enums import OrderSource
    from order_service.features.orders.models import Order, OrderItem

    counter = 0

    async def _make(*, lines: int = 0, **overrides: Any) -> Order:
        nonlocal counter
        counter += 1
        fields: dict[str, Any] = {
            "order_id": f"ORD-{counter:04d}",
            "order_from": OrderSource.INSTAGRAM,
            "customer_name": f"Customer {counter}",
            "total_price": Decimal("250.00"),
            "created_at": BASE_TIME,
            "updated_at": BASE_TIME,
        }
        fields.update(overrides)
        order = Order(**fields)
        db_session.add(order)
        await db_session.flush()
        for line in range(lines):
            db_session.add(
                OrderItem(
                    order_id=order.id,
                    name=f"Line {line + 1}",
                    price=Decimal("50.00"),
                    quantity=line + 1,
                )
            )
        await db_session.flush()
        return order

    return _make
