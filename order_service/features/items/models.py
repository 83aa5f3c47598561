"""SQLAlchemy models for the items feature."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from order_service.core.database import CreatedBase, SoftDeleteMixin, TimestampedBase


class Item(TimestampedBase, SoftDeleteMixin):
    """Inventory item.

    Active items have ``deleted_at IS NULL``. The two composite indexes back
    the keyset scans of the active listing (``created_at``) and the deleted
    listing (``deleted_at``).
    """

    __tablename__ = "items"
    __table_args__ = (
        Index("ix_items_created_at_id", "created_at", "id"),
        Index("ix_items_deleted_at_id", "deleted_at", "id"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    color: Mapped[str | None] = mapped_column(String(100), nullable=True)
    fabric: Mapped[str | None] = mapped_column(String(100), nullable=True)
    special_features: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    stock_quantity: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    low_stock_threshold: Mapped[int] = mapped_column(
        Integer, nullable=False, default=5, server_default="5"
    )
    cost_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    supplier_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    supplier_sku: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name={self.name!r})>"


class ItemDesign(CreatedBase):
    """Design variant of an item (print, colourway) with its own image."""

    __tablename__ = "item_designs"

    item_id: Mapped[int] = mapped_column(
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    design_name: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    is_primary: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    display_order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    def __repr__(self) -> str:
        return f"<ItemDesign(id={self.id}, item_id={self.item_id}, name={self.design_name!r})>"
