"""SQLAlchemy models for the orders feature."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from order_service.core.database import CreatedBase, TimestampedBase
from order_service.core.database.base import utcnow
from order_service.core.database.enums import (
    ConfirmationStatus,
    ConfirmationStatusType,
    DeliveryStatus,
    DeliveryStatusType,
    OrderSource,
    OrderSourceType,
    OrderStatus,
    OrderStatusType,
    PaymentStatus,
    PaymentStatusType,
)


class Order(TimestampedBase):
    """Customer order.

    ``order_id`` is the human-facing reference (e.g. ``ORD-20250115-0042``);
    ``id`` is the surrogate key used for joins and keyset tie-breaks.
    """

    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("priority >= 0 AND priority <= 10", name="priority_range"),
        Index("ix_orders_created_at_id", "created_at", "id"),
    )

    order_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    order_from: Mapped[OrderSource] = mapped_column(OrderSourceType, nullable=False)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[OrderStatus] = mapped_column(
        OrderStatusType, nullable=False, default=OrderStatus.PENDING
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        PaymentStatusType, nullable=False, default=PaymentStatus.UNPAID
    )
    paid_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00"), server_default="0"
    )
    confirmation_status: Mapped[ConfirmationStatus] = mapped_column(
        ConfirmationStatusType, nullable=False, default=ConfirmationStatus.UNCONFIRMED
    )
    customer_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    expected_delivery_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    delivery_status: Mapped[DeliveryStatus] = mapped_column(
        DeliveryStatusType, nullable=False, default=DeliveryStatus.NOT_SHIPPED
    )
    tracking_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    delivery_partner: Mapped[str | None] = mapped_column(String(100), nullable=True)

    @property
    def balance_due(self) -> Decimal:
        return self.total_price - self.paid_amount

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, order_id={self.order_id!r}, status={self.status})>"


class OrderItem(CreatedBase):
    """Line of an order. ``name`` and ``price`` are copied at order time."""

    __tablename__ = "order_items"
    __table_args__ = (CheckConstraint("quantity > 0", name="quantity_positive"),)

    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_id: Mapped[int | None] = mapped_column(
        ForeignKey("items.id", ondelete="SET NULL"), nullable=True
    )
    design_id: Mapped[int | None] = mapped_column(
        ForeignKey("item_designs.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    customization_request: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity
