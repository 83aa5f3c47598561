"""Order lifecycle enums and their SQLAlchemy column types.

Python ``StrEnum`` classes are used in application code; the column types
store the enum *values* and are emitted as native ENUM types on PostgreSQL
and as VARCHAR + CHECK constraints elsewhere (SQLite in tests).

Usage in models:
    from order_service.core.database.enums import OrderStatus, OrderStatusType

    class Order(TimestampedBase):
        status: Mapped[OrderStatus] = mapped_column(OrderStatusType, default=OrderStatus.PENDING)
"""

from __future__ import annotations

from enum import StrEnum

from sqlalchemy import Enum


def _values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


def _column_type(enum_cls: type[StrEnum], name: str) -> Enum:
    return Enum(
        enum_cls,
        name=name,
        values_callable=_values,
        validate_strings=True,
        create_constraint=True,
    )


# =============================================================================
# Order Enums
# =============================================================================


class OrderSource(StrEnum):
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    WHATSAPP = "whatsapp"
    CALL = "call"
    OFFLINE = "offline"


class OrderStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(StrEnum):
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    CASH_ON_DELIVERY = "cash_on_delivery"
    REFUNDED = "refunded"


class ConfirmationStatus(StrEnum):
    UNCONFIRMED = "unconfirmed"
    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class DeliveryStatus(StrEnum):
    NOT_SHIPPED = "not_shipped"
    SHIPPED = "shipped"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    RETURNED = "returned"


OrderSourceType = _column_type(OrderSource, "order_from")
OrderStatusType = _column_type(OrderStatus, "order_status")
PaymentStatusType = _column_type(PaymentStatus, "payment_status")
ConfirmationStatusType = _column_type(ConfirmationStatus, "confirmation_status")
DeliveryStatusType = _column_type(DeliveryStatus, "delivery_status")

__all__ = [
    "ConfirmationStatus",
    "ConfirmationStatusType",
    "DeliveryStatus",
    "DeliveryStatusType",
    "OrderSource",
    "OrderSourceType",
    "OrderStatus",
    "OrderStatusType",
    "PaymentStatus",
    "PaymentStatusType",
]
