"""Pydantic schemas for the orders feature."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from order_service.core.database.enums import (
    ConfirmationStatus,
    DeliveryStatus,
    OrderSource,
    OrderStatus,
    PaymentStatus,
)


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    item_id: int | None = None
    design_id: int | None = None
    name: str
    price: Decimal
    quantity: int
    customization_request: str | None = None
    created_at: datetime


class OrderResponse(BaseModel):
    """Order with its line items."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: str = Field(description="Human-facing order reference")
    order_from: OrderSource
    customer_name: str
    customer_id: int | None = None
    address: str | None = None
    total_price: Decimal
    status: OrderStatus
    payment_status: PaymentStatus
    paid_amount: Decimal
    confirmation_status: ConfirmationStatus
    customer_notes: str | None = None
    priority: int = Field(ge=0, le=10)
    order_date: datetime
    expected_delivery_date: datetime | None = None
    delivery_status: DeliveryStatus
    tracking_id: str | None = None
    delivery_partner: str | None = None
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse] = Field(default_factory=list)
