"""Orders feature: order listing with keyset pagination and batched order items."""

from __future__ import annotations

from .models import Order, OrderItem
from .repository import OrderRepository, OrderWithItems, get_order_repository
from .schemas import OrderItemResponse, OrderResponse
from .service import OrderService

__all__ = [
    "Order",
    "OrderItem",
    "OrderItemResponse",
    "OrderRepository",
    "OrderResponse",
    "OrderService",
    "OrderWithItems",
    "get_order_repository",
]
