"""Import every feature's models so ``Base.metadata`` knows all tables."""

from order_service.features.categories.models import Category, item_categories
from order_service.features.items.models import Item, ItemDesign
from order_service.features.orders.models import Order, OrderItem
from order_service.features.tags.models import Tag, item_tags

__all__ = [
    "Category",
    "Item",
    "ItemDesign",
    "Order",
    "OrderItem",
    "Tag",
    "item_categories",
    "item_tags",
]
