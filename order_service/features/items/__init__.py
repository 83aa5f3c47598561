"""Items feature: inventory listing with keyset pagination and batched relations."""

from __future__ import annotations

from .models import Item, ItemDesign
from .repository import ItemRepository, ItemWithRelations, get_item_repository
from .schemas import ItemDesignResponse, ItemDetailResponse, ItemResponse
from .service import ItemService

__all__ = [
    "Item",
    "ItemDesign",
    "ItemDesignResponse",
    "ItemDetailResponse",
    "ItemRepository",
    "ItemResponse",
    "ItemService",
    "ItemWithRelations",
    "get_item_repository",
]
