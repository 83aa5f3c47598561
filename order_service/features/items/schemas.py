"""Pydantic schemas for the items feature."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from order_service.features.categories.schemas import CategoryResponse
from order_service.features.tags.schemas import TagResponse


class ItemDesignResponse(BaseModel):
    """Design variant of an item."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    item_id: int
    design_name: str
    image_url: str
    is_primary: bool
    display_order: int
    created_at: datetime


class ItemResponse(BaseModel):
    """Item fields without relations (deleted listing, lookups)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Decimal = Field(description="Selling price")
    color: str | None = None
    fabric: str | None = None
    special_features: str | None = None
    image_url: str | None = None
    stock_quantity: int
    low_stock_threshold: int
    cost_price: Decimal | None = None
    supplier_name: str | None = None
    supplier_sku: str | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class ItemDetailResponse(ItemResponse):
    """Item with its designs, tags and categories.

    Designs are ordered primary first, then by display order; tags by name;
    categories by display order, then name.
    """

    designs: list[ItemDesignResponse] = Field(default_factory=list)
    tags: list[TagResponse] = Field(default_factory=list)
    categories: list[CategoryResponse] = Field(default_factory=list)
