"""Categories feature: catalog grouping linked to items through ``item_categories``."""

from __future__ import annotations

from .models import Category, item_categories
from .repository import CategoryRepository, get_category_repository
from .schemas import (
    CategoryListResponse,
    CategoryResponse,
    CategoryTreeNode,
    CategoryTreeResponse,
)
from .service import build_category_tree

__all__ = [
    "Category",
    "CategoryListResponse",
    "CategoryRepository",
    "CategoryResponse",
    "CategoryTreeNode",
    "CategoryTreeResponse",
    "build_category_tree",
    "get_category_repository",
    "item_categories",
]
