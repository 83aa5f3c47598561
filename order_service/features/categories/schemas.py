"""Pydantic schemas for the categories feature."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CategoryResponse(BaseModel):
    """Representation returned from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    color: str
    parent_id: int | None = None
    display_order: int
    created_at: datetime


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]
    total: int


class CategoryTreeNode(CategoryResponse):
    children: list[CategoryTreeNode] = Field(default_factory=list)


class CategoryTreeResponse(BaseModel):
    """Root categories with their descendants nested under ``children``."""

    categories: list[CategoryTreeNode]
    total: int = Field(description="Number of categories across all levels")
