"""Pydantic schemas for the tags feature."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TagResponse(BaseModel):
    """Representation returned from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str = Field(description="Unique tag name")
    color: str = Field(description="Hex color code (e.g., '#3B82F6')")
    created_at: datetime


class TagListResponse(BaseModel):
    """Response containing a list of tags."""

    tags: list[TagResponse]
    total: int
