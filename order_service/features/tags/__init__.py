"""Tags feature: labels attached to items through ``item_tags``."""

from __future__ import annotations

from .models import Tag, item_tags
from .repository import TagRepository, get_tag_repository
from .schemas import TagListResponse, TagResponse

__all__ = [
    "Tag",
    "TagListResponse",
    "TagRepository",
    "TagResponse",
    "get_tag_repository",
    "item_tags",
]
