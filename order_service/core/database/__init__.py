"""Core database package: declarative base, mixins, filters and repository.

Base Classes and Mixins:
    - Base: declarative base with constraint naming convention
    - IntegerPKMixin, CreatedAtMixin, TimestampMixin, SoftDeleteMixin
    - TimestampedBase, CreatedBase: common combinations

Repository:
    - BaseRepository[T]: lookups, offset search, keyset pages, batched children
    - SearchResult[T]: offset search result container

Relations:
    - load_children_map / load_related_map / attach_children: one-query
      relation loading for a page of parents

Query Filters:
    - StatementFilter, SearchFilter, CollectionFilter
"""

from __future__ import annotations

from order_service.core.database.base import (
    NAMING_CONVENTION,
    Base,
    CreatedAtMixin,
    CreatedBase,
    IntegerPKMixin,
    SoftDeleteMixin,
    TimestampedBase,
    TimestampMixin,
)
from order_service.core.database.exceptions import NotFoundError
from order_service.core.database.filters import (
    CollectionFilter,
    SearchFilter,
    StatementFilter,
)
from order_service.core.database.relations import (
    Attached,
    attach_children,
    load_children_map,
    load_related_map,
)
from order_service.core.database.repository import BaseRepository, SearchResult

__all__ = [
    "NAMING_CONVENTION",
    "Attached",
    "Base",
    "BaseRepository",
    "CollectionFilter",
    "CreatedAtMixin",
    "CreatedBase",
    "IntegerPKMixin",
    "NotFoundError",
    "SearchFilter",
    "SearchResult",
    "SoftDeleteMixin",
    "StatementFilter",
    "TimestampMixin",
    "TimestampedBase",
    "attach_children",
    "load_children_map",
    "load_related_map",
]
