"""Query filtering utilities for SQLAlchemy.

Filters wrap a ``Select`` and return a new one; they never execute anything.

Usage:
    stmt = select(Item).where(Item.deleted_at.is_(None))
    stmt = SearchFilter([Item.name, Item.color], "silk").apply(stmt)
    stmt = CollectionFilter(Order.status, ["pending"]).apply(stmt)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import Select, and_, false, func, or_

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


class StatementFilter(ABC):
    """Base class for statement filters."""

    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Return ``statement`` with this filter applied."""
        ...


class SearchFilter(StatementFilter):
    """Substring search across one or more text columns.

    Example:
        stmt = SearchFilter([Item.name, Item.fabric], "Silk").apply(stmt)
        # WHERE lower(name) LIKE '%silk%' ESCAPE '\\' OR lower(fabric) LIKE '%silk%' ESCAPE '\\'
    """

    def __init__(
        self,
        fields: InstrumentedAttribute[Any] | Sequence[InstrumentedAttribute[Any]],
        value: str | None,
        *,
        case_insensitive: bool = True,
        operator: Literal["and", "or"] = "or",
    ):
        self.fields = [fields] if not isinstance(fields, Sequence) else list(fields)
        self.value = value.strip() if value else ""
        self.case_insensitive = case_insensitive
        self.operator = operator

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if not self.value or not self.fields:
            return statement

        term = f"%{escape_like(self.value)}%"
        if self.case_insensitive:
            term = term.lower()
            conditions = [
                func.lower(field).like(term, escape=LIKE_ESCAPE) for field in self.fields
            ]
        else:
            conditions = [field.like(term, escape=LIKE_ESCAPE) for field in self.fields]

        if self.operator == "or":
            return statement.where(or_(*conditions))
        return statement.where(and_(*conditions))


class CollectionFilter(StatementFilter):
    """Filter by collection (WHERE ... IN).

    ``values=None`` means "no filter"; an empty collection matches nothing.
    """

    def __init__(
        self,
        field: InstrumentedAttribute[Any],
        values: Sequence[Any] | None,
        *,
        invert: bool = False,
    ):
        self.field = field
        self.values = None if values is None else list(values)
        self.invert = invert

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.values is None:
            return statement
        if not self.values:
            return statement if self.invert else statement.where(false())
        if self.invert:
            return statement.where(self.field.notin_(self.values))
        return statement.where(self.field.in_(self.values))


__all__ = [
    "CollectionFilter",
    "SearchFilter",
    "StatementFilter",
    "escape_like",
]
