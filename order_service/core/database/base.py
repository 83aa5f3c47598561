"""Declarative base and composable column mixins.

Examples:
    class Tag(TimestampedBase):
        __tablename__ = "tags"
        name: Mapped[str] = mapped_column(String(100), unique=True)

    class Item(TimestampedBase, SoftDeleteMixin):
        __tablename__ = "items"
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

# Consistent naming convention for database constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base with constraint naming and default table names.

    Models normally set ``__tablename__`` explicitly; the fallback is the
    lowercased class name.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()


# ============================================================================
# Column Mixins
# ============================================================================


class IntegerPKMixin:
    """Integer auto-increment primary key.

    The id doubles as the tie-breaker of every keyset ordering, so it must be
    unique and monotonically assigned.
    """

    __allow_unmapped__ = True

    id: Mapped[int] = mapped_column(
        primary_key=True,
        autoincrement=True,
        comment="Auto-incrementing integer primary key",
    )


class CreatedAtMixin:
    """Creation timestamp only, for append-only child rows."""

    __allow_unmapped__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        comment="Timestamp of record creation",
    )


class TimestampMixin(CreatedAtMixin):
    """created_at plus an auto-updating updated_at.

    Both are timezone-aware (UTC). Python-side defaults cover the ORM path,
    server defaults cover direct SQL inserts.
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
        comment="Timestamp of last update",
    )


class SoftDeleteMixin:
    """Logical deletion through a ``deleted_at`` timestamp.

    Active rows have ``deleted_at IS NULL``; the deleted-items listing pages
    over ``deleted_at`` itself, so it is the sort key for that view.
    """

    __allow_unmapped__ = True

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="Timestamp of soft deletion",
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self, when: datetime | None = None) -> None:
        self.deleted_at = when or utcnow()

    def restore(self) -> None:
        self.deleted_at = None


# ============================================================================
# Convenience Base Classes
# ============================================================================


class TimestampedBase(Base, IntegerPKMixin, TimestampMixin):
    """Integer PK with created_at/updated_at."""

    __abstract__ = True


class CreatedBase(Base, IntegerPKMixin, CreatedAtMixin):
    """Integer PK with created_at only."""

    __abstract__ = True
