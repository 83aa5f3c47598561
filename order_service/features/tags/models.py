"""SQLAlchemy models for the tags feature."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from order_service.core.database import Base, TimestampedBase

# Many-to-many association table for items <-> tags
item_tags = Table(
    "item_tags",
    Base.metadata,
    Column(
        "item_id",
        ForeignKey("items.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Tag(TimestampedBase):
    """Free-form label attached to inventory items (e.g. "bestseller", "festive")."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Unique tag name",
    )
    color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        default="#3B82F6",
        server_default="#3B82F6",
        comment="Hex color code",
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r})>"
