"""Cursor encoding and decoding for keyset pagination.

A cursor marks the sort key of the last row a client has seen:
the row's timestamp and its integer id. On the wire it is the
string ``"<ISO-8601 timestamp>:<id>"`` wrapped in URL-safe base64
(padding stripped), for example::

    raw:     2025-01-15T10:30:00.000000Z:42
    encoded: MjAyNS0wMS0xNVQxMDozMDowMC4wMDAwMDBaOjQy

Decoding accepts either form. The raw form is recognised by its colons,
which never occur in the base64 alphabet. Timestamps contain colons
themselves, so the id is always taken from after the *last* colon.
"""

from __future__ import annotations

import base64
import binascii
import re
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

MAX_CURSOR_LENGTH = 256

# BIGINT upper bound
MAX_CURSOR_ID = 2**63 - 1

_ID_PATTERN = re.compile(r"[0-9]+")


class MalformedCursorError(ValueError):
    """The cursor does not decode to a ``(timestamp, id)`` pair.

    Raised to the caller, never treated as "first page".
    """

    def __init__(self, reason: str, cursor: str | None = None) -> None:
        self.reason = reason
        self.cursor = cursor
        super().__init__(f"Malformed cursor: {reason}")


class PageCursor(BaseModel):
    """Decoded cursor position.

    Attributes:
        timestamp: Sort timestamp of the last returned row
        id: Primary key of the last returned row (tie-breaker)
    """

    timestamp: datetime = Field(description="Sort timestamp of the last returned row")
    id: int = Field(ge=0, le=MAX_CURSOR_ID, description="Id of the last returned row")

    model_config = {"frozen": True}


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with microseconds; aware values are normalised to UTC with ``Z``."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
        return value.isoformat(timespec="microseconds").replace("+00:00", "Z")
    return value.isoformat(timespec="microseconds")


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        token = CursorCodec.encode(PageCursor(timestamp=order.created_at, id=order.id))
        position = CursorCodec.decode(token)
    """

    @staticmethod
    def to_raw(cursor: PageCursor) -> str:
        return f"{format_timestamp(cursor.timestamp)}:{cursor.id}"

    @staticmethod
    def encode(cursor: PageCursor) -> str:
        """Encode a position as an opaque URL-safe token."""
        raw = CursorCodec.to_raw(cursor).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    @staticmethod
    def decode(token: str) -> PageCursor:
        """Decode a token produced by :meth:`encode` (or its raw form).

        Raises:
            MalformedCursorError: The token is empty, too long, not valid
                base64, or does not contain a valid timestamp and id.
        """
        if not token:
            raise MalformedCursorError("cursor is empty", token)
        if len(token) > MAX_CURSOR_LENGTH:
            raise MalformedCursorError("cursor is too long", token[:32])
        if not token.isascii():
            raise MalformedCursorError("cursor contains non-ASCII characters", token)

        raw = token if ":" in token else CursorCodec._unwrap(token)

        ts_text, sep, id_text = raw.rpartition(":")
        if not sep or not ts_text:
            raise MalformedCursorError("expected '<timestamp>:<id>'", token)
        if not _ID_PATTERN.fullmatch(id_text):
            raise MalformedCursorError("id is not a non-negative integer", token)
        cursor_id = int(id_text)
        if cursor_id > MAX_CURSOR_ID:
            raise MalformedCursorError("id is out of range", token)

        try:
            timestamp = datetime.fromisoformat(ts_text)
        except ValueError as e:
            raise MalformedCursorError("timestamp is not ISO-8601", token) from e
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(UTC)

        return PageCursor(timestamp=timestamp, id=cursor_id)

    @staticmethod
    def _unwrap(token: str) -> str:
        padded = token + "=" * (-len(token) % 4)
        try:
            return base64.b64decode(padded, altchars=b"-_", validate=True).decode("utf-8")
        except (binascii.Error, ValueError) as e:
            raise MalformedCursorError("cursor is not valid base64", token) from e

    @staticmethod
    def from_row(row: Any, sort_attr: str, id_attr: str = "id") -> PageCursor:
        """Build the position of ``row`` from its sort timestamp and id.

        Raises:
            ValueError: The row has no value for the sort attribute.
        """
        timestamp = getattr(row, sort_attr)
        if timestamp is None:
            msg = f"Cannot build a cursor: {type(row).__name__}.{sort_attr} is None"
            raise ValueError(msg)
        return PageCursor(timestamp=timestamp, id=getattr(row, id_attr))


__all__ = [
    "MAX_CURSOR_ID",
    "MAX_CURSOR_LENGTH",
    "CursorCodec",
    "MalformedCursorError",
    "PageCursor",
    "format_timestamp",
]
