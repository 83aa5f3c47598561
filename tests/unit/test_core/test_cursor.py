"""Unit tests for the keyset cursor codec."""

from __future__ import annotations

import base64
from datetime import UTC, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from order_service.core.pagination.cursor import (
    MAX_CURSOR_ID,
    MAX_CURSOR_LENGTH,
    CursorCodec,
    MalformedCursorError,
    PageCursor,
    format_timestamp,
)

pytestmark = pytest.mark.unit


def _b64(raw: str) -> str:
    return base64.urlsafe_b64encode(raw.encode()).decode().rstrip("=")


class TestFormatTimestamp:
    """Tests for the timestamp half of the wire format."""

    def test_utc_uses_z_suffix_and_microseconds(self):
        ts = datetime(2025, 1, 15, 10, 30, tzinfo=UTC)

        assert format_timestamp(ts) == "2025-01-15T10:30:00.000000Z"

    def test_other_offsets_are_normalised_to_utc(self):
        ts = datetime(2025, 1, 15, 12, 30, tzinfo=timezone(timedelta(hours=2)))

        assert format_timestamp(ts) == "2025-01-15T10:30:00.000000Z"

    def test_naive_timestamps_are_kept_naive(self):
        ts = datetime(2025, 1, 15, 10, 30, 0, 123456)

        assert format_timestamp(ts) == "2025-01-15T10:30:00.123456"


class TestCursorCodec:
    """Tests for CursorCodec encode/decode."""

    def test_raw_form(self):
        cursor = PageCursor(timestamp=datetime(2025, 1, 15, 10, 30, tzinfo=UTC), id=42)

        assert CursorCodec.to_raw(cursor) == "2025-01-15T10:30:00.000000Z:42"

    def test_encoded_token_is_urlsafe_base64_of_raw_form(self):
        cursor = PageCursor(timestamp=datetime(2025, 1, 15, 10, 30, tzinfo=UTC), id=42)

        token = CursorCodec.encode(cursor)

        assert "=" not in token
        assert ":" not in token
        assert token == _b64("2025-01-15T10:30:00.000000Z:42")

    @pytest.mark.parametrize(
        "created_at",
        [
            datetime(2025, 3, 1, 8, 0),
            datetime(2025, 3, 1, 8, 0, tzinfo=UTC),
            datetime(2025, 3, 1, 13, 30, tzinfo=timezone(timedelta(hours=5, minutes=30))),
            datetime(2025, 3, 1, 8, 0, 0, 500, tzinfo=UTC),
            datetime(1999, 12, 31, 23, 59, 59, 999999),
        ],
    )
    @pytest.mark.parametrize("row_id", [0, 1, MAX_CURSOR_ID])
    def test_decode_returns_the_encoded_position(self, created_at, row_id):
        row = SimpleNamespace(created_at=created_at, id=row_id)

        decoded = CursorCodec.decode(CursorCodec.encode(CursorCodec.from_row(row, "created_at")))

        assert decoded.timestamp == row.created_at
        assert decoded.id == row.id

    def test_offset_timestamps_decode_as_utc(self):
        decoded = CursorCodec.decode("2025-01-15T12:30:00+02:00:7")

        assert decoded.timestamp.utcoffset() == timedelta(0)
        assert decoded.timestamp.replace(tzinfo=None) == datetime(2025, 1, 15, 10, 30)

    def test_decode_accepts_raw_form(self):
        decoded = CursorCodec.decode("2025-01-15T10:30:00.000000Z:42")

        assert decoded == PageCursor(timestamp=datetime(2025, 1, 15, 10, 30, tzinfo=UTC), id=42)

    def test_id_is_taken_after_the_last_colon(self):
        decoded = CursorCodec.decode(_b64("2025-01-15T10:30:59+00:00:9001"))

        assert decoded.id == 9001
        assert decoded.timestamp == datetime(2025, 1, 15, 10, 30, 59, tzinfo=UTC)

    def test_from_row_uses_custom_attributes(self):
        row = SimpleNamespace(deleted_at=datetime(2025, 2, 1, tzinfo=UTC), pk=3)

        cursor = CursorCodec.from_row(row, "deleted_at", "pk")

        assert cursor.id == 3
        assert cursor.timestamp == row.deleted_at

    def test_from_row_without_sort_value_raises(self):
        row = SimpleNamespace(deleted_at=None, id=1)

        with pytest.raises(ValueError, match="deleted_at"):
            CursorCodec.from_row(row, "deleted_at")


class TestMalformedCursors:
    """Every undecodable cursor raises MalformedCursorError."""

    @pytest.mark.parametrize(
        "token",
        [
            "",
            "not-base64!!",
            _b64("no-separator"),
            _b64("2025-01-15T10:30:00Z:abc"),
            _b64("2025-01-15T10:30:00Z:-5"),
            _b64("yesterday:5"),
            _b64(":5"),
            "2025-01-15T10:30:00Z:",
            "é",
            "ééé",
            "2025-01-15T10:30:00Z:é",
        ],
    )
    def test_rejected(self, token: str):
        with pytest.raises(MalformedCursorError):
            CursorCodec.decode(token)

    def test_id_above_bigint_range(self):
        with pytest.raises(MalformedCursorError, match="out of range"):
            CursorCodec.decode("2025-01-15T10:30:00Z:" + "9" * 30)

    def test_largest_bigint_id_is_accepted(self):
        assert CursorCodec.decode(f"2025-01-15T10:30:00Z:{MAX_CURSOR_ID}").id == MAX_CURSOR_ID

    def test_too_long(self):
        with pytest.raises(MalformedCursorError, match="too long"):
            CursorCodec.decode("A" * (MAX_CURSOR_LENGTH + 1))

    def test_invalid_utf8_payload(self):
        token = base64.urlsafe_b64encode(b"\xff\xfe\xfd").decode().rstrip("=")

        with pytest.raises(MalformedCursorError):
            CursorCodec.decode(token)

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            CursorCodec.decode("%%%")
