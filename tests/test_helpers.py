"""Tests for helpers module."""

import re
from datetime import datetime, timedelta, timezone

from dronelog.helpers import offset_timestamp, parse_iso_timestamp, to_iso_utc, utc_now_iso


class TestParseIsoTimestamp:
    """Tests for parse_iso_timestamp function."""

    def test_zulu(self):
        """Test Z suffix parses as UTC."""
        dt = parse_iso_timestamp("2025-03-03T08:58:01Z")
        assert dt == datetime(2025, 3, 3, 8, 58, 1, tzinfo=timezone.utc)

    def test_offset_kept(self):
        """Test explicit offsets are preserved."""
        dt = parse_iso_timestamp("2025-03-03T10:58:01+02:00")
        assert dt.utcoffset() == timedelta(hours=2)

    def test_naive_is_utc(self):
        """Test naive timestamps are treated as UTC."""
        dt = parse_iso_timestamp("2025-03-03T08:58:01")
        assert dt.tzinfo == timezone.utc

    def test_invalid(self):
        """Test invalid input returns None."""
        assert parse_iso_timestamp("not a date") is None
        assert parse_iso_timestamp("") is None
        assert parse_iso_timestamp(None) is None
        assert parse_iso_timestamp(12345) is None


class TestToIsoUtc:
    """Tests for to_iso_utc function."""

    def test_milliseconds(self):
        """Test millisecond precision with Z suffix."""
        dt = datetime(2025, 3, 3, 8, 58, 1, 123456, tzinfo=timezone.utc)
        assert to_iso_utc(dt) == "2025-03-03T08:58:01.123Z"

    def test_converts_offset(self):
        """Test offsets are converted to UTC."""
        dt = datetime(2025, 3, 3, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso_utc(dt) == "2025-03-03T08:00:00.000Z"


class TestOffsetTimestamp:
    """Tests for offset_timestamp function."""

    def test_offset(self):
        """Test sample offset added to the start time."""
        assert offset_timestamp("2025-03-03T08:58:01Z", 1.5) == "2025-03-03T08:58:02.500Z"

    def test_unknown(self):
        """Test missing start or offset yields None."""
        assert offset_timestamp(None, 1.0) is None
        assert offset_timestamp("2025-03-03T08:58:01Z", None) is None


class TestUtcNowIso:
    """Tests for utc_now_iso function."""

    def test_format(self):
        """Test the timestamp shape."""
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_now_iso())
