"""Timestamp helpers shared by the encoders and the report builder.

parse_iso_timestamp(timestamp_str)
    Parse ISO 8601 strings, including a ``Z`` suffix. Naive timestamps are
    read as UTC.

    Example:
        >>> parse_iso_timestamp("2025-03-15T14:30:00Z").hour
        14

to_iso_utc(dt)
    Render a datetime as UTC with millisecond precision, the form GPX
    viewers and JavaScript clients expect.

    Example:
        >>> to_iso_utc(parse_iso_timestamp("2025-03-15T16:30:00+02:00"))
        '2025-03-15T14:30:00.000Z'

offset_timestamp(start_timestamp, seconds)
    Absolute ISO time of a sample ``seconds`` after the flight start.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

__all__ = [
    "parse_iso_timestamp",
    "to_iso_utc",
    "offset_timestamp",
    "utc_now_iso",
]


def parse_iso_timestamp(timestamp_str: Optional[str]) -> Optional[datetime]:
    """
    Parse ISO format timestamp string to an aware datetime.

    Args:
        timestamp_str: Timestamp string (e.g., "2025-03-03T08:58:01Z")

    Returns:
        datetime object or None if parsing fails
    """
    if not timestamp_str or not isinstance(timestamp_str, str):
        return None

    try:
        dt = datetime.fromisoformat(timestamp_str.strip().replace("Z", "+00:00"))
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_iso_utc(dt: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def offset_timestamp(start_timestamp: Optional[str], seconds) -> Optional[str]:
    """
    Absolute timestamp of a sample recorded ``seconds`` after start.

    Returns:
        ISO UTC string, or None when the start time or offset is unknown
    """
    start = parse_iso_timestamp(start_timestamp)
    if start is None or seconds is None:
        return None
    return to_iso_utc(start + timedelta(seconds=seconds))


def utc_now_iso() -> str:
    """Current time for export envelopes."""
    return to_iso_utc(datetime.now(timezone.utc))
