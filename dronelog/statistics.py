"""Aggregate statistics over a set of flights for report summaries."""

from typing import Any, Dict, List, Optional

from .constants import UNKNOWN_DATE_KEY, UNKNOWN_DATE_LABEL
from .helpers import parse_iso_timestamp

__all__ = [
    "calculate_statistics",
    "day_key",
    "day_label",
    "group_by_day",
]


def calculate_statistics(flights: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Totals over flight records.

    Args:
        flights: Flight dictionaries

    Returns:
        Dictionary with num_flights, total_duration_secs and total_distance_m
    """
    return {
        "num_flights": len(flights),
        "total_duration_secs": sum(f.get("duration_secs") or 0 for f in flights),
        "total_distance_m": sum(f.get("total_distance") or 0 for f in flights),
    }


def day_key(start_time: Optional[str]) -> str:
    """
    Calendar day of a flight in its recorded timezone.

    The date prefix of the stored ISO string is used as-is, so a flight
    logged at 23:30 local time stays on its local day. Flights without a
    start time share a key that sorts after every ISO date.
    """
    if parse_iso_timestamp(start_time) is None:
        return UNKNOWN_DATE_KEY
    return start_time.strip()[:10]


def day_label(start_time: Optional[str]) -> str:
    """Heading such as "Saturday, 15 Mar 2025"."""
    start = parse_iso_timestamp(start_time)
    if start is None:
        return UNKNOWN_DATE_LABEL
    return start.strftime("%A, %d %b %Y")


def group_by_day(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Group report entries by flight day, days in ascending order.

    Returns:
        List of {"key", "label", "entries", "stats"} preserving entry order
        within a day
    """
    days: Dict[str, Dict[str, Any]] = {}
    for entry in entries:
        start_time = entry["flight"].get("start_time")
        key = day_key(start_time)
        if key not in days:
            days[key] = {"key": key, "label": day_label(start_time), "entries": []}
        days[key]["entries"].append(entry)

    grouped = [days[key] for key in sorted(days)]
    for day in grouped:
        day["stats"] = calculate_statistics([e["flight"] for e in day["entries"]])
    return grouped
