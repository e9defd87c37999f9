"""Shape validation for flight bundles and telemetry series.

Encoders and the downsampler assume index-aligned telemetry. Violations are
caller bugs, so they raise instead of being repaired.
"""

from typing import Any, Mapping

from .exceptions import TelemetryShapeError

__all__ = [
    "validate_telemetry",
    "validate_bundle",
    "is_manual_entry",
    "is_track_aligned",
]


def validate_telemetry(telemetry: Mapping[str, Any]) -> int:
    """
    Check that every telemetry channel matches the time array in length.

    Args:
        telemetry: Telemetry dictionary

    Returns:
        Number of samples

    Raises:
        TelemetryShapeError: If the series is not a mapping or misaligned
    """
    if not isinstance(telemetry, Mapping):
        raise TelemetryShapeError("Telemetry must be a mapping")

    time = telemetry.get("time")
    if time is None:
        time = []
    if not isinstance(time, (list, tuple)):
        raise TelemetryShapeError("Telemetry time must be a sequence", channel="time")

    expected = len(time)
    for channel, values in telemetry.items():
        if channel == "time" or values is None:
            continue
        if not isinstance(values, (list, tuple)):
            raise TelemetryShapeError(
                "Telemetry channel must be a sequence", channel=channel
            )
        if len(values) != expected:
            raise TelemetryShapeError(
                "Telemetry channel is not aligned with time",
                channel=channel,
                expected=expected,
                actual=len(values),
            )
    return expected


def validate_bundle(bundle: Mapping[str, Any]) -> None:
    """
    Check the minimum shape every encoder relies on.

    Raises:
        TelemetryShapeError: If flight, telemetry or track are missing/malformed
    """
    if not isinstance(bundle, Mapping):
        raise TelemetryShapeError("Flight bundle must be a mapping")
    if not isinstance(bundle.get("flight"), Mapping):
        raise TelemetryShapeError("Flight bundle has no flight record")
    if "telemetry" not in bundle:
        raise TelemetryShapeError("Flight bundle has no telemetry")

    validate_telemetry(bundle["telemetry"])

    track = bundle.get("track")
    if track is not None and not isinstance(track, (list, tuple)):
        raise TelemetryShapeError("Track must be a sequence", channel="track")

    messages = bundle.get("messages")
    if messages is not None and not isinstance(messages, (list, tuple)):
        raise TelemetryShapeError("Messages must be a sequence", channel="messages")


def is_manual_entry(telemetry: Mapping[str, Any]) -> bool:
    """A flight without telemetry samples was entered by hand."""
    return not telemetry.get("time")


def is_track_aligned(track, telemetry: Mapping[str, Any]) -> bool:
    """Track and telemetry may be zipped only when their lengths match."""
    time = telemetry.get("time") or []
    return bool(track) and len(track) == len(time)
