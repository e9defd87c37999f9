"""Derived telemetry fields that are computed on demand, never stored.

Key Responsibilities:
1. Distance to home:
   - Home is the first sample with both latitude and longitude present,
     which is not necessarily sample 0 (GPS fixes often arrive late)
   - Samples without a fix yield None rather than 0
   - One vectorised pass over the series

2. Battery endpoints:
   - Takeoff/landing battery is the first/last non-null sample

3. Path colouring:
   - Per-segment intensities for progress, height, speed and distance modes
   - Min-max normalisation with a unit range when all values are equal
   - Piecewise-linear interpolation through a multi-stop RGB ramp
"""

from math import floor
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .constants import COLOR_RAMPS, COLOR_BY_MODES, DEFAULT_SMOOTHING_RESOLUTION
from .exceptions import InvalidArgumentError
from .geometry import haversine_distance, haversine_array, has_position_fix, smooth_track
from .validation import validate_telemetry

__all__ = [
    "find_home",
    "distance_to_home_series",
    "max_distance_from_home",
    "first_non_null",
    "last_non_null",
    "value_to_color",
    "rgb_to_hex",
    "segment_intensities",
    "color_segments",
]


def _nullable_array(values, length: int) -> np.ndarray:
    if not values:
        return np.full(length, np.nan, dtype=np.float64)
    return np.array(
        [np.nan if v is None else float(v) for v in values], dtype=np.float64
    )


def find_home(telemetry: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """Return (lat, lon) of the first sample with a position fix, or None."""
    lats = telemetry.get("latitude") or []
    lons = telemetry.get("longitude") or []
    for lat, lon in zip(lats, lons):
        if lat is not None and lon is not None:
            return lat, lon
    return None


def distance_to_home_series(telemetry: Dict[str, Any]) -> List[Optional[float]]:
    """
    Great-circle distance from the home point for every telemetry sample.

    Args:
        telemetry: Telemetry dictionary

    Returns:
        List matching ``time`` in length; None where the sample has no fix
        and all None when the series has no fix at all

    Raises:
        TelemetryShapeError: If position channels are not aligned with time
    """
    n_samples = validate_telemetry(telemetry)
    if n_samples == 0:
        return []

    lats = _nullable_array(telemetry.get("latitude"), n_samples)
    lons = _nullable_array(telemetry.get("longitude"), n_samples)
    valid = ~(np.isnan(lats) | np.isnan(lons))
    if not valid.any():
        return [None] * n_samples

    home_idx = int(np.argmax(valid))
    distances = haversine_array(lats[home_idx], lons[home_idx], lats, lons)

    return [
        float(d) if is_valid else None
        for d, is_valid in zip(distances.tolist(), valid.tolist())
    ]


def max_distance_from_home(telemetry: Dict[str, Any]) -> Optional[float]:
    """Farthest distance from home in meters, or None without any fix."""
    distances = [d for d in distance_to_home_series(telemetry) if d is not None]
    if not distances:
        return None
    return max(distances)


def first_non_null(values: Optional[Sequence[Any]]) -> Any:
    """First value that is not None, or None."""
    for value in values or []:
        if value is not None:
            return value
    return None


def last_non_null(values: Optional[Sequence[Any]]) -> Any:
    """Last value that is not None, or None."""
    for value in reversed(values or []):
        if value is not None:
            return value
    return None


def value_to_color(t: float, ramp: Sequence[Sequence[int]]) -> Tuple[int, int, int]:
    """
    Map a normalised value through a multi-stop colour ramp.

    Args:
        t: Intensity, clamped to [0, 1]
        ramp: Sequence of (r, g, b) stops, evenly spaced

    Returns:
        Interpolated (r, g, b), each channel rounded half up
    """
    clamped = max(0.0, min(1.0, t))
    max_idx = len(ramp) - 1
    scaled = clamped * max_idx
    lo = int(floor(scaled))
    hi = min(lo + 1, max_idx)
    f = scaled - lo
    return tuple(
        int(floor(ramp[lo][k] + (ramp[hi][k] - ramp[lo][k]) * f + 0.5))
        for k in range(3)
    )


def rgb_to_hex(color: Sequence[int]) -> str:
    """Format an (r, g, b) tuple as ``#rrggbb``."""
    r, g, b = color[0], color[1], color[2]
    return f"#{r:02x}{g:02x}{b:02x}"


def _check_mode(mode: str) -> None:
    if mode not in COLOR_RAMPS:
        raise InvalidArgumentError(
            f"Unknown colour mode, expected one of {COLOR_BY_MODES}",
            argument="mode",
            value=mode,
        )


def segment_intensities(
    points, mode: str, home_lat=None, home_lon=None
) -> List[float]:
    """
    Normalised intensity in [0, 1] for each segment of a track.

    Points with a missing value for the mode (no height, no position fix)
    get intensity 0; the range is taken over the remaining values.

    Args:
        points: Track points as [lon, lat, height], typically smoothed
        mode: "progress", "height", "speed" or "distance"
        home_lat, home_lon: Home for distance mode (default: first fixed point)

    Returns:
        ``len(points) - 1`` intensities; segment i starts at point i
    """
    _check_mode(mode)
    n = len(points)
    if n < 2:
        return []

    if mode == "progress":
        denominator = max(1, n - 2)
        return [i / denominator for i in range(n - 1)]

    if mode == "height":
        values = [p[2] if len(p) > 2 else None for p in points]
    elif mode == "speed":
        # Uniform time steps after smoothing, so step length tracks speed
        values = [0.0]
        for prev, cur in zip(points, points[1:]):
            if has_position_fix(prev) and has_position_fix(cur):
                values.append(haversine_distance(prev[1], prev[0], cur[1], cur[0]))
            else:
                values.append(None)
    else:
        first = next((p for p in points if has_position_fix(p)), None)
        h_lat = home_lat if home_lat is not None else (first[1] if first else None)
        h_lon = home_lon if home_lon is not None else (first[0] if first else None)
        values = [
            haversine_distance(h_lat, h_lon, p[1], p[0])
            if h_lat is not None and h_lon is not None and has_position_fix(p)
            else None
            for p in points
        ]

    present = [v for v in values if v is not None]
    if not present:
        return [0.0] * (n - 1)
    min_val = min(present)
    value_range = (max(present) - min_val) or 1
    return [
        0.0 if values[i] is None else (values[i] - min_val) / value_range
        for i in range(n - 1)
    ]


def color_segments(
    points,
    mode: str = "progress",
    home_lat=None,
    home_lon=None,
    resolution: int = DEFAULT_SMOOTHING_RESOLUTION,
    flatten: bool = False,
) -> List[Dict[str, Any]]:
    """
    Split a track into two-point segments coloured by ``mode``.

    Points without a position fix are dropped. Missing heights read as 0
    once smoothed; unsmoothed they are left out of the height range and
    drawn at 0.

    Args:
        points: Raw track points as [lon, lat, height]
        mode: Colour mode, see :data:`dronelog.constants.COLOR_BY_MODES`
        home_lat, home_lon: Home for distance mode
        resolution: Catmull-Rom points inserted between samples (0 disables)
        flatten: Force heights to 0 for a 2D rendering

    Returns:
        List of {"path": [start, end], "color": (r, g, b)}
    """
    _check_mode(mode)
    fixed = [p for p in points if has_position_fix(p)]
    smoothed = smooth_track(fixed, resolution)
    if len(smoothed) < 2:
        return []

    ramp = COLOR_RAMPS[mode]
    intensities = segment_intensities(smoothed, mode, home_lat, home_lon)

    def _alt(point):
        if flatten or len(point) < 3 or point[2] is None:
            return 0
        return point[2]

    segments = []
    for i, t in enumerate(intensities):
        start = smoothed[i]
        end = smoothed[i + 1]
        segments.append(
            {
                "path": [
                    [start[0], start[1], _alt(start)],
                    [end[0], end[1], _alt(end)],
                ],
                "color": value_to_color(t, ramp),
            }
        )
    return segments
