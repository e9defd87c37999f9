"""Geometric calculations on GPS tracks.

Tracks are sequences of ``[lon, lat, height]`` triples, the order used by
map renderers. Distances are in meters.
"""

from math import radians, sin, cos, sqrt, atan2, log2
from typing import List, Optional, Sequence

import numpy as np

from .constants import EARTH_RADIUS_M, METERS_PER_DEGREE
from .exceptions import InvalidArgumentError

__all__ = [
    "haversine_distance",
    "haversine_array",
    "has_position_fix",
    "clean_track",
    "track_center",
    "track_bounds",
    "smooth_track",
    "estimate_zoom",
]


def haversine_distance(lat1, lon1, lat2, lon2):
    """Calculate great circle distance in meters between two points."""
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_M * c


def has_position_fix(point) -> bool:
    """True when a [lon, lat, ...] point has both coordinates."""
    return point[0] is not None and point[1] is not None


def clean_track(points: Sequence[Sequence[Optional[float]]]) -> List[List[float]]:
    """
    Drop points without a position fix and default missing heights to 0.

    Args:
        points: Track points as [lon, lat, height]; any component may be None

    Returns:
        New list of [lon, lat, height] with no None components
    """
    return [
        [p[0], p[1], p[2] if len(p) > 2 and p[2] is not None else 0.0]
        for p in points
        if has_position_fix(p)
    ]


def track_center(points: Sequence[Sequence[float]]) -> Optional[List[float]]:
    """
    Arithmetic mean of longitude and latitude over a track.

    Points without a position fix are ignored.

    Args:
        points: Track points as [lon, lat, ...]

    Returns:
        [lon, lat] or None when no point has a fix
    """
    sum_lon = 0.0
    sum_lat = 0.0
    n = 0
    for point in points or []:
        if not has_position_fix(point):
            continue
        sum_lon += point[0]
        sum_lat += point[1]
        n += 1
    if n == 0:
        return None
    return [sum_lon / n, sum_lat / n]


def track_bounds(points: Sequence[Sequence[float]]) -> Optional[List[List[float]]]:
    """Return [[min_lon, min_lat], [max_lon, max_lat]] over points with a fix, or None."""
    fixed = [p for p in points or [] if has_position_fix(p)]
    if not fixed:
        return None

    min_lon = max_lon = fixed[0][0]
    min_lat = max_lat = fixed[0][1]
    for point in fixed[1:]:
        lon, lat = point[0], point[1]
        if lon < min_lon:
            min_lon = lon
        elif lon > max_lon:
            max_lon = lon
        if lat < min_lat:
            min_lat = lat
        elif lat > max_lat:
            max_lat = lat
    return [[min_lon, min_lat], [max_lon, max_lat]]


def _catmull_rom(p0, p1, p2, p3, t):
    """Evaluate one Catmull-Rom segment component-wise at parameter t."""
    t2 = t * t
    t3 = t2 * t
    return [
        0.5
        * (
            2 * p1[k]
            + (-p0[k] + p2[k]) * t
            + (2 * p0[k] - 5 * p1[k] + 4 * p2[k] - p3[k]) * t2
            + (-p0[k] + 3 * p1[k] - 3 * p2[k] + p3[k]) * t3
        )
        for k in range(len(p1))
    ]


def smooth_track(points, resolution=4):
    """
    Smooth a track with cubic Catmull-Rom interpolation.

    Inserts ``resolution`` interpolated points between each consecutive pair.
    The first and last points are duplicated as virtual control points so the
    curve passes through every original sample. Points without a position
    fix are dropped and missing heights read as 0 before interpolating.

    Args:
        points: Track points as [lon, lat, height]
        resolution: Number of points to insert per segment

    Returns:
        Smoothed track; inputs shorter than 3 points are returned as-is
    """
    if resolution < 0:
        raise InvalidArgumentError(
            "Smoothing resolution must not be negative",
            argument="resolution",
            value=resolution,
        )

    if len(points) < 3 or resolution == 0:
        return points

    points = clean_track(points)
    n = len(points)
    if n < 3:
        return points

    result = []
    steps = resolution + 1
    for i in range(n - 1):
        p0 = points[max(i - 1, 0)]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[min(i + 2, n - 1)]

        result.append(p1)
        for step in range(1, steps):
            result.append(_catmull_rom(p0, p1, p2, p3, step / steps))

    result.append(points[n - 1])
    return result


def estimate_zoom(bounds, default=14.0):
    """
    Estimate a web-map zoom level that fits the given bounds.

    Args:
        bounds: [[min_lon, min_lat], [max_lon, max_lat]] or None
        default: Zoom used when bounds are unknown

    Returns:
        Zoom level clamped to [10, 18]
    """
    if not bounds:
        return default

    lon_span = bounds[1][0] - bounds[0][0]
    lat_span = bounds[1][1] - bounds[0][1]
    max_span = max(lon_span, lat_span)
    if max_span <= 0:
        return 18.0
    return max(10.0, min(18.0, 16 - log2(max_span * METERS_PER_DEGREE)))


def haversine_array(home_lat, home_lon, lats, lons):
    """
    Vectorised great circle distance from one point to many.

    Args:
        home_lat, home_lon: Reference point in degrees
        lats, lons: numpy arrays in degrees (NaN propagates)

    Returns:
        numpy array of distances in meters
    """
    lat1 = np.radians(home_lat)
    lat2 = np.radians(lats)
    dlat = lat2 - lat1
    dlon = np.radians(lons) - np.radians(home_lon)
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_M * c
