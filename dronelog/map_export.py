"""Standalone HTML map preview of a flight path.

Renders the smoothed, colour-classified track with folium: one PolyLine
per segment so every segment carries its own ramp colour, plus markers for
takeoff, landing and the recorded home point.
"""

from typing import Any, Dict

import folium

from .constants import DEFAULT_SMOOTHING_RESOLUTION
from .decorators import require_bundle, timed
from .derived import color_segments, rgb_to_hex
from .geo_export import flight_title
from .geometry import clean_track, estimate_zoom, track_bounds, track_center
from .logger import logger

__all__ = ["build_map", "build_map_html"]


def build_map(
    bundle: Dict[str, Any],
    color_by: str = "progress",
    resolution: int = DEFAULT_SMOOTHING_RESOLUTION,
) -> folium.Map:
    """
    Build a folium map for a flight.

    Args:
        bundle: Flight data bundle
        color_by: Colour mode for the path segments
        resolution: Catmull-Rom smoothing resolution

    Returns:
        folium.Map instance
    """
    flight = bundle["flight"]
    track = clean_track(bundle.get("track") or [])
    home_lat = flight.get("home_lat")
    home_lon = flight.get("home_lon")

    center = track_center(track)
    if center is None:
        center = [home_lon or 0.0, home_lat or 0.0]
    bounds = track_bounds(track)

    m = folium.Map(
        location=[center[1], center[0]],
        zoom_start=round(estimate_zoom(bounds)),
        tiles="OpenStreetMap",
    )

    path_layer = folium.FeatureGroup(name=f"Path ({color_by})")
    segments = color_segments(
        track, color_by, home_lat=home_lat, home_lon=home_lon, resolution=resolution
    )
    for segment in segments:
        start, end = segment["path"]
        folium.PolyLine(
            locations=[[start[1], start[0]], [end[1], end[0]]],
            color=rgb_to_hex(segment["color"]),
            weight=4,
            opacity=0.9,
        ).add_to(path_layer)
    path_layer.add_to(m)

    if track:
        folium.CircleMarker(
            location=[track[0][1], track[0][0]],
            radius=6,
            color="#22c55e",
            fill=True,
            tooltip="Takeoff",
        ).add_to(m)
        folium.CircleMarker(
            location=[track[-1][1], track[-1][0]],
            radius=6,
            color="#ef4444",
            fill=True,
            tooltip="Landing",
        ).add_to(m)
    if home_lat is not None and home_lon is not None:
        folium.Marker(location=[home_lat, home_lon], tooltip="Home").add_to(m)

    if bounds:
        m.fit_bounds([[bounds[0][1], bounds[0][0]], [bounds[1][1], bounds[1][0]]])

    logger.debug(f"Map preview: {len(segments):,} segments for {flight_title(flight)}")
    return m


@timed
@require_bundle
def build_map_html(
    bundle: Dict[str, Any],
    color_by: str = "progress",
    resolution: int = DEFAULT_SMOOTHING_RESOLUTION,
) -> str:
    """Render :func:`build_map` to a complete HTML document."""
    m = build_map(bundle, color_by=color_by, resolution=resolution)
    return m.get_root().render()
