"""GPX 1.1 and KML 2.2 export.

Both formats are consumed by GPS viewers that reject malformed XML, so
every interpolated value goes through :func:`escape_xml` and samples
without a position fix are skipped rather than written as empty elements.

GPX:
- Normal flight: one ``trk``/``trkseg`` with a ``trkpt`` per sample,
  elevation and absolute UTC time (flight start + sample offset)
- Manual entry with home coordinates: a single ``wpt``
- Manual entry without location: a metadata-only document

KML:
- Normal flight: one styled ``LineString`` placemark using absolute
  altitude, falling back to height, VPS height, then 0 per point
- (0, 0) fixes are dropped; receivers report them before acquiring GPS
- Manual entries: a ``Point`` placemark or an empty document
"""

from typing import Any, Dict, List

from .constants import (
    EXPORT_CREATOR,
    GPX_NAMESPACE,
    KML_LINE_COLOR,
    KML_LINE_WIDTH,
    KML_NAMESPACE,
    NULL_ISLAND_EPSILON,
)
from .decorators import require_bundle, timed
from .exporter import format_plain
from .helpers import offset_timestamp, parse_iso_timestamp, to_iso_utc
from .logger import logger
from .validation import is_manual_entry, is_track_aligned

__all__ = [
    "escape_xml",
    "flight_title",
    "build_gpx",
    "build_kml",
]

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def escape_xml(value) -> str:
    """Escape ``& < > " '`` for element content and attribute values."""
    if value is None:
        return ""
    return (
        str(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def flight_title(flight: Dict[str, Any]) -> str:
    """Display name, then file name, then a generic label."""
    return flight.get("display_name") or flight.get("file_name") or "Flight"


def _has_home(flight: Dict[str, Any]) -> bool:
    return flight.get("home_lat") is not None and flight.get("home_lon") is not None


def _gpx_document(body: List[str]) -> str:
    lines = [
        XML_DECLARATION,
        f'<gpx version="1.1" creator="{escape_xml(EXPORT_CREATOR)}" '
        f'xmlns="{GPX_NAMESPACE}">',
    ]
    lines.extend(body)
    lines.append("</gpx>")
    return "\n".join(lines)


def _gpx_track_points(bundle: Dict[str, Any]) -> List[List[Any]]:
    """(lat, lon, ele, offset_seconds) per sample with a usable fix."""
    telemetry = bundle["telemetry"]
    track = bundle.get("track") or []
    times = telemetry["time"]

    if is_track_aligned(track, telemetry):
        candidates = (
            (point[1], point[0], point[2] if len(point) > 2 else None, times[i])
            for i, point in enumerate(track)
        )
    else:
        lats = telemetry.get("latitude") or [None] * len(times)
        lons = telemetry.get("longitude") or [None] * len(times)
        heights = telemetry.get("height") or [None] * len(times)
        candidates = zip(lats, lons, heights, times)

    return [
        [lat, lon, ele, offset]
        for lat, lon, ele, offset in candidates
        if lat is not None and lon is not None
    ]


@timed
@require_bundle
def build_gpx(bundle: Dict[str, Any]) -> str:
    """
    Build a GPX 1.1 document for a flight.

    Args:
        bundle: Flight data bundle

    Returns:
        GPX XML text
    """
    flight = bundle["flight"]
    telemetry = bundle["telemetry"]
    name = escape_xml(flight_title(flight))

    if is_manual_entry(telemetry):
        if not _has_home(flight):
            return _gpx_document(["  <metadata>", f"    <name>{name}</name>", "  </metadata>"])

        body = [
            f'  <wpt lat="{escape_xml(format_plain(flight["home_lat"]))}" '
            f'lon="{escape_xml(format_plain(flight["home_lon"]))}">'
        ]
        # GPX orders wpt children: ele, time, name
        if flight.get("max_altitude") is not None:
            body.append(f"    <ele>{escape_xml(format_plain(flight['max_altitude']))}</ele>")
        start = parse_iso_timestamp(flight.get("start_time"))
        if start is not None:
            body.append(f"    <time>{to_iso_utc(start)}</time>")
        body.append(f"    <name>{name}</name>")
        body.append("  </wpt>")
        return _gpx_document(body)

    start_time = flight.get("start_time")
    points = _gpx_track_points(bundle)

    body = ["  <trk>", f"    <name>{name}</name>", "    <trkseg>"]
    for lat, lon, ele, offset in points:
        body.append(
            f'      <trkpt lat="{escape_xml(format_plain(lat))}" '
            f'lon="{escape_xml(format_plain(lon))}">'
        )
        if ele is not None:
            body.append(f"        <ele>{escape_xml(format_plain(ele))}</ele>")
        timestamp = offset_timestamp(start_time, offset)
        if timestamp is not None:
            body.append(f"        <time>{timestamp}</time>")
        body.append("      </trkpt>")
    body.extend(["    </trkseg>", "  </trk>"])

    logger.debug(f"GPX export: {len(points):,} track points")
    return _gpx_document(body)


def _kml_document(body: List[str]) -> str:
    lines = [XML_DECLARATION, f'<kml xmlns="{KML_NAMESPACE}">', "  <Document>"]
    lines.extend(body)
    lines.extend(["  </Document>", "</kml>"])
    return "\n".join(lines)


def _kml_coordinates(telemetry: Dict[str, Any]) -> List[str]:
    lats = telemetry.get("latitude") or []
    n = len(lats)
    lons = telemetry.get("longitude") or [None] * n
    altitudes = telemetry.get("altitude") or [None] * n
    heights = telemetry.get("height") or [None] * n
    vps_heights = telemetry.get("vps_height") or [None] * n

    coordinates = []
    for i, lat in enumerate(lats):
        lon = lons[i]
        if lat is None or lon is None:
            continue
        if abs(lat) < NULL_ISLAND_EPSILON and abs(lon) < NULL_ISLAND_EPSILON:
            continue

        ele = altitudes[i]
        if ele is None:
            ele = heights[i]
        if ele is None:
            ele = vps_heights[i]
        if ele is None:
            ele = 0
        coordinates.append(f"{format_plain(lon)},{format_plain(lat)},{format_plain(ele)}")
    return coordinates


@timed
@require_bundle
def build_kml(bundle: Dict[str, Any]) -> str:
    """
    Build a KML 2.2 document for a flight.

    Args:
        bundle: Flight data bundle

    Returns:
        KML XML text
    """
    flight = bundle["flight"]
    telemetry = bundle["telemetry"]
    name = escape_xml(flight_title(flight))

    if is_manual_entry(telemetry):
        if not _has_home(flight):
            return _kml_document([f"    <name>{name}</name>"])

        altitude = flight.get("max_altitude")
        coordinates = ",".join(
            format_plain(v)
            for v in (flight["home_lon"], flight["home_lat"], altitude if altitude is not None else 0)
        )
        return _kml_document(
            [
                f"    <name>{name}</name>",
                "    <Placemark>",
                f"      <name>{name}</name>",
                "      <Point>",
                f"        <coordinates>{escape_xml(coordinates)}</coordinates>",
                "      </Point>",
                "    </Placemark>",
            ]
        )

    coordinates = _kml_coordinates(telemetry)
    logger.debug(f"KML export: {len(coordinates):,} coordinates")

    return _kml_document(
        [
            f"    <name>{name}</name>",
            '    <Style id="flightPath">',
            "      <LineStyle>",
            f"        <color>{KML_LINE_COLOR}</color>",
            f"        <width>{KML_LINE_WIDTH}</width>",
            "      </LineStyle>",
            "    </Style>",
            "    <Placemark>",
            f"      <name>{name}</name>",
            "      <styleUrl>#flightPath</styleUrl>",
            "      <LineString>",
            "        <altitudeMode>absolute</altitudeMode>",
            f"        <coordinates>{escape_xml(' '.join(coordinates))}</coordinates>",
            "      </LineString>",
            "    </Placemark>",
        ]
    )
