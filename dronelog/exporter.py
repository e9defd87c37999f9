"""Flight data export to CSV and JSON, plus file output for every format.

CSV Layout:
The column order is fixed (see ``constants.CSV_HEADERS``) because
spreadsheets and third-party tools address columns by position:

1. time_s, lat, lng, alt_m, distance_to_home_m
2. every telemetry channel
3. is_photo, is_video, flight_mode
4. messages and metadata JSON blobs, filled on the first row only

Precision Rules:
- lat/lng are stored as doubles and are written at full precision
- other channels are stored as single-precision floats; they are rounded
  (2 decimals, 3 for voltages, 1 for temperature and RC sticks) so that
  float artefacts like 12.300000190734863 never reach the file
- time is an integer when whole, otherwise one decimal (10 Hz logs)

JSON Layout:
The JSON export is the lossless superset: the full bundle, an
``_export_info`` envelope and a ``derived`` section. It can be read back
with :func:`load_bundle`.

Manual entries (no telemetry samples) export a single synthetic row built
from the home coordinates.
"""

import os
import json
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from . import __version__
from .constants import (
    CELL_VOLTAGE_DECIMALS,
    CSV_ATTITUDE_COLUMNS,
    CSV_EXPORT_FORMAT,
    CSV_HEADERS,
    CSV_LINK_COLUMNS,
    CSV_METRIC_COLUMNS,
    JSON_EXPORT_FORMAT,
)
from .decorators import require_bundle, timed
from .derived import distance_to_home_series
from .exceptions import DataExportError, TelemetryShapeError
from .helpers import utc_now_iso
from .logger import logger
from .validation import is_manual_entry, is_track_aligned, validate_bundle

__all__ = [
    "EXPORT_FORMATS",
    "escape_csv",
    "format_number",
    "format_plain",
    "format_time",
    "build_csv",
    "build_json",
    "parse_bundle",
    "load_bundle",
    "write_output",
    "export_flight",
]

EXPORT_FORMATS = ("csv", "json", "gpx", "kml", "map")

_JSON_SEPARATORS = (",", ":")


def escape_csv(value: str) -> str:
    """Quote a field containing a comma, quote or line break; double quotes."""
    if any(c in value for c in (",", '"', "\n", "\r")):
        return '"' + value.replace('"', '""') + '"'
    return value


def format_number(value, decimals: int) -> str:
    """
    Round to ``decimals`` and drop trailing zeros.

    Args:
        value: Number or None
        decimals: Decimal places to keep

    Returns:
        Formatted string, empty for None (e.g. 12.300000190734863 -> "12.3")
    """
    if value is None:
        return ""
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def format_plain(value) -> str:
    """Full precision, whole floats without a trailing ``.0``."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def format_time(seconds) -> str:
    """Integer seconds when whole, otherwise one decimal place."""
    if float(seconds).is_integer():
        return str(int(seconds))
    return f"{seconds:.1f}"


def _compact_number(value, decimals: int):
    rounded = round(value, decimals)
    if float(rounded).is_integer():
        return int(rounded)
    return rounded


def _format_cells(cells) -> str:
    if cells is None:
        return ""
    return json.dumps(
        [_compact_number(v, CELL_VOLTAGE_DECIMALS) for v in cells],
        separators=_JSON_SEPARATORS,
    )


def _format_flag(value) -> str:
    if value is None:
        return ""
    return "1" if value else "0"


def _channel_value(telemetry: Dict[str, Any], channel: str, index: int):
    values = telemetry.get(channel)
    if not values:
        return None
    return values[index]


def _build_metadata_json(flight: Dict[str, Any], exported_at: str, app_version: str) -> str:
    tags = flight.get("tags")
    metadata = {
        "format": CSV_EXPORT_FORMAT,
        "app_version": app_version,
        "exported_at": exported_at,
        "display_name": flight.get("display_name"),
        "drone_model": flight.get("drone_model"),
        "drone_serial": flight.get("drone_serial"),
        "aircraft_name": flight.get("aircraft_name"),
        "battery_serial": flight.get("battery_serial"),
        "start_time": flight.get("start_time"),
        "duration_secs": flight.get("duration_secs"),
        "total_distance_m": flight.get("total_distance"),
        "max_altitude_m": flight.get("max_altitude"),
        "max_speed_ms": flight.get("max_speed"),
        "home_lat": flight.get("home_lat"),
        "home_lon": flight.get("home_lon"),
        "notes": flight.get("notes"),
        "tags": (
            [{"tag": t["tag"], "tag_type": t["tag_type"]} for t in tags]
            if tags is not None
            else None
        ),
    }
    clean = {key: value for key, value in metadata.items() if value is not None}
    return json.dumps(clean, separators=_JSON_SEPARATORS, ensure_ascii=False)


def _build_messages_json(messages: Optional[List[Dict[str, Any]]]) -> str:
    if not messages:
        return ""
    return json.dumps(
        [
            {
                "timestamp_ms": m.get("timestamp_ms"),
                "type": m.get("message_type"),
                "message": m.get("message"),
            }
            for m in messages
        ],
        separators=_JSON_SEPARATORS,
        ensure_ascii=False,
    )


def _manual_entry_row(flight: Dict[str, Any], messages_json: str, metadata_json: str) -> List[str]:
    max_altitude = format_plain(flight.get("max_altitude"))
    row = [""] * len(CSV_HEADERS)
    row[0] = "0"
    row[1] = format_plain(flight.get("home_lat"))
    row[2] = format_plain(flight.get("home_lon"))
    row[3] = max_altitude
    row[4] = "0"
    row[CSV_HEADERS.index("altitude_m")] = max_altitude
    row[-2] = messages_json
    row[-1] = metadata_json
    return row


def _telemetry_row(
    bundle: Dict[str, Any],
    index: int,
    distance_to_home: List[Optional[float]],
    track_aligned: bool,
) -> List[str]:
    telemetry = bundle["telemetry"]

    if track_aligned:
        point = bundle["track"][index]
        lng, lat, alt = point[0], point[1], point[2]
    else:
        lat = _channel_value(telemetry, "latitude", index)
        lng = _channel_value(telemetry, "longitude", index)
        alt = None

    row = [
        format_time(telemetry["time"][index]),
        format_plain(lat),
        format_plain(lng),
        format_number(alt, 2),
        format_number(distance_to_home[index], 2),
    ]
    for channel, decimals in CSV_METRIC_COLUMNS:
        value = _channel_value(telemetry, channel, index)
        row.append(format_plain(value) if decimals is None else format_number(value, decimals))
    row.append(_format_cells(_channel_value(telemetry, "cell_voltages", index)))
    for channel in CSV_LINK_COLUMNS:
        row.append(format_plain(_channel_value(telemetry, channel, index)))
    for channel, decimals in CSV_ATTITUDE_COLUMNS:
        row.append(format_number(_channel_value(telemetry, channel, index), decimals))
    row.append(_format_flag(_channel_value(telemetry, "is_photo", index)))
    row.append(_format_flag(_channel_value(telemetry, "is_video", index)))
    mode = _channel_value(telemetry, "flight_mode", index)
    row.append("" if mode is None else str(mode))
    return row


@timed
@require_bundle
def build_csv(
    bundle: Dict[str, Any],
    exported_at: Optional[str] = None,
    app_version: str = __version__,
) -> str:
    """
    Build the CSV export of a flight.

    Args:
        bundle: Flight data bundle
        exported_at: Export timestamp for the metadata column (default: now)
        app_version: Version recorded in the metadata column

    Returns:
        CSV text with a header row, rows joined by "\\n"
    """
    flight = bundle["flight"]
    telemetry = bundle["telemetry"]
    metadata_json = _build_metadata_json(flight, exported_at or utc_now_iso(), app_version)
    messages_json = _build_messages_json(bundle.get("messages"))

    header = ",".join(CSV_HEADERS)

    if is_manual_entry(telemetry):
        row = _manual_entry_row(flight, messages_json, metadata_json)
        return "\n".join([header, ",".join(escape_csv(v) for v in row)])

    track_aligned = is_track_aligned(bundle.get("track"), telemetry)
    distance_to_home = distance_to_home_series(telemetry)

    lines = [header]
    for index in range(len(telemetry["time"])):
        row = _telemetry_row(bundle, index, distance_to_home, track_aligned)
        row.append(messages_json if index == 0 else "")
        row.append(metadata_json if index == 0 else "")
        lines.append(",".join(escape_csv(v) for v in row))

    logger.debug(f"CSV export: {len(lines) - 1:,} rows")
    return "\n".join(lines)


@timed
@require_bundle
def build_json(
    bundle: Dict[str, Any],
    exported_at: Optional[str] = None,
    app_version: str = __version__,
) -> str:
    """
    Build the lossless JSON export of a flight.

    Raises:
        DataExportError: If the telemetry holds NaN or infinite values
    """
    export_data = {
        "_export_info": {
            "format": JSON_EXPORT_FORMAT,
            "app_version": app_version,
            "exported_at": exported_at or utc_now_iso(),
        },
        "flight": bundle["flight"],
        "telemetry": bundle["telemetry"],
        "track": bundle.get("track") or [],
        "messages": bundle.get("messages") or [],
        "derived": {
            "distance_to_home": distance_to_home_series(bundle["telemetry"]),
        },
    }
    try:
        return json.dumps(export_data, indent=2, ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        raise DataExportError(f"Flight data is not JSON serialisable: {e}") from e


def parse_bundle(text: str) -> Dict[str, Any]:
    """
    Read a JSON export (or a bare bundle) back into a flight bundle.

    Raises:
        DataExportError: If the text is not JSON
        TelemetryShapeError: If the document is not a valid bundle
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise DataExportError(f"Invalid flight JSON: {e}") from e

    if not isinstance(document, dict):
        raise TelemetryShapeError("Flight JSON must contain an object")

    bundle = {
        "flight": document.get("flight"),
        "telemetry": document.get("telemetry"),
        "track": document.get("track") or [],
        "messages": document.get("messages") or [],
    }
    validate_bundle(bundle)
    return bundle


def load_bundle(path) -> Dict[str, Any]:
    """Load a flight bundle from a JSON file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DataExportError(f"Could not read flight file: {e}", output_path=str(path)) from e
    return parse_bundle(text)


def _builders():
    from .geo_export import build_gpx, build_kml
    from .map_export import build_map_html

    return {
        "csv": build_csv,
        "json": build_json,
        "gpx": build_gpx,
        "kml": build_kml,
        "map": build_map_html,
    }


def write_output(payload: str, output_path, label: str = "Export") -> Tuple[str, int]:
    """
    Write ``payload`` to ``output_path`` through a temporary file.

    The target is replaced in one step, so readers never see a partial file.

    Returns:
        Tuple of (output_file_path, file_size_bytes)

    Raises:
        DataExportError: If the file cannot be written
    """
    output_file = os.fspath(output_path)
    directory = os.path.dirname(os.path.abspath(output_file))
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=directory, delete=False, suffix=".tmp"
        ) as f:
            tmp_name = f.name
            f.write(payload)
        os.replace(tmp_name, output_file)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise DataExportError(f"Could not write {label.lower()}: {e}", output_path=output_file) from e

    file_size = os.path.getsize(output_file)
    logger.info(f"  ✓ {label}: {output_file} ({file_size / 1024:.1f} KB)")
    return output_file, file_size


def export_flight(
    bundle: Dict[str, Any], fmt: str, output_path, **options: Any
) -> Tuple[str, int]:
    """
    Encode a flight and write it to ``output_path``.

    The payload is built completely before anything touches the disk.

    Args:
        bundle: Flight data bundle
        fmt: One of :data:`EXPORT_FORMATS`
        output_path: Destination file
        **options: Passed through to the format's builder

    Returns:
        Tuple of (output_file_path, file_size_bytes)

    Raises:
        DataExportError: For an unknown format or a failed write
    """
    builders = _builders()
    if fmt not in builders:
        raise DataExportError(
            f"Unknown export format '{fmt}', expected one of {EXPORT_FORMATS}",
            output_path=str(output_path),
        )

    payload = builders[fmt](bundle, **options)
    return write_output(payload, output_path, label=f"{fmt.upper()} export")
