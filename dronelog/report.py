"""Printable HTML flight report.

Builds one self-contained HTML document for any number of flights:
- Header with pilot, totals and generation time
- Summary cards (flights, air time, distance, flight days)
- Flights grouped by calendar day, one card per flight with field groups
  (General Info, Equipment, Performance, Weather, Media)
- Per-day subtotal and a grand total

The document uses inline CSS only and references no external resources,
so it can be printed or archived as a single file.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import minify_html
import rcssmin

from .constants import PLACEHOLDER
from .decorators import timed
from .derived import find_home, first_non_null, last_non_null, max_distance_from_home
from .exceptions import InvalidArgumentError
from .exporter import format_plain
from .helpers import parse_iso_timestamp
from .logger import logger
from .report_config import resolve_field_config
from .statistics import calculate_statistics, group_by_day
from .types import FlightReportEntry, ReportOptions
from .units import (
    check_unit_system,
    format_altitude,
    format_distance,
    format_duration,
    format_precipitation,
    format_pressure,
    format_speed,
    format_temperature,
    format_wind_speed,
)

__all__ = [
    "escape_html",
    "format_date_time",
    "format_time_of_day",
    "landing_time",
    "build_flight_groups",
    "build_html_report",
]

REPORT_CSS = """
:root {
  --primary: #0ea5e9;
  --text: #1e293b;
  --text-secondary: #64748b;
  --border: #e2e8f0;
  --header-bg: #f8fafc;
  --day-header-bg: #0f172a;
  --subtotal-bg: #e0f2fe;
  --group-label-bg: #f1f5f9;
}
* { margin: 0; padding: 0; box-sizing: border-box; }
body {
  font-family: 'Segoe UI', system-ui, -apple-system, sans-serif;
  font-size: 11px;
  color: var(--text);
  background: #ffffff;
  line-height: 1.5;
}
.report-container { max-width: 210mm; margin: 0 auto; padding: 20px 24px; }
.report-header {
  display: flex;
  justify-content: space-between;
  align-items: flex-start;
  margin-bottom: 16px;
  padding-bottom: 12px;
  border-bottom: 3px solid var(--primary);
}
.report-header h1 { font-size: 20px; font-weight: 700; margin-bottom: 2px; }
.report-header .subtitle { font-size: 11px; color: var(--text-secondary); font-style: italic; }
.report-header .meta { text-align: right; font-size: 10px; color: var(--text-secondary); line-height: 1.8; }
.report-header .meta strong { color: var(--text); }
.summary-row { display: flex; gap: 10px; margin-bottom: 16px; }
.summary-card {
  flex: 1;
  background: var(--header-bg);
  border: 1px solid var(--border);
  border-radius: 6px;
  padding: 10px 14px;
  text-align: center;
}
.summary-card .value { font-size: 18px; font-weight: 700; color: var(--primary); }
.summary-card .label {
  font-size: 9px;
  text-transform: uppercase;
  letter-spacing: 0.05em;
  color: var(--text-secondary);
  margin-top: 2px;
}
.day-header {
  background: var(--day-header-bg);
  color: #ffffff;
  padding: 8px 14px;
  border-radius: 6px;
  font-size: 13px;
  font-weight: 700;
  margin: 14px 0 8px;
}
.flight-card {
  border: 1px solid var(--border);
  border-radius: 5px;
  margin-bottom: 6px;
  overflow: hidden;
  page-break-inside: avoid;
}
.flight-card-header {
  background: var(--primary);
  color: #ffffff;
  padding: 3px 10px;
  font-size: 10px;
  font-weight: 600;
}
.flight-num {
  display: inline-block;
  background: rgba(255, 255, 255, 0.25);
  border-radius: 3px;
  min-width: 20px;
  margin-right: 5px;
  text-align: center;
  font-size: 9px;
  font-weight: 700;
}
.flight-groups { display: flex; flex-wrap: nowrap; overflow: hidden; }
.field-group { flex: 1 1 0; min-width: 0; border-right: 1px solid var(--border); }
.field-group:last-child { border-right: none; }
.field-group-label {
  background: var(--group-label-bg);
  padding: 2px 8px;
  font-size: 8px;
  font-weight: 700;
  text-transform: uppercase;
  letter-spacing: 0.04em;
  color: var(--text-secondary);
  border-bottom: 1px solid var(--border);
  white-space: nowrap;
}
.field-group-items { display: flex; flex-wrap: wrap; padding: 2px 4px; }
.field-item { padding: 1px 4px; min-width: 90px; flex: 1 1 auto; }
.field-item .fl { font-size: 7px; color: var(--text-secondary); text-transform: uppercase; line-height: 1.3; }
.field-item .fv { font-size: 9px; font-weight: 600; line-height: 1.3; }
.subtotal {
  background: var(--subtotal-bg);
  padding: 6px 14px;
  border-radius: 4px;
  font-size: 10px;
  font-weight: 600;
  margin-bottom: 4px;
}
.grand-total {
  background: var(--primary);
  color: #ffffff;
  padding: 10px 14px;
  border-radius: 6px;
  font-size: 12px;
  font-weight: 700;
  margin-top: 12px;
}
.report-footer {
  margin-top: 20px;
  padding-top: 12px;
  border-top: 1px solid var(--border);
  color: var(--text-secondary);
  font-size: 10px;
}
@media print {
  body { font-size: 9px; }
  .report-container { padding: 0; max-width: 100%; }
  .summary-card .value { font-size: 15px; }
  .day-header { page-break-after: avoid; }
  @page { size: A4; margin: 10mm; }
}
"""

Item = Tuple[str, str]


def escape_html(value) -> str:
    """Escape text for HTML element content and attribute values."""
    if value is None:
        return ""
    return (
        str(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _zone_name(dt: datetime) -> str:
    name = dt.tzname() or ""
    return "UTC" if name in ("UTC+00:00", "UTC") else name


def format_date_time(timestamp: Optional[str]) -> str:
    """Render as "15 Mar 2025, 02:30:15 PM UTC" in the recorded offset."""
    dt = parse_iso_timestamp(timestamp)
    if dt is None:
        return timestamp or PLACEHOLDER
    return f"{dt.strftime('%d %b %Y, %I:%M:%S %p')} {_zone_name(dt)}"


def format_time_of_day(dt: Optional[datetime]) -> str:
    if dt is None:
        return PLACEHOLDER
    return f"{dt.strftime('%I:%M:%S %p')} {_zone_name(dt)}"


def landing_time(start_time: Optional[str], duration_secs: Optional[float]) -> Optional[datetime]:
    """Takeoff plus flight duration, or None when either is unknown."""
    start = parse_iso_timestamp(start_time)
    if start is None or not duration_secs:
        return None
    return start + timedelta(seconds=duration_secs)


def _percent(value) -> str:
    if value is None or value == 0:
        return PLACEHOLDER
    return f"{format_plain(value)}%"


def _general_items(entry: FlightReportEntry, fc: Dict[str, bool]) -> List[Item]:
    flight = entry["flight"]
    telemetry = entry["data"]["telemetry"]
    start_time = flight.get("start_time")

    items: List[Item] = []
    if fc["flight_name"]:
        items.append(("Flight Name", flight.get("display_name") or flight.get("file_name") or PLACEHOLDER))
    if fc["flight_date_time"]:
        items.append(("Date/Time", format_date_time(start_time)))
    if fc["takeoff_time"]:
        items.append(("Takeoff", format_time_of_day(parse_iso_timestamp(start_time))))
    if fc["landing_time"]:
        items.append(
            ("Landing", format_time_of_day(landing_time(start_time, flight.get("duration_secs"))))
        )
    if fc["duration"]:
        items.append(("Duration", format_duration(flight.get("duration_secs"))))
    if fc["takeoff_coordinates"]:
        lat, lon = flight.get("home_lat"), flight.get("home_lon")
        if lat is None or lon is None:
            lat, lon = find_home(telemetry) or (None, None)
        location = f"{lat:.5f}, {lon:.5f}" if lat is not None and lon is not None else PLACEHOLDER
        items.append(("Takeoff Location", location))
    if fc["notes"] and flight.get("notes"):
        items.append(("Notes", flight["notes"]))
    return items


def _equipment_items(entry: FlightReportEntry, fc: Dict[str, bool]) -> List[Item]:
    flight = entry["flight"]
    drone_serial = flight.get("drone_serial")

    items: List[Item] = []
    if fc["aircraft_name"]:
        fallback = flight.get("aircraft_name") or flight.get("drone_model") or ""
        lookup: Optional[Callable[[str, str], str]] = entry.get("drone_display_name")
        name = lookup(drone_serial, fallback) if drone_serial and lookup else fallback
        items.append(("Aircraft", name or PLACEHOLDER))
    if fc["drone_model"]:
        items.append(("Drone Model", flight.get("drone_model") or PLACEHOLDER))
    if fc["drone_serial"]:
        items.append(("Drone SN", drone_serial or PLACEHOLDER))
    if fc["battery_serial"]:
        serial = flight.get("battery_serial")
        lookup_battery = entry.get("battery_display_name")
        display = lookup_battery(serial) if serial and lookup_battery else serial
        items.append(("Battery SN", display or PLACEHOLDER))
    return items


def _performance_items(entry: FlightReportEntry, fc: Dict[str, bool], units: str) -> List[Item]:
    flight = entry["flight"]
    telemetry = entry["data"]["telemetry"]

    items: List[Item] = []
    if fc["total_distance"]:
        items.append(("Distance", format_distance(flight.get("total_distance"), units)))
    if fc["max_altitude"]:
        items.append(("Max Alt.", format_altitude(flight.get("max_altitude"), units)))
    if fc["max_speed"]:
        items.append(("Max Speed", format_speed(flight.get("max_speed"), units)))
    if fc["max_distance_from_home"]:
        items.append(("Max Dist. Home", format_distance(max_distance_from_home(telemetry), units)))
    if fc["takeoff_battery"]:
        items.append(("Takeoff Bat.", _percent(first_non_null(telemetry.get("battery")))))
    if fc["landing_battery"]:
        items.append(("Landing Bat.", _percent(last_non_null(telemetry.get("battery")))))
    if fc["battery_voltage"]:
        # stored in volts, as in the CSV battery_voltage_v column
        voltage = first_non_null(telemetry.get("battery_voltage"))
        if voltage is not None and voltage != 0:
            items.append(("Voltage", f"{voltage:.2f} V"))
        else:
            items.append(("Voltage", PLACEHOLDER))
    if fc["battery_temp"]:
        items.append(
            ("Bat. Temp", format_temperature(first_non_null(telemetry.get("battery_temp")), units))
        )
    return items


def _weather_items(weather: Optional[Dict[str, Any]], fc: Dict[str, bool], units: str) -> List[Item]:
    wx = weather or {}

    def percent(key: str) -> str:
        value = wx.get(key)
        return f"{value}%" if value is not None else PLACEHOLDER

    items: List[Item] = []
    if fc["weather_condition"]:
        items.append(("Condition", wx.get("condition_label") or PLACEHOLDER))
    if fc["temperature"]:
        items.append(("Temperature", format_temperature(wx.get("temperature"), units)))
    if fc["wind_speed"]:
        items.append(("Wind", format_wind_speed(wx.get("wind_speed"), units)))
    if fc["wind_gusts"]:
        items.append(("Gusts", format_wind_speed(wx.get("wind_gusts"), units)))
    if fc["humidity"]:
        items.append(("Humidity", percent("humidity")))
    if fc["cloud_cover"]:
        items.append(("Clouds", percent("cloud_cover")))
    if fc["precipitation"]:
        items.append(("Precipitation", format_precipitation(wx.get("precipitation"), units)))
    if fc["pressure"]:
        items.append(("Pressure", format_pressure(wx.get("pressure"), units)))
    return items


def _media_items(flight: Dict[str, Any], fc: Dict[str, bool]) -> List[Item]:
    items: List[Item] = []
    for key, label in (("photo_count", "Photos"), ("video_count", "Videos")):
        if fc[key]:
            count = flight.get(key)
            items.append((label, str(count) if count else PLACEHOLDER))
    return items


def build_flight_groups(
    entry: FlightReportEntry, field_config: Dict[str, bool], unit_system: str = "metric"
) -> List[Tuple[str, List[Item]]]:
    """
    Resolve the enabled field groups for one flight card.

    Values are plain text; escaping happens at render time. A group with no
    enabled fields is left out, and the weather group is also left out when
    every value is the placeholder.

    Args:
        entry: Flight report entry
        field_config: Fully resolved field toggles
        unit_system: "metric" or "imperial"

    Returns:
        List of (group name, [(label, value), ...])
    """
    groups = [
        ("General Info", _general_items(entry, field_config)),
        ("Equipment", _equipment_items(entry, field_config)),
        ("Performance", _performance_items(entry, field_config, unit_system)),
    ]

    weather = _weather_items(entry.get("weather"), field_config, unit_system)
    if any(value != PLACEHOLDER for _label, value in weather):
        groups.append(("Weather", weather))

    groups.append(("Media", _media_items(entry["flight"], field_config)))
    return [(name, items) for name, items in groups if items]


def _plural(count: int) -> str:
    return "flight" if count == 1 else "flights"


def _render_card(entry: FlightReportEntry, number: int, fc: Dict[str, bool], units: str) -> List[str]:
    flight = entry["flight"]
    title = flight.get("display_name") or flight.get("file_name") or f"Flight {number}"

    lines = [
        '  <div class="flight-card">',
        '    <div class="flight-card-header">',
        f'      <span class="flight-num">{number}</span>{escape_html(title)}',
        "    </div>",
        '    <div class="flight-groups">',
    ]
    for group_name, items in build_flight_groups(entry, fc, units):
        lines.append('      <div class="field-group">')
        lines.append(f'        <div class="field-group-label">{escape_html(group_name)}</div>')
        lines.append('        <div class="field-group-items">')
        for label, value in items:
            lines.append(
                f'          <div class="field-item"><div class="fl">{escape_html(label)}</div>'
                f'<div class="fv">{escape_html(value)}</div></div>'
            )
        lines.append("        </div>")
        lines.append("      </div>")
    lines.extend(["    </div>", "  </div>"])
    return lines


def _format_generated_at(generated_at) -> str:
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)
    if isinstance(generated_at, datetime):
        if generated_at.tzinfo is None:
            generated_at = generated_at.replace(tzinfo=timezone.utc)
        return f"{generated_at.strftime('%d %b %Y, %I:%M:%S %p')} {_zone_name(generated_at)}"
    return str(generated_at)


@timed
def build_html_report(entries: Sequence[FlightReportEntry], options: ReportOptions) -> str:
    """
    Build the HTML report for a set of flights.

    Args:
        entries: Flights with their bundles, optional weather and name lookups
        options: Title, pilot, field toggles, unit system, generation time
            and whether to minify the whole document

    Returns:
        Complete HTML document

    Raises:
        InvalidArgumentError: For an unknown unit system
        ConfigurationError: For an invalid field configuration
    """
    if not isinstance(options, dict) or "document_title" not in options:
        raise InvalidArgumentError("Report options need a document_title", argument="options")

    title = options["document_title"]
    pilot = options.get("pilot_name") or PLACEHOLDER
    units = check_unit_system(options.get("unit_system", "metric"))
    fc = resolve_field_config(options.get("field_config"))
    generated = _format_generated_at(options.get("generated_at"))

    entries = list(entries)
    days = group_by_day(entries)
    totals = calculate_statistics([e["flight"] for e in entries])
    total_time = format_duration(totals["total_duration_secs"])
    total_distance = format_distance(totals["total_distance_m"], units)

    lines = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="UTF-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f"<title>{escape_html(title)}</title>",
        f"<style>{rcssmin.cssmin(REPORT_CSS)}</style>",
        "</head>",
        "<body>",
        '<div class="report-container">',
        '  <div class="report-header">',
        "    <div>",
        f"      <h1>{escape_html(title)}</h1>",
        '      <div class="subtitle">Comprehensive drone flights summary</div>',
        "    </div>",
        '    <div class="meta">',
        f"      <div><strong>Pilot:</strong> {escape_html(pilot)}</div>",
        f"      <div><strong>Reported Flights:</strong> {totals['num_flights']}</div>",
        f"      <div><strong>Total Air Time:</strong> {escape_html(total_time)}</div>",
        f"      <div><strong>Total Distance:</strong> {escape_html(total_distance)}</div>",
        f"      <div><strong>Generated:</strong> {escape_html(generated)}</div>",
        "    </div>",
        "  </div>",
        '  <div class="summary-row">',
    ]
    for value, label in (
        (totals["num_flights"], "Total Flights"),
        (total_time, "Total Air Time"),
        (total_distance, "Total Distance"),
        (len(days), "Flight Days"),
    ):
        lines.append(
            f'    <div class="summary-card"><div class="value">{escape_html(value)}</div>'
            f'<div class="label">{label}</div></div>'
        )
    lines.append("  </div>")

    number = 0
    for day in days:
        count = len(day["entries"])
        lines.append(
            f'  <div class="day-header">{escape_html(day["label"])} · {count} {_plural(count)}</div>'
        )
        for entry in day["entries"]:
            number += 1
            lines.extend(_render_card(entry, number, fc, units))

        stats = day["stats"]
        lines.append(
            f'  <div class="subtotal">Subtotal: {count} {_plural(count)} · '
            f"{escape_html(format_duration(stats['total_duration_secs']))} · "
            f"{escape_html(format_distance(stats['total_distance_m'], units))}</div>"
        )

    lines.extend(
        [
            f'  <div class="grand-total">Grand Total: {totals["num_flights"]} '
            f"{_plural(totals['num_flights'])} · {escape_html(total_time)} · "
            f"{escape_html(total_distance)}</div>",
            f'  <div class="report-footer">Generated on {escape_html(generated)}</div>',
            "</div>",
            "</body>",
            "</html>",
        ]
    )
    html = "\n".join(lines)

    logger.debug(f"HTML report: {len(entries)} flights over {len(days)} days")
    if options.get("minify"):
        html = minify_html.minify(html)
    return html
