"""Command-line interface."""

import os
import sys
from pathlib import Path

from .derived import find_home
from .downsampler import downsample_bundle
from .exceptions import DronelogError
from .exporter import EXPORT_FORMATS, export_flight, load_bundle, write_output
from .logger import logger, set_debug_mode
from .report import build_html_report
from .report_config import load_field_config
from .weather import get_weather_or_none

FORMAT_EXTENSIONS = {
    "csv": ".csv",
    "json": ".json",
    "gpx": ".gpx",
    "kml": ".kml",
    "map": ".html",
}

DEFAULT_REPORT_FILE = "flight_report.html"


def print_help():
    """Print comprehensive help message."""
    help_text = """
Drone Logbook Tools
===================

Export drone flight logs to standard formats and build printable reports.
Input files are flight bundles as written by the JSON export.

USAGE:
    dronelog export <bundle.json> --format FORMAT [OPTIONS]
    dronelog report <bundle.json> [bundle2.json ...] [OPTIONS]

EXPORT OPTIONS:
    --format FORMAT      csv, json, gpx, kml or map (HTML map preview)
    --output FILE        Output file (default: bundle name + extension)
    --max-points N       Downsample telemetry to at most N points first
    --color-by MODE      Map path colouring: progress, height, speed, distance

REPORT OPTIONS:
    --output FILE        Output file (default: flight_report.html)
    --title TITLE        Document title (default: Flight Report)
    --pilot NAME         Pilot name shown in the header
    --imperial           Use imperial units (default: metric)
    --fields FILE        JSON file with report field toggles
    --weather            Look up historical weather per flight (network)
    --minify             Minify the generated HTML

GENERAL:
    --debug              Enable debug output
    --help, -h           Show this help message

EXAMPLES:
    # Spreadsheet export
    dronelog export flight_42.json --format csv

    # Track for Google Earth, reduced to 2000 points
    dronelog export flight_42.json --format kml --max-points 2000

    # Colour-coded map preview by height
    dronelog export flight_42.json --format map --color-by height

    # Weekly report in imperial units with weather
    dronelog report week/*.json --pilot "Jane Doe" --imperial --weather
"""
    print(help_text)


def _require_value(argv, i, option):
    if i + 1 >= len(argv):
        print(f"Error: {option} requires a value")
        sys.exit(1)
    return argv[i + 1]


def _parse_args(argv):
    """Split argv into positional paths and an options dict."""
    paths = []
    options = {}
    value_options = {
        "--format", "--output", "--max-points", "--color-by",
        "--title", "--pilot", "--fields",
    }
    flag_options = {"--imperial", "--weather", "--minify"}

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--debug":
            set_debug_mode(True)
            i += 1
        elif arg in value_options:
            options[arg[2:].replace("-", "_")] = _require_value(argv, i, arg)
            i += 2
        elif arg in flag_options:
            options[arg[2:]] = True
            i += 1
        elif arg.startswith("--"):
            logger.error(f"Unknown option: {arg}")
            sys.exit(1)
        else:
            paths.append(arg)
            i += 1
    return paths, options


def run_export(paths, options):
    """Export one flight bundle."""
    if len(paths) != 1:
        print("Error: export takes exactly one bundle file")
        sys.exit(1)

    fmt = options.get("format")
    if fmt not in EXPORT_FORMATS:
        print(f"Error: --format must be one of {', '.join(EXPORT_FORMATS)}")
        sys.exit(1)

    bundle = load_bundle(paths[0])

    if "max_points" in options:
        try:
            max_points = int(options["max_points"])
        except ValueError:
            print("Error: --max-points must be an integer")
            sys.exit(1)
        bundle = downsample_bundle(bundle, max_points=max_points)

    output = options.get("output") or str(Path(paths[0]).with_suffix(FORMAT_EXTENSIONS[fmt]))
    builder_options = {}
    if fmt == "map" and "color_by" in options:
        builder_options["color_by"] = options["color_by"]

    return export_flight(bundle, fmt, output, **builder_options)


def _report_entry(bundle, with_weather):
    flight = bundle["flight"]
    entry = {"flight": flight, "data": bundle}
    if with_weather:
        lat, lon = flight.get("home_lat"), flight.get("home_lon")
        if lat is None or lon is None:
            lat, lon = find_home(bundle["telemetry"]) or (None, None)
        entry["weather"] = get_weather_or_none(lat, lon, flight.get("start_time"))
    return entry


def run_report(paths, options):
    """Build an HTML report for one or more flight bundles."""
    if not paths:
        print("Error: No flight files specified!")
        sys.exit(1)

    bundle_files = []
    for path in paths:
        if os.path.isdir(path):
            found = sorted(
                os.path.join(path, name)
                for name in os.listdir(path)
                if name.lower().endswith(".json")
            )
            if found:
                logger.info(f"Found {len(found)} flight file(s) in directory: {path}")
            else:
                logger.warning(f"No flight files found in directory: {path}")
            bundle_files.extend(found)
        elif os.path.isfile(path):
            bundle_files.append(path)
        else:
            logger.warning(f"File or directory not found: {path}")

    if not bundle_files:
        print("Error: No flight files found!")
        sys.exit(1)

    fields_file = options.get("fields")
    if fields_file and not os.path.isfile(fields_file):
        print(f"Error: Field config file not found: {fields_file}")
        sys.exit(1)

    with_weather = options.get("weather", False)
    entries = [_report_entry(load_bundle(path), with_weather) for path in bundle_files]

    html = build_html_report(
        entries,
        {
            "document_title": options.get("title") or "Flight Report",
            "pilot_name": options.get("pilot") or "",
            "field_config": load_field_config(fields_file),
            "unit_system": "imperial" if options.get("imperial") else "metric",
            "minify": options.get("minify", False),
        },
    )
    return write_output(html, options.get("output") or DEFAULT_REPORT_FILE, label="HTML report")


COMMANDS = {
    "export": run_export,
    "report": run_report,
}


def main(argv=None):
    """Main CLI entry point."""
    argv = sys.argv[1:] if argv is None else list(argv)

    if not argv or "--help" in argv or "-h" in argv:
        print_help()
        sys.exit(0 if "--help" in argv or "-h" in argv else 1)

    command = argv[0]
    if command not in COMMANDS:
        print(f"Error: Unknown command '{command}'")
        print_help()
        sys.exit(1)

    paths, options = _parse_args(argv[1:])

    try:
        COMMANDS[command](paths, options)
    except DronelogError as e:
        logger.error(str(e))
        sys.exit(1)
