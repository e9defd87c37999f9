"""
Drone Logbook

Downsampling, derived geometry and export tools for drone flight logs.
"""

__version__ = "1.0.0"

# Export key functions
from .geometry import haversine_distance, smooth_track, track_bounds, track_center
from .downsampler import downsample, downsample_bundle
from .derived import (
    color_segments,
    distance_to_home_series,
    max_distance_from_home,
    value_to_color,
)
from .exporter import build_csv, build_json, export_flight, load_bundle
from .geo_export import build_gpx, build_kml
from .map_export import build_map_html
from .report import build_html_report
from .report_config import DEFAULT_FIELD_CONFIG, FIELD_GROUPS, resolve_field_config
from .statistics import calculate_statistics
from .weather import fetch_flight_weather, get_weather_or_none
from .validation import validate_bundle, validate_telemetry
from .exceptions import (
    DronelogError,
    InvalidArgumentError,
    TelemetryShapeError,
    DataExportError,
    WeatherUnavailableError,
    ConfigurationError,
)

__all__ = [
    # Geometry
    "haversine_distance",
    "smooth_track",
    "track_bounds",
    "track_center",
    # Downsampling
    "downsample",
    "downsample_bundle",
    # Derived fields
    "color_segments",
    "distance_to_home_series",
    "max_distance_from_home",
    "value_to_color",
    # Export
    "build_csv",
    "build_json",
    "build_gpx",
    "build_kml",
    "build_map_html",
    "export_flight",
    "load_bundle",
    # Report
    "build_html_report",
    "DEFAULT_FIELD_CONFIG",
    "FIELD_GROUPS",
    "resolve_field_config",
    "calculate_statistics",
    # Weather
    "fetch_flight_weather",
    "get_weather_or_none",
    # Validation
    "validate_bundle",
    "validate_telemetry",
    # Exceptions
    "DronelogError",
    "InvalidArgumentError",
    "TelemetryShapeError",
    "DataExportError",
    "WeatherUnavailableError",
    "ConfigurationError",
]
