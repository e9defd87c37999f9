"""Field selection for the HTML flight report.

The report builder consumes a fully resolved ``{field_key: bool}`` mapping.
This module holds the defaults, the display grouping, validation of
user-supplied overrides and JSON persistence between sessions.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .cache import get_cache_dir
from .exceptions import ConfigurationError
from .logger import logger

__all__ = [
    "FIELD_GROUPS",
    "DEFAULT_FIELD_CONFIG",
    "CONFIG_FILE_NAME",
    "resolve_field_config",
    "default_config_path",
    "load_field_config",
    "save_field_config",
]

CONFIG_FILE_NAME = "report_fields.json"

FIELD_GROUPS: List[Dict[str, Any]] = [
    {
        "name": "General Info",
        "fields": [
            ("flight_date_time", "Flight Date/Time"),
            ("flight_name", "Flight Name"),
            ("duration", "Duration"),
            ("takeoff_time", "Takeoff Time"),
            ("landing_time", "Landing Time"),
            ("takeoff_coordinates", "Takeoff Coordinates"),
            ("notes", "Notes"),
        ],
    },
    {
        "name": "Equipment",
        "fields": [
            ("aircraft_name", "Aircraft Name"),
            ("drone_model", "Drone Model"),
            ("drone_serial", "Drone Serial"),
            ("battery_serial", "Battery Serial"),
        ],
    },
    {
        "name": "Flight Stats",
        "fields": [
            ("total_distance", "Total Distance"),
            ("max_altitude", "Max Altitude"),
            ("max_speed", "Max Speed"),
            ("max_distance_from_home", "Max Distance from Home"),
        ],
    },
    {
        "name": "Battery",
        "fields": [
            ("takeoff_battery", "Takeoff Battery %"),
            ("landing_battery", "Landing Battery %"),
            ("battery_voltage", "Battery Voltage"),
            ("battery_temp", "Battery Temp"),
        ],
    },
    {
        "name": "Weather",
        "fields": [
            ("weather_condition", "Weather Condition"),
            ("temperature", "Temperature"),
            ("wind_speed", "Wind Speed"),
            ("wind_gusts", "Wind Gusts"),
            ("humidity", "Humidity"),
            ("cloud_cover", "Cloud Cover"),
            ("precipitation", "Precipitation"),
            ("pressure", "Pressure"),
        ],
    },
    {
        "name": "Media",
        "fields": [
            ("photo_count", "Photos"),
            ("video_count", "Videos"),
        ],
    },
]

DEFAULT_FIELD_CONFIG: Dict[str, bool] = {
    key: True for group in FIELD_GROUPS for key, _label in group["fields"]
}


def resolve_field_config(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, bool]:
    """
    Merge a partial configuration onto the defaults.

    Args:
        overrides: Field keys mapped to booleans

    Returns:
        Complete configuration covering every field

    Raises:
        ConfigurationError: For unknown keys or non-boolean values
    """
    config = dict(DEFAULT_FIELD_CONFIG)
    for key, value in (overrides or {}).items():
        if key not in DEFAULT_FIELD_CONFIG:
            raise ConfigurationError("Unknown report field", config_key=key)
        if not isinstance(value, bool):
            raise ConfigurationError("Report field toggle must be true or false", config_key=key)
        config[key] = value
    return config


def default_config_path() -> Path:
    return get_cache_dir() / CONFIG_FILE_NAME


def load_field_config(path=None) -> Dict[str, bool]:
    """
    Load the persisted field configuration.

    Missing or unreadable files fall back to the defaults. Unknown keys in
    a readable file are ignored so that older files keep working.
    """
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        return dict(DEFAULT_FIELD_CONFIG)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load report field config from {config_path}: {e}")
        return dict(DEFAULT_FIELD_CONFIG)

    if not isinstance(stored, dict):
        logger.warning(f"Ignoring malformed report field config in {config_path}")
        return dict(DEFAULT_FIELD_CONFIG)

    known = {
        key: value
        for key, value in stored.items()
        if key in DEFAULT_FIELD_CONFIG and isinstance(value, bool)
    }
    return resolve_field_config(known)


def save_field_config(config: Mapping[str, Any], path=None) -> Path:
    """
    Validate and persist a field configuration.

    Returns:
        Path the configuration was written to
    """
    resolved = resolve_field_config(config)
    config_path = Path(path) if path is not None else default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(resolved, f, indent=2, sort_keys=True)
    logger.debug(f"Saved report field config to {config_path}")
    return config_path
