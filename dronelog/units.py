"""Unit conversion and display formatting.

Every physical quantity shown to a user goes through these functions so
that the report and any other renderer print identical numbers. Stored
values are SI (meters, m/s, °C, mm, hPa); wind arrives in km/h from the
weather provider.

Missing values and zeros render as the placeholder ``—``.
"""

from typing import Optional

from .constants import (
    HPA_TO_INHG,
    KMH_TO_MPH,
    METERS_PER_MILE,
    METERS_TO_FEET,
    MM_TO_INCHES,
    MS_TO_KMH,
    MS_TO_MPH,
    PLACEHOLDER,
    SECONDS_PER_HOUR,
)
from .exceptions import InvalidArgumentError

__all__ = [
    "UNIT_SYSTEMS",
    "check_unit_system",
    "format_duration",
    "format_distance",
    "format_speed",
    "format_altitude",
    "format_temperature",
    "format_wind_speed",
    "format_precipitation",
    "format_pressure",
    "celsius_to_fahrenheit",
]

UNIT_SYSTEMS = ("metric", "imperial")


def check_unit_system(unit_system: str) -> str:
    """Return ``unit_system`` if known, else raise InvalidArgumentError."""
    if unit_system not in UNIT_SYSTEMS:
        raise InvalidArgumentError(
            f"Unit system must be one of {UNIT_SYSTEMS}",
            argument="unit_system",
            value=unit_system,
        )
    return unit_system


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def format_duration(seconds: Optional[float]) -> str:
    """
    Format a duration as "1h 2m 3s" or "2m 3s".

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string, placeholder for None or zero
    """
    if not seconds:
        return PLACEHOLDER

    hours = int(seconds // SECONDS_PER_HOUR)
    minutes = int((seconds % SECONDS_PER_HOUR) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


def format_distance(meters: Optional[float], unit_system: str = "metric") -> str:
    """Kilometres above 1 km, meters below; miles in imperial."""
    if not meters:
        return PLACEHOLDER
    if unit_system == "imperial":
        return f"{meters / METERS_PER_MILE:.2f} mi"
    if meters >= 1000:
        return f"{meters / 1000:.2f} km"
    return f"{meters:.0f} m"


def format_speed(meters_per_second: Optional[float], unit_system: str = "metric") -> str:
    if not meters_per_second:
        return PLACEHOLDER
    if unit_system == "imperial":
        return f"{meters_per_second * MS_TO_MPH:.1f} mph"
    return f"{meters_per_second * MS_TO_KMH:.1f} km/h"


def format_altitude(meters: Optional[float], unit_system: str = "metric") -> str:
    if not meters:
        return PLACEHOLDER
    if unit_system == "imperial":
        return f"{meters * METERS_TO_FEET:.1f} ft"
    return f"{meters:.1f} m"


def format_temperature(celsius: Optional[float], unit_system: str = "metric") -> str:
    """Temperatures may legitimately be zero, so only None is a placeholder."""
    if celsius is None:
        return PLACEHOLDER
    if unit_system == "imperial":
        return f"{celsius_to_fahrenheit(celsius):.1f} °F"
    return f"{celsius:.1f} °C"


def format_wind_speed(kmh: Optional[float], unit_system: str = "metric") -> str:
    if kmh is None:
        return PLACEHOLDER
    if unit_system == "imperial":
        return f"{kmh * KMH_TO_MPH:.1f} mph"
    return f"{kmh:.1f} km/h"


def format_precipitation(mm: Optional[float], unit_system: str = "metric") -> str:
    if mm is None:
        return PLACEHOLDER
    if unit_system == "imperial":
        return f"{mm * MM_TO_INCHES:.2f} in"
    return f"{mm:.1f} mm"


def format_pressure(hpa: Optional[float], unit_system: str = "metric") -> str:
    if hpa is None:
        return PLACEHOLDER
    if unit_system == "imperial":
        return f"{hpa * HPA_TO_INHG:.2f} inHg"
    return f"{hpa} hPa"
