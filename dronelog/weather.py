"""Historical weather lookup for flight reports.

Uses the free Open-Meteo archive API (no API key). One request fetches
every hourly variable for the flight date; the sample for the UTC hour of
the flight start is returned.

The report treats weather as optional: :func:`get_weather_or_none` logs
and returns None on any failure so report generation never aborts because
the network is down.
"""

import json
import threading
import urllib.error
import urllib.parse
import urllib.request
from datetime import timezone
from typing import Any, Dict, Optional, Tuple

from .constants import OPEN_METEO_ARCHIVE_URL, WEATHER_HOURLY_VARIABLES, WMO_WEATHER_CODES
from .exceptions import WeatherUnavailableError
from .helpers import parse_iso_timestamp
from .logger import logger
from .types import WeatherData

__all__ = [
    "wmo_code_to_label",
    "build_weather_url",
    "parse_weather_response",
    "fetch_flight_weather",
    "get_weather_or_none",
    "clear_weather_cache",
]

# (lat, lon, date, hour) -> WeatherData
_weather_cache: Dict[Tuple[str, str, str, int], WeatherData] = {}
_cache_lock = threading.Lock()


def wmo_code_to_label(code) -> str:
    """Human-readable label for a WMO weather interpretation code."""
    try:
        code = int(code)
    except (TypeError, ValueError):
        return f"WMO {code}"
    return WMO_WEATHER_CODES.get(code, f"WMO {code}")


def build_weather_url(lat: float, lon: float, date: str) -> str:
    """Archive API URL for one day at one location."""
    params = {
        "latitude": f"{lat:.4f}",
        "longitude": f"{lon:.4f}",
        "start_date": date,
        "end_date": date,
        "hourly": ",".join(WEATHER_HOURLY_VARIABLES),
        "timezone": "GMT",
    }
    return f"{OPEN_METEO_ARCHIVE_URL}?{urllib.parse.urlencode(params)}"


def parse_weather_response(payload: Dict[str, Any], hour: int) -> WeatherData:
    """
    Pick the hourly sample for ``hour`` out of an archive API response.

    Raises:
        WeatherUnavailableError: If the payload has no hourly data
    """
    hourly = payload.get("hourly") if isinstance(payload, dict) else None
    if not hourly or not isinstance(hourly.get("time"), list) or not hourly["time"]:
        raise WeatherUnavailableError("No weather data available for this flight date")

    idx = min(hour, len(hourly["time"]) - 1)

    def val(key: str, fallback: float = 0) -> float:
        series = hourly.get(key)
        if not series or idx >= len(series) or series[idx] is None:
            return fallback
        return series[idx]

    return {
        "temperature": round(val("temperature_2m"), 1),
        "apparent_temperature": round(val("apparent_temperature"), 1),
        "humidity": round(val("relative_humidity_2m")),
        "wind_speed": round(val("wind_speed_10m"), 1),
        "wind_gusts": round(val("wind_gusts_10m"), 1),
        "wind_direction": round(val("wind_direction_10m")),
        "cloud_cover": round(val("cloud_cover")),
        "precipitation": round(val("precipitation"), 1),
        "pressure": round(val("surface_pressure")),
        "condition_label": wmo_code_to_label(val("weather_code")),
    }


def fetch_flight_weather(
    lat: float, lon: float, start_time: str, timeout: float = 10
) -> WeatherData:
    """
    Fetch historical weather at a location for the hour of ``start_time``.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees
        start_time: Flight start as ISO 8601
        timeout: Request timeout in seconds

    Returns:
        WeatherData dictionary

    Raises:
        WeatherUnavailableError: On invalid input, network or API failure
    """
    start = parse_iso_timestamp(start_time)
    if start is None:
        raise WeatherUnavailableError("Invalid flight start time")

    utc = start.astimezone(timezone.utc)
    date = utc.strftime("%Y-%m-%d")
    cache_key = (f"{lat:.4f}", f"{lon:.4f}", date, utc.hour)

    with _cache_lock:
        if cache_key in _weather_cache:
            return _weather_cache[cache_key]

    url = build_weather_url(lat, lon, date)
    req = urllib.request.Request(url, headers={"User-Agent": "dronelog"})

    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            payload = json.loads(response.read().decode("utf-8"))
    except urllib.error.HTTPError as e:
        detail = ""
        try:
            detail = json.loads(e.read().decode("utf-8")).get("reason", "")
        except (ValueError, AttributeError, OSError):
            pass
        raise WeatherUnavailableError(detail or "Weather API request failed", status=e.code) from e
    except (urllib.error.URLError, OSError) as e:
        raise WeatherUnavailableError(
            "Could not reach the weather service. Please check your internet connection."
        ) from e
    except ValueError as e:
        raise WeatherUnavailableError(f"Weather API returned invalid JSON: {e}") from e

    weather = parse_weather_response(payload, utc.hour)
    with _cache_lock:
        _weather_cache[cache_key] = weather
    return weather


def get_weather_or_none(
    lat: Optional[float], lon: Optional[float], start_time: Optional[str], timeout: float = 10
) -> Optional[WeatherData]:
    """Like :func:`fetch_flight_weather` but returns None when unavailable."""
    if lat is None or lon is None or not start_time:
        return None
    try:
        return fetch_flight_weather(lat, lon, start_time, timeout=timeout)
    except WeatherUnavailableError as e:
        logger.warning(f"Weather unavailable for {start_time}: {e}")
        return None


def clear_weather_cache() -> None:
    """Drop cached weather lookups."""
    with _cache_lock:
        _weather_cache.clear()
