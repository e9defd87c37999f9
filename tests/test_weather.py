"""Tests for weather module."""

import io
import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest
from dronelog.exceptions import WeatherUnavailableError
from dronelog.weather import (
    build_weather_url,
    fetch_flight_weather,
    get_weather_or_none,
    parse_weather_response,
    wmo_code_to_label,
)


def make_payload(hours=24):
    return {
        "hourly": {
            "time": [f"2025-03-15T{h:02d}:00" for h in range(hours)],
            "temperature_2m": [10.0 + h * 0.5 for h in range(hours)],
            "apparent_temperature": [9.0] * hours,
            "relative_humidity_2m": [65] * hours,
            "wind_speed_10m": [12.34] * hours,
            "wind_gusts_10m": [20.06] * hours,
            "wind_direction_10m": [270] * hours,
            "cloud_cover": [40] * hours,
            "precipitation": [0.0] * hours,
            "surface_pressure": [1013.4] * hours,
            "weather_code": [2] * hours,
        }
    }


def mock_response(payload):
    response = MagicMock()
    response.read.return_value = json.dumps(payload).encode("utf-8")
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


class TestWmoCodeToLabel:
    """Tests for wmo_code_to_label function."""

    def test_known_code(self):
        """Test known codes map to labels."""
        assert wmo_code_to_label(0) == "Clear sky"
        assert wmo_code_to_label(2.0) == "Partly cloudy"

    def test_unknown_code(self):
        """Test unknown codes keep the raw number."""
        assert wmo_code_to_label(42) == "WMO 42"


class TestBuildWeatherUrl:
    """Tests for build_weather_url function."""

    def test_url(self):
        """Test query parameters for a single day."""
        url = build_weather_url(47.123456, 8.5, "2025-03-15")
        assert url.startswith("https://archive-api.open-meteo.com/v1/archive?")
        assert "latitude=47.1235" in url
        assert "start_date=2025-03-15" in url
        assert "end_date=2025-03-15" in url
        assert "weather_code" in url


class TestParseWeatherResponse:
    """Tests for parse_weather_response function."""

    def test_picks_hour(self):
        """Test the sample for the requested hour is used."""
        weather = parse_weather_response(make_payload(), 14)
        assert weather["temperature"] == 17.0
        assert weather["wind_speed"] == 12.3
        assert weather["wind_gusts"] == 20.1
        assert weather["pressure"] == 1013
        assert weather["humidity"] == 65
        assert weather["condition_label"] == "Partly cloudy"

    def test_hour_beyond_data(self):
        """Test the last sample is used when the hour is out of range."""
        weather = parse_weather_response(make_payload(hours=3), 20)
        assert weather["temperature"] == 11.0

    def test_null_values_default(self):
        """Test null samples fall back to zero."""
        payload = make_payload()
        payload["hourly"]["precipitation"][5] = None
        assert parse_weather_response(payload, 5)["precipitation"] == 0

    def test_empty_payload(self):
        """Test missing hourly data raises."""
        with pytest.raises(WeatherUnavailableError):
            parse_weather_response({"hourly": {"time": []}}, 0)
        with pytest.raises(WeatherUnavailableError):
            parse_weather_response({}, 0)


class TestFetchFlightWeather:
    """Tests for fetch_flight_weather function."""

    def test_fetch(self):
        """Test a successful lookup for the UTC hour of the start time."""
        with patch("urllib.request.urlopen", return_value=mock_response(make_payload())) as urlopen:
            weather = fetch_flight_weather(47.0, 8.0, "2025-03-15T16:30:00+02:00")
        assert weather["temperature"] == 17.0
        request = urlopen.call_args[0][0]
        assert "start_date=2025-03-15" in request.full_url

    def test_cached(self):
        """Test repeated lookups hit the in-memory cache."""
        with patch("urllib.request.urlopen", return_value=mock_response(make_payload())) as urlopen:
            fetch_flight_weather(47.0, 8.0, "2025-03-15T14:00:00Z")
            fetch_flight_weather(47.0, 8.0, "2025-03-15T14:45:00Z")
        assert urlopen.call_count == 1

    def test_invalid_start_time(self):
        """Test unparseable start times raise without a request."""
        with patch("urllib.request.urlopen") as urlopen:
            with pytest.raises(WeatherUnavailableError):
                fetch_flight_weather(47.0, 8.0, "yesterday")
        urlopen.assert_not_called()

    def test_http_error(self):
        """Test HTTP errors carry the status and API reason."""
        error = urllib.error.HTTPError(
            "https://example", 400, "Bad Request", {},
            io.BytesIO(b'{"error": true, "reason": "Date out of range"}'),
        )
        with patch("urllib.request.urlopen", side_effect=error):
            with pytest.raises(WeatherUnavailableError) as exc_info:
                fetch_flight_weather(47.0, 8.0, "2025-03-15T14:00:00Z")
        assert exc_info.value.status == 400
        assert "Date out of range" in str(exc_info.value)

    def test_network_error(self):
        """Test connection failures raise WeatherUnavailableError."""
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("offline")):
            with pytest.raises(WeatherUnavailableError):
                fetch_flight_weather(47.0, 8.0, "2025-03-15T14:00:00Z")

    def test_invalid_json(self):
        """Test a non-JSON body raises WeatherUnavailableError."""
        response = MagicMock()
        response.read.return_value = b"<html>"
        response.__enter__.return_value = response
        response.__exit__.return_value = False
        with patch("urllib.request.urlopen", return_value=response):
            with pytest.raises(WeatherUnavailableError):
                fetch_flight_weather(47.0, 8.0, "2025-03-15T14:00:00Z")


class TestGetWeatherOrNone:
    """Tests for get_weather_or_none function."""

    def test_missing_inputs(self):
        """Test missing location or time returns None without a request."""
        with patch("urllib.request.urlopen") as urlopen:
            assert get_weather_or_none(None, 8.0, "2025-03-15T14:00:00Z") is None
            assert get_weather_or_none(47.0, 8.0, None) is None
        urlopen.assert_not_called()

    def test_failure_returns_none(self):
        """Test provider failures degrade to None."""
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("offline")):
            assert get_weather_or_none(47.0, 8.0, "2025-03-15T14:00:00Z") is None

    def test_success(self):
        """Test a successful lookup is passed through."""
        with patch("urllib.request.urlopen", return_value=mock_response(make_payload())):
            weather = get_weather_or_none(47.0, 8.0, "2025-03-15T14:00:00Z")
        assert weather["condition_label"] == "Partly cloudy"
