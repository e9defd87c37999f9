"""Tests for units module."""

import pytest
from dronelog.exceptions import InvalidArgumentError
from dronelog.units import (
    celsius_to_fahrenheit,
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


class TestCheckUnitSystem:
    """Tests for check_unit_system function."""

    def test_known(self):
        """Test metric and imperial are accepted."""
        assert check_unit_system("metric") == "metric"
        assert check_unit_system("imperial") == "imperial"

    def test_unknown(self):
        """Test anything else raises."""
        with pytest.raises(InvalidArgumentError):
            check_unit_system("SI")


class TestFormatDuration:
    """Tests for format_duration function."""

    def test_minutes(self):
        """Test durations under an hour."""
        assert format_duration(125) == "2m 5s"

    def test_hours(self):
        """Test durations over an hour."""
        assert format_duration(3723.9) == "1h 2m 3s"

    def test_placeholder(self):
        """Test None and zero render the placeholder."""
        assert format_duration(None) == "—"
        assert format_duration(0) == "—"


class TestFormatDistance:
    """Tests for format_distance function."""

    def test_meters(self):
        """Test short distances in meters."""
        assert format_distance(456.4) == "456 m"

    def test_kilometers(self):
        """Test kilometres from 1000 m."""
        assert format_distance(1000) == "1.00 km"

    def test_miles(self):
        """Test imperial distances in miles."""
        assert format_distance(1609.344, "imperial") == "1.00 mi"

    def test_placeholder(self):
        """Test zero renders the placeholder."""
        assert format_distance(0) == "—"


class TestFormatSpeedAltitude:
    """Tests for format_speed and format_altitude."""

    def test_speed(self):
        """Test km/h and mph."""
        assert format_speed(10) == "36.0 km/h"
        assert format_speed(10, "imperial") == "22.4 mph"
        assert format_speed(None) == "—"

    def test_altitude(self):
        """Test meters and feet."""
        assert format_altitude(100) == "100.0 m"
        assert format_altitude(100, "imperial") == "328.1 ft"
        assert format_altitude(0) == "—"


class TestWeatherFormatters:
    """Tests for weather value formatters."""

    def test_temperature_zero_is_valid(self):
        """Test freezing point is not a placeholder."""
        assert format_temperature(0) == "0.0 °C"
        assert format_temperature(0, "imperial") == "32.0 °F"
        assert format_temperature(None) == "—"

    def test_celsius_to_fahrenheit(self):
        """Test conversion."""
        assert celsius_to_fahrenheit(100) == 212

    def test_wind(self):
        """Test km/h passthrough and mph."""
        assert format_wind_speed(10) == "10.0 km/h"
        assert format_wind_speed(10, "imperial") == "6.2 mph"

    def test_precipitation(self):
        """Test millimetres and inches."""
        assert format_precipitation(2.5) == "2.5 mm"
        assert format_precipitation(10, "imperial") == "0.39 in"

    def test_pressure(self):
        """Test hPa and inHg."""
        assert format_pressure(1013) == "1013 hPa"
        assert format_pressure(1013, "imperial") == "29.91 inHg"
