"""Pytest configuration and shared fixtures for dronelog tests."""

import os
import shutil
import tempfile
from pathlib import Path

import pytest


_TEST_CACHE_DIR = None


def pytest_configure(config):
    """Point the cache directory at a temp dir before any module is imported.

    The report field configuration is persisted under the cache directory,
    so tests must never touch the user's real ~/.cache/dronelog.
    """
    global _TEST_CACHE_DIR
    _TEST_CACHE_DIR = Path(tempfile.mkdtemp(prefix="dronelog_test_"))
    os.environ["DRONELOG_CACHE_DIR"] = str(_TEST_CACHE_DIR)


def pytest_unconfigure(config):
    """Clean up the temporary cache directory after all tests complete."""
    global _TEST_CACHE_DIR
    if _TEST_CACHE_DIR and _TEST_CACHE_DIR.exists():
        shutil.rmtree(_TEST_CACHE_DIR, ignore_errors=True)
    if "DRONELOG_CACHE_DIR" in os.environ:
        del os.environ["DRONELOG_CACHE_DIR"]


@pytest.fixture(autouse=True)
def reset_weather_cache():
    """Clear cached weather lookups before and after each test."""
    from dronelog.weather import clear_weather_cache

    clear_weather_cache()
    yield
    clear_weather_cache()


@pytest.fixture
def sample_flight():
    """Flight record with every metadata field populated."""
    return {
        "id": 42,
        "display_name": "Lake survey",
        "file_name": "DJIFlightRecord_2025-03-15.txt",
        "drone_model": "Mavic 3",
        "drone_serial": "1581F5FHD",
        "aircraft_name": "Survey bird",
        "battery_serial": "BAT-001",
        "start_time": "2025-03-15T14:30:00Z",
        "duration_secs": 125.0,
        "total_distance": 1530.0,
        "max_altitude": 60.5,
        "max_speed": 12.0,
        "home_lat": 47.0,
        "home_lon": 8.0,
        "notes": "Calm morning",
        "tags": [{"tag": "survey", "tag_type": "manual"}],
        "photo_count": 3,
        "video_count": 0,
    }


@pytest.fixture
def sample_bundle(sample_flight):
    """Three-sample flight with an aligned track."""
    return {
        "flight": sample_flight,
        "telemetry": {
            "time": [0, 0.5, 1.0],
            "latitude": [47.0, 47.0001, 47.0002],
            "longitude": [8.0, 8.0001, 8.0002],
            "altitude": [500.0, 510.0, 520.0],
            "height": [0.0, 10.0, 20.0],
            "speed": [0.0, 5.123456, 10.0],
            "battery": [80, 79, 78],
            "battery_voltage": [15.4000001, 15.35, 15.3],
            "battery_temp": [25.04, 25.1, 25.2],
            "pitch": [1.23456, -0.004, 3.0],
            "is_photo": [False, True, None],
            "flight_mode": ["GPS", "GPS", "GPS"],
        },
        "track": [
            [8.0, 47.0, 0.0],
            [8.0001, 47.0001, 10.0],
            [8.0002, 47.0002, 20.0],
        ],
        "messages": [
            {"timestamp_ms": 500, "message_type": "warn", "message": "Low, battery"},
        ],
    }


@pytest.fixture
def manual_bundle():
    """Manually entered flight: no telemetry, home coordinates only."""
    return {
        "flight": {
            "id": 7,
            "display_name": "Manual hop",
            "start_time": "2025-03-16T09:00:00Z",
            "home_lat": 47.5,
            "home_lon": -122.3,
            "max_altitude": 50,
        },
        "telemetry": {"time": []},
        "track": [],
        "messages": [],
    }
