"""Type definitions for dronelog.

This module provides TypedDict definitions for the flight bundles exchanged
with the storage service and the report builder. Bundles stay plain
dictionaries so that JSON exports can be loaded back without conversion.

Example:
    >>> from dronelog.types import FlightDataBundle
    >>> bundle: FlightDataBundle = {
    ...     "flight": {"id": 1, "display_name": "Lake survey"},
    ...     "telemetry": {"time": [0.0, 0.5]},
    ...     "track": [],
    ...     "messages": [],
    ... }
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple, TypedDict, Union
from typing_extensions import NotRequired


class FlightTag(TypedDict):
    """A flight tag and its provenance ("auto" or "manual")."""

    tag: str
    tag_type: str


class Flight(TypedDict):
    """Flight metadata as stored by the logbook."""

    id: int
    display_name: str
    file_name: NotRequired[Optional[str]]
    drone_model: NotRequired[Optional[str]]
    drone_serial: NotRequired[Optional[str]]
    aircraft_name: NotRequired[Optional[str]]
    battery_serial: NotRequired[Optional[str]]
    start_time: NotRequired[Optional[str]]  # ISO 8601
    duration_secs: NotRequired[Optional[float]]
    total_distance: NotRequired[Optional[float]]  # meters
    max_altitude: NotRequired[Optional[float]]  # meters
    max_speed: NotRequired[Optional[float]]  # m/s
    home_lat: NotRequired[Optional[float]]
    home_lon: NotRequired[Optional[float]]
    point_count: NotRequired[Optional[int]]
    notes: NotRequired[Optional[str]]
    tags: NotRequired[List[FlightTag]]
    photo_count: NotRequired[Optional[int]]
    video_count: NotRequired[Optional[int]]


class TelemetryData(TypedDict):
    """Parallel telemetry channels; every channel matches ``time`` in length."""

    time: List[float]  # seconds from flight start
    latitude: NotRequired[List[Optional[float]]]
    longitude: NotRequired[List[Optional[float]]]
    altitude: NotRequired[List[Optional[float]]]
    height: NotRequired[List[Optional[float]]]
    vps_height: NotRequired[List[Optional[float]]]
    speed: NotRequired[List[Optional[float]]]
    velocity_x: NotRequired[List[Optional[float]]]
    velocity_y: NotRequired[List[Optional[float]]]
    velocity_z: NotRequired[List[Optional[float]]]
    battery: NotRequired[List[Optional[int]]]
    battery_voltage: NotRequired[List[Optional[float]]]
    battery_temp: NotRequired[List[Optional[float]]]
    cell_voltages: NotRequired[List[Optional[List[float]]]]
    satellites: NotRequired[List[Optional[int]]]
    rc_signal: NotRequired[List[Optional[int]]]
    rc_uplink: NotRequired[List[Optional[int]]]
    rc_downlink: NotRequired[List[Optional[int]]]
    pitch: NotRequired[List[Optional[float]]]
    roll: NotRequired[List[Optional[float]]]
    yaw: NotRequired[List[Optional[float]]]
    rc_aileron: NotRequired[List[Optional[float]]]
    rc_elevator: NotRequired[List[Optional[float]]]
    rc_throttle: NotRequired[List[Optional[float]]]
    rc_rudder: NotRequired[List[Optional[float]]]
    is_photo: NotRequired[List[Optional[bool]]]
    is_video: NotRequired[List[Optional[bool]]]
    flight_mode: NotRequired[List[Optional[str]]]


class FlightMessage(TypedDict):
    """Tip or warning emitted by the flight log."""

    timestamp_ms: int
    message_type: str  # "tip" or "warn"
    message: str


TrackPoint = List[float]  # [lon, lat, height]


class FlightDataBundle(TypedDict):
    """Everything an encoder needs for one flight."""

    flight: Flight
    telemetry: TelemetryData
    track: List[TrackPoint]
    messages: NotRequired[List[FlightMessage]]


class WeatherData(TypedDict):
    """Hourly weather at the flight location."""

    temperature: float  # °C
    apparent_temperature: float
    humidity: int  # %
    wind_speed: float  # km/h
    wind_gusts: float  # km/h
    wind_direction: int  # degrees
    cloud_cover: int  # %
    precipitation: float  # mm
    pressure: int  # hPa
    condition_label: str


class FlightReportEntry(TypedDict):
    """One flight in an HTML report with its optional lookups."""

    flight: Flight
    data: FlightDataBundle
    weather: NotRequired[Optional[WeatherData]]
    drone_display_name: NotRequired[Callable[[str, str], str]]
    battery_display_name: NotRequired[Callable[[str], str]]


class ReportOptions(TypedDict):
    """Options for :func:`dronelog.report.build_html_report`."""

    document_title: str
    pilot_name: NotRequired[str]
    field_config: NotRequired[Dict[str, bool]]
    unit_system: NotRequired[str]  # "metric" or "imperial"
    generated_at: NotRequired[Union[str, datetime]]
    minify: NotRequired[bool]


class ColorSegment(TypedDict):
    """A two-point path segment with its ramp colour."""

    path: List[TrackPoint]
    color: Tuple[int, int, int]


__all__ = [
    "FlightTag",
    "Flight",
    "TelemetryData",
    "FlightMessage",
    "TrackPoint",
    "FlightDataBundle",
    "WeatherData",
    "FlightReportEntry",
    "ReportOptions",
    "ColorSegment",
]
