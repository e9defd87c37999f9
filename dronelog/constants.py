"""Constants used throughout dronelog.

This module centralizes all magic numbers and format contracts used across
the export pipeline. Keeping them in one place ensures:
- Exported column layouts stay identical between encoders and tests
- Unit conversions are shared by the report and any other renderer
- Rounding rules for single-precision telemetry are documented once

Categories:
- Geodesy: Earth model used for great-circle distances
- Unit Conversions: Metric/imperial conversion factors
- Downsampling: Default point budgets
- CSV Export: Column order and per-column rounding
- Colour Ramps: Path colouring gradients
- XML Namespaces: GPX/KML schema identifiers
- Weather: Open-Meteo endpoint and WMO condition labels
"""

# === Geodesy ===
EARTH_RADIUS_M = 6371000.0
METERS_PER_DEGREE = 111.0  # Rough km-per-degree factor used for zoom estimates

# === Unit Conversions ===
METERS_TO_FEET = 3.28084
METERS_PER_MILE = 1609.344
MS_TO_KMH = 3.6
MS_TO_MPH = 2.236936
KMH_TO_MPH = 0.621371
MM_TO_INCHES = 0.03937
HPA_TO_INHG = 0.02953

SECONDS_PER_HOUR = 3600

# === Downsampling ===
DEFAULT_MAX_POINTS = 5000
DOWNSAMPLE_PRIMARY_CHANNELS = ("height", "altitude", "speed")
DEFAULT_SMOOTHING_RESOLUTION = 4

# Latitude/longitude magnitude below which a fix is treated as (0, 0)
NULL_ISLAND_EPSILON = 0.000001

# === CSV Export ===
CSV_HEADERS = (
    "time_s",
    "lat",
    "lng",
    "alt_m",
    "distance_to_home_m",
    "height_m",
    "vps_height_m",
    "altitude_m",
    "speed_ms",
    "velocity_x_ms",
    "velocity_y_ms",
    "velocity_z_ms",
    "battery_percent",
    "battery_voltage_v",
    "battery_temp_c",
    "cell_voltages",
    "satellites",
    "rc_signal",
    "rc_uplink",
    "rc_downlink",
    "pitch_deg",
    "roll_deg",
    "yaw_deg",
    "rc_aileron",
    "rc_elevator",
    "rc_throttle",
    "rc_rudder",
    "is_photo",
    "is_video",
    "flight_mode",
    "messages",
    "metadata",
)

# Telemetry channel -> decimals. None keeps integer channels verbatim.
CSV_METRIC_COLUMNS = (
    ("height", 2),
    ("vps_height", 2),
    ("altitude", 2),
    ("speed", 2),
    ("velocity_x", 2),
    ("velocity_y", 2),
    ("velocity_z", 2),
    ("battery", None),
    ("battery_voltage", 3),
    ("battery_temp", 1),
)
CSV_LINK_COLUMNS = ("satellites", "rc_signal", "rc_uplink", "rc_downlink")
CSV_ATTITUDE_COLUMNS = (
    ("pitch", 2),
    ("roll", 2),
    ("yaw", 2),
    ("rc_aileron", 1),
    ("rc_elevator", 1),
    ("rc_throttle", 1),
    ("rc_rudder", 1),
)
CELL_VOLTAGE_DECIMALS = 3

CSV_EXPORT_FORMAT = "Drone Logbook CSV Export"
JSON_EXPORT_FORMAT = "Drone Logbook JSON Export"
EXPORT_CREATOR = "Drone Logbook"

# === Colour Ramps ===
COLOR_RAMPS = {
    # Yellow -> Red (start to end)
    "progress": ((250, 204, 21), (239, 68, 68)),
    # Green -> Yellow -> Red (low to high)
    "height": ((34, 197, 94), (250, 204, 21), (239, 68, 68)),
    # Blue -> Cyan -> Green -> Yellow -> Red
    "speed": (
        (59, 130, 246),
        (34, 211, 238),
        (34, 197, 94),
        (250, 204, 21),
        (239, 68, 68),
    ),
    # Green -> Yellow -> Orange -> Red
    "distance": ((34, 197, 94), (250, 204, 21), (251, 146, 60), (239, 68, 68)),
}
COLOR_BY_MODES = tuple(COLOR_RAMPS)

# === XML Namespaces ===
GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
KML_NAMESPACE = "http://www.opengis.net/kml/2.2"
KML_LINE_COLOR = "ff0080ff"  # aabbggrr
KML_LINE_WIDTH = 3

# === Report ===
PLACEHOLDER = "—"
UNKNOWN_DATE_KEY = "~unknown"  # sorts after every ISO date
UNKNOWN_DATE_LABEL = "Unknown Date"

# === Weather ===
OPEN_METEO_ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"
WEATHER_HOURLY_VARIABLES = (
    "temperature_2m",
    "apparent_temperature",
    "relative_humidity_2m",
    "wind_speed_10m",
    "wind_gusts_10m",
    "wind_direction_10m",
    "cloud_cover",
    "precipitation",
    "surface_pressure",
    "weather_code",
)
WMO_WEATHER_CODES = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}
