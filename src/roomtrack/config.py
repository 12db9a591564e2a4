from dataclasses import dataclass

# WGS84 equatorial radius in meters, used as a spherical approximation
EARTH_RADIUS_M = 6378137.0

# Above a typical walking pace (m/s)
MAX_WALKING_SPEED = 2.5

# Gap between samples that suggests missed readings (seconds)
LONG_GAP_SECONDS = 60.0

# Radius around the base point used when no room is given (meters)
BASE_RADIUS_M = 5.0

DEFAULT_INPUT_FILENAME = "gps_log.csv"


@dataclass
class TrackConfig:
    """Configuration for the roomtrack CLI."""

    base_radius: float = BASE_RADIUS_M
    max_walking_speed: float = MAX_WALKING_SPEED
    long_gap_seconds: float = LONG_GAP_SECONDS
    bbox_buffer: float = 10.0
    log_level: str = "INFO"
    metrics: bool = False
