"""Constants and enums for OsmTrace to eliminate magic strings and values."""

from enum import Enum
from typing import List


class ResolutionMode(Enum):
    """How path resolution treats references with no matching point."""

    STRICT = "strict"  # First dangling reference raises
    SKIP = "skip"  # Dangling references are logged and skipped


class OSMElements:
    """Element names of the OSM XML exchange format."""

    ROOT = "osm"
    NODE = "node"
    WAY = "way"
    NODE_REF = "nd"
    TAG = "tag"


class OSMAttributes:
    """Attribute names of the OSM XML exchange format."""

    ID = "id"
    LATITUDE = "lat"
    LONGITUDE = "lon"
    REF = "ref"
    KEY = "k"
    VALUE = "v"


class APIDefaults:
    """Defaults for the OpenStreetMap API fetcher."""

    BASE_URL = "https://www.openstreetmap.org/api/0.6"
    MAP_ENDPOINT = "map"
    TIMEOUT_SECONDS = 30


class ConfigFiles:
    """Configuration file names and search locations."""

    MAIN_CONFIG = "osmtrace_config.toml"
    USER_CONFIG_DIR = ".config/osmtrace"
    SYSTEM_CONFIG_DIR = "/etc/osmtrace"


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_valid_resolution_modes() -> List[str]:
    """Get list of valid resolution mode strings."""
    return [mode.value for mode in ResolutionMode]


def get_resolution_mode(value: "str | ResolutionMode") -> ResolutionMode:
    """Convert a string to a ResolutionMode enum."""
    if isinstance(value, ResolutionMode):
        return value
    try:
        return ResolutionMode(value.lower())
    except ValueError:
        raise ValueError(
            f"Invalid resolution mode '{value}'. "
            f"Valid modes: {', '.join(get_valid_resolution_modes())}"
        )
