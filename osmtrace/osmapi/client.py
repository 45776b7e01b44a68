"""OpenStreetMap API client for bounding-box map extracts."""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from ..core.config import Config
from ..core.constants import APIDefaults
from .exceptions import (
    OSMApiConnectionError,
    OSMApiResponseError,
    OSMApiValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box in decimal degrees (WGS84)."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    def __post_init__(self) -> None:
        """Validate ranges and ordering."""
        for name in ("min_lon", "max_lon"):
            if not -180.0 <= getattr(self, name) <= 180.0:
                raise OSMApiValidationError(f"{name} must be between -180 and 180")
        for name in ("min_lat", "max_lat"):
            if not -90.0 <= getattr(self, name) <= 90.0:
                raise OSMApiValidationError(f"{name} must be between -90 and 90")
        if self.min_lon > self.max_lon:
            raise OSMApiValidationError("min_lon must not exceed max_lon")
        if self.min_lat > self.max_lat:
            raise OSMApiValidationError("min_lat must not exceed max_lat")

    @classmethod
    def parse(cls, value: str) -> "BoundingBox":
        """Parse 'min_lon,min_lat,max_lon,max_lat'."""
        parts = [part.strip() for part in value.split(",")]
        if len(parts) != 4:
            raise OSMApiValidationError(
                f"Bounding box needs 4 comma-separated values, got {value!r}"
            )
        try:
            return cls(*(float(part) for part in parts))
        except ValueError as e:
            raise OSMApiValidationError(f"Invalid bounding box {value!r}: {e}") from e

    def to_query(self) -> str:
        """Render the value of the API's ``bbox`` query parameter."""
        return ",".join(
            str(v) for v in (self.min_lon, self.min_lat, self.max_lon, self.max_lat)
        )


class OSMApiClient:
    """Client for the OpenStreetMap editing API (read-only map calls)."""

    def __init__(
        self,
        base_url: str = APIDefaults.BASE_URL,
        timeout: float = APIDefaults.TIMEOUT_SECONDS,
        user_agent: Optional[str] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root, e.g. https://www.openstreetmap.org/api/0.6
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

    @classmethod
    def from_config(cls, config: Config) -> "OSMApiClient":
        """Create a client from the [api] configuration section."""
        api = config.api
        return cls(
            base_url=api.get("base_url", APIDefaults.BASE_URL),
            timeout=api.get("timeout", APIDefaults.TIMEOUT_SECONDS),
            user_agent=api.get("user_agent"),
        )

    def map_url(self) -> str:
        """URL of the bounding-box map call."""
        return f"{self.base_url}/{APIDefaults.MAP_ENDPOINT}"

    def fetch_map(self, bbox: BoundingBox) -> bytes:
        """Fetch the raw OSM XML for a bounding box.

        Returns:
            Response body as bytes, undecoded; the XML declaration names
            its encoding

        Raises:
            OSMApiConnectionError: If the request could not be completed
            OSMApiResponseError: If the API answered with a non-200 status
        """
        url = self.map_url()
        logger.info(f"Fetching OSM map data for bbox={bbox.to_query()}")

        try:
            response = self.session.get(
                url, params={"bbox": bbox.to_query()}, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise OSMApiConnectionError(f"Connection failed: {e}") from e

        if response.status_code != 200:
            # The API explains 400/509 errors in the body
            reason = response.text.strip() or response.reason
            raise OSMApiResponseError(
                f"Fetching OSM data failed: {response.status_code} {reason}",
                status_code=response.status_code,
            )

        logger.debug(f"Received {len(response.content)} bytes from {url}")
        return response.content
