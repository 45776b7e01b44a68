"""OpenStreetMap API integration."""

from .client import BoundingBox, OSMApiClient
from .exceptions import (
    OSMApiConnectionError,
    OSMApiError,
    OSMApiResponseError,
    OSMApiValidationError,
)

__all__ = [
    "BoundingBox",
    "OSMApiClient",
    "OSMApiError",
    "OSMApiConnectionError",
    "OSMApiResponseError",
    "OSMApiValidationError",
]
