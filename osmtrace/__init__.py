"""OsmTrace - Parse OpenStreetMap XML extracts and resolve ways into coordinates."""

__version__ = "1.0.0"
__author__ = "OsmTrace Team"

from osmtrace.core.constants import ResolutionMode
from osmtrace.core.models import AttributePair, Document, Path, Point
from osmtrace.generators.point_resolver import PathPoints, resolve_points
from osmtrace.parsers.osm_parser import OSMParser, parse_document, parse_file

__all__ = [
    "Point",
    "Path",
    "AttributePair",
    "Document",
    "OSMParser",
    "parse_document",
    "parse_file",
    "PathPoints",
    "resolve_points",
    "ResolutionMode",
]
