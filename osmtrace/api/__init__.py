"""OsmTrace Library API - Main entry point for programmatic access.

Example usage:
    from osmtrace.api import MapExtract

    extract = MapExtract.from_file("trondheim.osm")
    for way, polyline in extract.polylines():
        print(way.identifier, polyline)
"""

from .core import MapExtract, WayListing

__all__ = ["MapExtract", "WayListing"]
