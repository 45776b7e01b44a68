"""Readers for the OSM XML exchange format."""

from .osm_parser import OSMParser, parse_document, parse_file

__all__ = ["OSMParser", "parse_document", "parse_file"]
