"""Command line interface for OsmTrace."""
