"""Models, configuration, logging and error handling shared by OsmTrace."""
