"""Shared fixtures for OsmTrace tests."""

import logging
import logging.handlers

import pytest

from osmtrace.core.logging_config import TraceFormatter

SAMPLE_OSM = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="CGImap 0.8.8">
  <bounds minlat="63.4000000" minlon="10.2000000" maxlat="63.4100000" maxlon="10.3000000"/>
  <node id="n1" lat="63.40" lon="10.20"/>
  <node id="n2" lat="63.41" lon="10.21"/>
  <node id="n3" lat="63.405" lon="10.25"/>
  <way id="w1">
    <nd ref="n1"/>
    <nd ref="n2"/>
    <tag k="highway" v="residential"/>
  </way>
  <way id="w2">
    <nd ref="n2"/>
    <nd ref="n3"/>
    <nd ref="n99"/>
    <tag k="highway" v="footway"/>
    <tag k="name" v="Elvestien"/>
  </way>
  <relation id="r1">
    <member type="way" ref="w1" role="outer"/>
  </relation>
</osm>
"""

CONCRETE_OSM = (
    '<osm><node id="n1" lat="63.40" lon="10.20"/>'
    '<node id="n2" lat="63.41" lon="10.21"/>'
    '<way id="w1"><nd ref="n1"/><nd ref="n2"/>'
    '<tag k="highway" v="residential"/></way></osm>'
)


@pytest.fixture
def sample_osm_text():
    """OSM extract with one fully resolvable way and one dangling way."""
    return SAMPLE_OSM


@pytest.fixture
def concrete_osm_text():
    """Two nodes and a way through both of them."""
    return CONCRETE_OSM


@pytest.fixture
def sample_osm_file(tmp_path):
    """SAMPLE_OSM written to a temporary .osm file."""
    osm_path = tmp_path / "extract.osm"
    osm_path.write_text(SAMPLE_OSM, encoding="utf-8")
    return osm_path


@pytest.fixture(autouse=True)
def restore_logging():
    """Drop handlers installed by setup_logging and undo level/factory changes."""
    root_logger = logging.getLogger()
    level = root_logger.level
    factory = logging.getLogRecordFactory()
    yield
    for handler in list(root_logger.handlers):
        if isinstance(handler.formatter, TraceFormatter) or isinstance(
            handler, logging.handlers.RotatingFileHandler
        ):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)
    logging.setLogRecordFactory(factory)
