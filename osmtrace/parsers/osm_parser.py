"""OSM XML parsing functionality."""

import logging
import math
import re
import xml.etree.ElementTree as ET  # nosec B405 - Parsing OSM extracts only
from pathlib import Path
from typing import List, Union

from ..core.constants import OSMAttributes, OSMElements
from ..core.error_handling import (
    COMMON_ERROR_MAPPINGS,
    FileProcessingError,
    InvalidPathError,
    InvalidPointError,
    MalformedDocumentError,
    handle_errors,
)
from ..core.logging_config import log_performance
from ..core.models import AttributePair, Document, Path as OSMPath, Point

logger = logging.getLogger(__name__)

# Decimal or scientific notation, ASCII digits only, no separators or whitespace.
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class OSMParser:
    """Parser for OSM XML documents.

    Only direct children of the root element are considered. Nodes become
    points and ways become paths; every other element (bounds, relation,
    note, meta) is ignored.
    """

    @log_performance
    def parse_string(self, text: Union[str, bytes]) -> Document:
        """Parse OSM XML text into a Document.

        Raises:
            MalformedDocumentError: If the text is not well-formed XML
            InvalidPointError: If a node lacks id/lat/lon or has a bad coordinate
            InvalidPathError: If a way lacks its id
        """
        try:
            root = ET.fromstring(text)  # nosec B314 - No entity expansion in OSM data
        except ET.ParseError as e:
            line, column = e.position
            raise MalformedDocumentError(
                f"Invalid OSM document: {e}", {"line": line, "column": column}
            ) from e
        except UnicodeError as e:
            # str input holding lone surrogates cannot be handed to expat
            raise MalformedDocumentError(
                f"Invalid OSM document encoding: {e}",
                {"original_type": type(e).__name__},
            ) from e

        return self._parse_root(root)

    @log_performance
    @handle_errors(
        error_types=COMMON_ERROR_MAPPINGS, default_error=FileProcessingError
    )
    def parse_file(self, osm_path: Union[str, Path]) -> Document:
        """Parse an OSM XML file into a Document."""
        osm_path = Path(osm_path)
        data = osm_path.read_bytes()
        logger.debug(f"Read {len(data)} bytes from {osm_path}")
        return self.parse_string(data)

    def _parse_root(self, root: ET.Element) -> Document:
        """Walk the root's children in order and build the Document."""
        if root.tag != OSMElements.ROOT:
            logger.debug(f"Unexpected root element <{root.tag}>, parsing anyway")

        points: List[Point] = []
        paths: List[OSMPath] = []

        for element in root:
            if element.tag == OSMElements.NODE:
                points.append(self._parse_node(element, len(points)))
            elif element.tag == OSMElements.WAY:
                paths.append(self._parse_way(element, len(paths)))

        logger.info(f"Parsed OSM document: {len(points)} nodes, {len(paths)} ways")
        return Document(points=tuple(points), paths=tuple(paths))

    def _parse_node(self, element: ET.Element, position: int) -> Point:
        """Parse a <node> element."""
        identifier = element.get(OSMAttributes.ID)
        if identifier is None:
            raise InvalidPointError(
                f"Node #{position + 1} is missing '{OSMAttributes.ID}'",
                attribute=OSMAttributes.ID,
                details={"position": position},
            )

        latitude = self._get_coordinate(element, OSMAttributes.LATITUDE, identifier)
        longitude = self._get_coordinate(element, OSMAttributes.LONGITUDE, identifier)
        return Point(identifier=identifier, latitude=latitude, longitude=longitude)

    def _get_coordinate(
        self, element: ET.Element, attr_name: str, identifier: str
    ) -> float:
        """Extract a finite decimal coordinate, raising on anything else."""
        attr_value = element.get(attr_name)
        if attr_value is None:
            raise InvalidPointError(
                f"Node '{identifier}' is missing '{attr_name}'",
                identifier=identifier,
                attribute=attr_name,
            )

        if not _DECIMAL_RE.fullmatch(attr_value):
            raise InvalidPointError(
                f"Node '{identifier}' has non-numeric {attr_name}={attr_value!r}",
                identifier=identifier,
                attribute=attr_name,
                details={"value": attr_value},
            )

        value = float(attr_value)
        if not math.isfinite(value):
            raise InvalidPointError(
                f"Node '{identifier}' has out-of-range {attr_name}={attr_value!r}",
                identifier=identifier,
                attribute=attr_name,
                details={"value": attr_value},
            )
        return value

    def _parse_way(self, element: ET.Element, position: int) -> OSMPath:
        """Parse a <way> element with its <nd> and <tag> children.

        Like <nd ref>, a <tag> lacking k or v is accepted with "" in its place.
        """
        identifier = element.get(OSMAttributes.ID)
        if identifier is None:
            raise InvalidPathError(
                f"Way #{position + 1} is missing '{OSMAttributes.ID}'",
                position=position,
            )

        point_refs: List[str] = []
        attributes: List[AttributePair] = []

        for child in element:
            if child.tag == OSMElements.NODE_REF:
                # A missing ref is kept as an empty reference
                point_refs.append(child.get(OSMAttributes.REF, ""))
            elif child.tag == OSMElements.TAG:
                attributes.append(
                    AttributePair(
                        key=child.get(OSMAttributes.KEY, ""),
                        value=child.get(OSMAttributes.VALUE, ""),
                    )
                )

        return OSMPath(
            identifier=identifier,
            point_refs=tuple(point_refs),
            attributes=tuple(attributes),
        )


_default_parser = OSMParser()


def parse_document(text: Union[str, bytes]) -> Document:
    """Parse OSM XML text into a Document."""
    return _default_parser.parse_string(text)


def parse_file(osm_path: Union[str, Path]) -> Document:
    """Parse an OSM XML file into a Document."""
    return _default_parser.parse_file(osm_path)
