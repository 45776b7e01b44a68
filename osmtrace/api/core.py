"""Core OsmTrace library API for programmatic access."""

import logging
from dataclasses import dataclass
from pathlib import Path as FilePath
from typing import List, Optional, Tuple, Union

from ..core.config import Config
from ..core.constants import ResolutionMode
from ..core.error_handling import OsmTraceError, error_context
from ..core.logging_config import LogContext
from ..core.models import Document, Path
from ..generators.point_resolver import (
    LatLon,
    PathPoints,
    find_dangling_references,
    iter_polylines,
    resolve_points,
)
from ..osmapi.client import BoundingBox, OSMApiClient
from ..parsers.osm_parser import OSMParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WayListing:
    """Display form of a way: its id and ``"k = v"`` lines for its tags."""

    identifier: str
    tags: Tuple[str, ...]
    ref_count: int

    def __str__(self) -> str:
        lines = [self.identifier] + [f"  {tag}" for tag in self.tags]
        return "\n".join(lines)


class MapExtract:
    """Holds the current Document of a map extract and resolves its ways.

    The held document is only replaced after a new one has been parsed
    successfully; a failed load or refresh leaves the previous one in place.
    """

    def __init__(
        self,
        document: Optional[Document] = None,
        config: Optional[Config] = None,
        source: Optional[str] = None,
    ):
        """Initialize the extract.

        Args:
            document: Already parsed document (may be None until loaded)
            config: Optional configuration (uses defaults if None)
            source: Description of where the document came from
        """
        self.config = config or Config.from_dict({})
        self.document = document
        self.source = source
        self._parser = OSMParser()

    @classmethod
    def from_file(
        cls, osm_path: Union[str, FilePath], config: Optional[Config] = None
    ) -> "MapExtract":
        """Create an extract from an OSM XML file."""
        extract = cls(config=config)
        extract.load_file(osm_path)
        return extract

    @classmethod
    def from_string(
        cls, text: Union[str, bytes], config: Optional[Config] = None
    ) -> "MapExtract":
        """Create an extract from OSM XML text."""
        extract = cls(config=config)
        extract.load_string(text, source="<string>")
        return extract

    @property
    def is_loaded(self) -> bool:
        """True once a document has been parsed."""
        return self.document is not None

    @property
    def resolution_mode(self) -> ResolutionMode:
        """Resolution mode taken from configuration."""
        return self.config.resolution_mode

    def load_file(self, osm_path: Union[str, FilePath]) -> Document:
        """Parse a file and make it the current document."""
        source = str(osm_path)
        with LogContext("load", logger), error_context("load", source=source):
            document = self._parser.parse_file(osm_path)
        return self._replace(document, source)

    def load_string(
        self, text: Union[str, bytes], source: str = "<string>"
    ) -> Document:
        """Parse text and make it the current document."""
        with LogContext("load", logger), error_context("load", source=source):
            document = self._parser.parse_string(text)
        return self._replace(document, source)

    def refresh(self, client: OSMApiClient, bbox: BoundingBox) -> Document:
        """Fetch and parse a bounding box, replacing the current document.

        Transport and parse errors propagate; the current document is kept.
        Parse errors carry the request URL as ``details["source"]``.
        """
        source = f"{client.map_url()}?bbox={bbox.to_query()}"
        with LogContext("refresh", logger), error_context("refresh", source=source):
            data = client.fetch_map(bbox)
            document = self._parser.parse_string(data)
        return self._replace(document, source)

    def _replace(self, document: Document, source: str) -> Document:
        self.document = document
        self.source = source
        logger.info(
            f"Loaded {len(document.points)} nodes and {len(document.paths)} ways "
            f"from {source}"
        )
        return document

    def _require_document(self) -> Document:
        if self.document is None:
            raise OsmTraceError("No OSM document loaded")
        return self.document

    def way(self, identifier: str) -> Optional[Path]:
        """Return the first way with ``identifier``, or None."""
        return self._require_document().path(identifier)

    def points(
        self, path: Path, mode: Union[ResolutionMode, str, None] = None
    ) -> PathPoints:
        """Resolve a way's points using the configured mode unless given."""
        return resolve_points(
            path, self._require_document(), mode or self.resolution_mode
        )

    def polylines(
        self, mode: Union[ResolutionMode, str, None] = None
    ) -> List[Tuple[Path, List[LatLon]]]:
        """Resolve every way to its (lat, lon) polyline."""
        return list(
            iter_polylines(self._require_document(), mode or self.resolution_mode)
        )

    def way_listing(self) -> List[WayListing]:
        """List every way with its tags, in source order."""
        return [
            WayListing(
                identifier=path.identifier,
                tags=tuple(str(pair) for pair in path.attributes),
                ref_count=path.ref_count,
            )
            for path in self._require_document().paths
        ]

    def dangling_references(self) -> List[str]:
        """Describe every dangling reference in the current document."""
        document = self._require_document()
        return [str(error) for error in find_dangling_references(document)]
