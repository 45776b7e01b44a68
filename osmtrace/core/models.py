"""Data models for parsed OSM documents.

A Document owns its points and paths. Paths never hold Point objects, only
the identifiers of the points they traverse; resolving those identifiers is
the job of ``osmtrace.generators.point_resolver``.
"""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class Point:
    """A named geographic location (an OSM node)."""

    identifier: str
    latitude: float
    longitude: float

    @property
    def lat_lon(self) -> Tuple[float, float]:
        """Return (lat, lon) tuple - standard geographic order."""
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class AttributePair:
    """A key/value pair (an OSM tag), kept verbatim."""

    key: str
    value: str

    def __str__(self) -> str:
        return f"{self.key} = {self.value}"


@dataclass(frozen=True)
class Path:
    """An ordered traversal of points plus descriptive attributes (an OSM way).

    ``point_refs`` keeps duplicates and empty entries exactly as they appear
    in the source document.
    """

    identifier: str
    point_refs: Tuple[str, ...] = ()
    attributes: Tuple[AttributePair, ...] = ()

    @property
    def ref_count(self) -> int:
        """Get the number of point references in this path."""
        return len(self.point_refs)

    def attribute_values(self, key: str) -> Tuple[str, ...]:
        """Return every value stored under ``key``, in source order."""
        return tuple(pair.value for pair in self.attributes if pair.key == key)

    def attribute(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value stored under ``key``."""
        for pair in self.attributes:
            if pair.key == key:
                return pair.value
        return default


@dataclass(frozen=True)
class Document:
    """Root aggregate of a parsed OSM extract.

    Attributes:
        points: Points in the order their elements appear in the source
        paths: Paths in the order their elements appear in the source

    Identifier uniqueness is not enforced. Lookups always return the first
    point with a given identifier in ``points`` order.
    """

    points: Tuple[Point, ...] = field(default=())
    paths: Tuple[Path, ...] = field(default=())

    @cached_property
    def _point_index(self) -> Dict[str, Point]:
        index: Dict[str, Point] = {}
        for point in self.points:
            # First occurrence wins
            index.setdefault(point.identifier, point)
        return index

    @property
    def is_empty(self) -> bool:
        """True when the document holds neither points nor paths."""
        return not self.points and not self.paths

    def point(self, identifier: str) -> Optional[Point]:
        """Return the first point with ``identifier``, or None."""
        return self._point_index.get(identifier)

    def has_point(self, identifier: str) -> bool:
        """Check whether any point carries ``identifier``."""
        return identifier in self._point_index

    def path(self, identifier: str) -> Optional[Path]:
        """Return the first path with ``identifier``, or None."""
        for path in self.paths:
            if path.identifier == identifier:
                return path
        return None
