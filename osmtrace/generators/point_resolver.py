"""Resolve way node references into points.

A Path only stores the identifiers of the points it traverses. The helpers
here dereference those identifiers against the owning Document's point table,
lazily and without mutating anything, so one Document can be resolved from
several places at once.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union

from ..core.constants import ResolutionMode, get_resolution_mode
from ..core.error_handling import (
    DanglingReferenceError,
    ErrorCollector,
    ResolutionError,
)
from ..core.models import Document, Path, Point

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class ResolvedReference:
    """Outcome of resolving a single node reference.

    Exactly one of ``point`` and ``error`` is set.
    """

    reference: str
    point: Optional[Point] = None
    error: Optional[DanglingReferenceError] = None

    @property
    def ok(self) -> bool:
        """True when the reference resolved to a point."""
        return self.error is None


class PathPoints:
    """Lazy, restartable sequence of the points a path traverses.

    Each call to ``iter()`` starts a fresh scan over ``path.point_refs``, so
    iterating twice over an unchanged Document yields the same points.
    In STRICT mode iteration raises DanglingReferenceError on the first
    reference without a point; in SKIP mode such references are logged and
    left out.
    """

    def __init__(
        self,
        path: Path,
        document: Document,
        mode: Union[ResolutionMode, str] = ResolutionMode.STRICT,
    ):
        self.path = path
        self.document = document
        self.mode = get_resolution_mode(mode)

    def __iter__(self) -> Iterator[Point]:
        for resolved in self.results():
            if resolved.ok:
                yield resolved.point
            elif self.mode is ResolutionMode.STRICT:
                raise resolved.error
            else:
                logger.warning(f"Skipping dangling reference: {resolved.error}")

    def __repr__(self) -> str:
        return (
            f"PathPoints(path={self.path.identifier!r}, "
            f"refs={self.path.ref_count}, mode={self.mode.value})"
        )

    def results(self) -> Iterator[ResolvedReference]:
        """Yield one ResolvedReference per node reference, never raising."""
        for reference in self.path.point_refs:
            point = self.document.point(reference)
            if point is None:
                yield ResolvedReference(
                    reference=reference,
                    error=DanglingReferenceError(reference, self.path.identifier),
                )
            else:
                yield ResolvedReference(reference=reference, point=point)

    def to_list(self) -> List[Point]:
        """Materialize the sequence; fail-fast in STRICT mode."""
        return list(self)

    def lat_lons(self) -> List[LatLon]:
        """Materialize the sequence as (lat, lon) pairs."""
        return [point.lat_lon for point in self]


def resolve_points(
    path: Path,
    document: Document,
    mode: Union[ResolutionMode, str] = ResolutionMode.STRICT,
) -> PathPoints:
    """Resolve a path's node references against ``document``.

    The document is not checked to actually contain ``path``; callers pass a
    consistent pair.

    Args:
        path: Path whose references should be resolved
        document: Document holding the point table
        mode: STRICT raises on the first dangling reference, SKIP drops them

    Returns:
        PathPoints iterable; nothing is looked up until it is iterated
    """
    return PathPoints(path, document, mode)


def iter_polylines(
    document: Document,
    mode: Union[ResolutionMode, str] = ResolutionMode.STRICT,
) -> Iterator[Tuple[Path, List[LatLon]]]:
    """Yield every path with its resolved (lat, lon) coordinates, in source order."""
    for path in document.paths:
        yield path, resolve_points(path, document, mode).lat_lons()


def find_dangling_references(document: Document) -> List[DanglingReferenceError]:
    """Collect every dangling reference in the document, in path/ref order."""
    dangling: List[DanglingReferenceError] = []
    for path in document.paths:
        for resolved in resolve_points(path, document).results():
            if not resolved.ok:
                dangling.append(resolved.error)

    if dangling:
        logger.info(
            f"Found {len(dangling)} dangling references in "
            f"{len({error.path_id for error in dangling})} ways"
        )
    return dangling


def check_references(document: Document) -> None:
    """Raise a combined ResolutionError if any way has a dangling reference."""
    collector = ErrorCollector(error_type=ResolutionError)
    for error in find_dangling_references(document):
        collector.add_error(error)
    collector.raise_if_errors()
