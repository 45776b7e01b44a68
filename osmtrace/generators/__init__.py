"""Point sequences generated from parsed ways."""

from .point_resolver import (
    PathPoints,
    ResolvedReference,
    check_references,
    find_dangling_references,
    iter_polylines,
    resolve_points,
)

__all__ = [
    "PathPoints",
    "ResolvedReference",
    "resolve_points",
    "iter_polylines",
    "find_dangling_references",
    "check_references",
]
