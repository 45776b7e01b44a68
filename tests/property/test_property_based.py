"""Property-based tests using Hypothesis for robust validation."""

from xml.sax.saxutils import quoteattr

from hypothesis import given, settings
from hypothesis import strategies as st

from osmtrace.core.constants import ResolutionMode
from osmtrace.generators.point_resolver import resolve_points
from osmtrace.parsers.osm_parser import parse_document

identifiers = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=6
)
coordinates = st.floats(
    min_value=-180, max_value=180, allow_nan=False, allow_infinity=False
)
tag_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cc", "Cs", "Cn", "Co")),
    max_size=12,
)
nodes_strategy = st.lists(st.tuples(identifiers, coordinates, coordinates), max_size=15)
tags_strategy = st.lists(st.tuples(tag_text, tag_text), max_size=5)


def build_osm(nodes, ways) -> str:
    """Render nodes and ways as an OSM document."""
    parts = ['<osm version="0.6">']
    for identifier, lat, lon in nodes:
        parts.append(
            f'<node id={quoteattr(identifier)} lat="{lat!r}" lon="{lon!r}"/>'
        )
    for identifier, refs, tags in ways:
        parts.append(f"<way id={quoteattr(identifier)}>")
        parts.extend(f"<nd ref={quoteattr(ref)}/>" for ref in refs)
        parts.extend(f"<tag k={quoteattr(k)} v={quoteattr(v)}/>" for k, v in tags)
        parts.append("</way>")
    parts.append("</osm>")
    return "".join(parts)


class TestParsingProperties:
    """Property-based tests for OSM parsing."""

    @settings(deadline=None)
    @given(nodes_strategy)
    def test_nodes_preserved_in_order(self, nodes):
        """Test that every node is parsed with its exact coordinates."""
        document = parse_document(build_osm(nodes, []))

        assert [(p.identifier, p.latitude, p.longitude) for p in document.points] == [
            (identifier, lat, lon) for identifier, lat, lon in nodes
        ]

    @settings(deadline=None)
    @given(
        st.lists(
            st.tuples(identifiers, st.lists(identifiers, max_size=8), tags_strategy),
            max_size=8,
        )
    )
    def test_ways_preserved_verbatim(self, ways):
        """Test that refs and tags survive parsing unchanged and in order."""
        document = parse_document(build_osm([], ways))

        assert len(document.paths) == len(ways)
        for path, (identifier, refs, tags) in zip(document.paths, ways):
            assert path.identifier == identifier
            assert list(path.point_refs) == refs
            assert [(a.key, a.value) for a in path.attributes] == tags


class TestResolutionProperties:
    """Property-based tests for point resolution."""

    @settings(deadline=None)
    @given(st.data())
    def test_resolved_points_follow_refs(self, data):
        """Test that resolvable refs map one-to-one onto first-match points."""
        nodes = data.draw(nodes_strategy.filter(bool))
        ids = [identifier for identifier, _, _ in nodes]
        refs = data.draw(st.lists(st.sampled_from(ids), max_size=20))
        document = parse_document(build_osm(nodes, [("w", refs, [])]))

        points = list(resolve_points(document.paths[0], document))

        assert [p.identifier for p in points] == refs
        for point in points:
            first = next(n for n in nodes if n[0] == point.identifier)
            assert point.lat_lon == (first[1], first[2])

    @settings(deadline=None)
    @given(nodes_strategy, st.lists(identifiers, max_size=20))
    def test_resolution_restartable(self, nodes, refs):
        """Test that iterating twice yields identical results."""
        document = parse_document(build_osm(nodes, [("w", refs, [])]))
        points = resolve_points(document.paths[0], document, ResolutionMode.SKIP)

        assert list(points) == list(points)

    @settings(deadline=None)
    @given(nodes_strategy, st.lists(identifiers, max_size=20))
    def test_skip_keeps_exactly_the_known_refs(self, nodes, refs):
        """Test that SKIP yields one point per ref that has a node."""
        document = parse_document(build_osm(nodes, [("w", refs, [])]))
        path_points = resolve_points(document.paths[0], document, ResolutionMode.SKIP)
        known = {identifier for identifier, _, _ in nodes}

        assert [p.identifier for p in path_points] == [r for r in refs if r in known]
        results = list(path_points.results())
        assert len(results) == len(refs)
        assert [r.ok for r in results] == [r in known for r in refs]
