"""Tests for location values, ordering and serialization."""

import itertools

import pytest

from docnoter.errors import LocationContractError, PropertyDecodeError
from docnoter.models import location as loc
from docnoter.models.location import DocumentKind, Node, Paged, Ranged, Viewport

SAMPLES = [
    Paged(page=1),
    Paged(page=42),
    Ranged(index=0, offset=0),
    Ranged(index=3, offset=1200),
    Node(node_id="(elisp) Buffers", offset=17),
    Node(node_id="Überblick", offset=0),
]


@pytest.mark.parametrize("location", SAMPLES)
def test_parse_inverts_serialize(location: loc.Location) -> None:
    parsed = loc.parse(loc.serialize(location))
    assert parsed == location
    assert loc.equal(parsed, location)


def test_serialize_is_canonical() -> None:
    assert loc.serialize(Paged(page=3)) == "3"
    assert loc.serialize(Ranged(index=2, offset=140)) == "[2, 140]"
    assert loc.serialize(Node(node_id="(elisp) Buffers", offset=140)) == '["(elisp) Buffers", 140]'


def test_parse_accepts_loose_whitespace() -> None:
    assert loc.parse(" [ 2,140 ] ") == Ranged(index=2, offset=140)


@pytest.mark.parametrize("text", ["", "abc", "true", "1.5", "[1]", "[1, 2, 3]", '[1, "x"]', "{}"])
def test_parse_rejects_malformed_literals(text: str) -> None:
    with pytest.raises(PropertyDecodeError):
        loc.parse(text)


def test_paged_order_is_total() -> None:
    pages = [Paged(page=n) for n in range(1, 5)]
    for a, b in itertools.product(pages, repeat=2):
        results = [loc.equal(a, b), loc.less_than(a, b), loc.greater_than(a, b)]
        assert results.count(True) == 1, (a, b)


def test_ranged_order_is_total_under_a_viewport() -> None:
    viewport = Viewport(start=100, end=200)
    points = [Ranged(index=i, offset=o) for i in (0, 1) for o in (0, 99, 100, 150, 199, 200)]
    for a, b in itertools.product(points, repeat=2):
        results = [
            loc.equal(a, b, viewport),
            loc.less_than(a, b, viewport),
            loc.greater_than(a, b, viewport),
        ]
        assert results.count(True) == 1, (a, b)


def test_ranged_equality_depends_on_viewport() -> None:
    a = Ranged(index=1, offset=120)
    b = Ranged(index=1, offset=180)
    assert loc.equal(a, b, Viewport(start=100, end=200))
    assert not loc.equal(a, b, Viewport(start=150, end=250))
    assert not loc.equal(a, b)
    assert loc.less_than(a, b, Viewport(start=150, end=250))


def test_ranged_viewport_end_is_exclusive() -> None:
    viewport = Viewport(start=0, end=100)
    assert not loc.equal(Ranged(index=0, offset=10), Ranged(index=0, offset=100), viewport)


def test_ranged_needs_same_index_to_be_equal() -> None:
    viewport = Viewport(start=0, end=100)
    assert not loc.equal(Ranged(index=0, offset=10), Ranged(index=1, offset=10), viewport)
    assert loc.less_than(Ranged(index=0, offset=90), Ranged(index=1, offset=10), viewport)


def test_node_locations_order_by_offset_within_a_node() -> None:
    viewport = Viewport(start=0, end=10)
    a = Node(node_id="Top", offset=5)
    b = Node(node_id="Top", offset=50)
    assert loc.equal(a, Node(node_id="Top", offset=9), viewport)
    assert loc.less_than(a, b, viewport)
    assert loc.greater_than(b, a, viewport)


def test_node_locations_in_different_nodes_cannot_be_ordered() -> None:
    a = Node(node_id="Top", offset=5)
    b = Node(node_id="Files", offset=5)
    assert not loc.equal(a, b, Viewport(start=0, end=10))
    with pytest.raises(LocationContractError):
        loc.less_than(a, b)


def test_comparing_across_kinds_raises() -> None:
    with pytest.raises(LocationContractError):
        loc.equal(Paged(page=1), Node(node_id="Top", offset=1))
    with pytest.raises(LocationContractError):
        loc.less_than(Paged(page=1), Ranged(index=1, offset=0))
    with pytest.raises(TypeError):
        loc.greater_than(Ranged(index=1, offset=0), Paged(page=1))


def test_kind_of() -> None:
    assert loc.kind_of(Paged(page=1)) is DocumentKind.PAGED
    assert loc.kind_of(Ranged(index=0, offset=0)) is DocumentKind.RANGED
    assert loc.kind_of(Node(node_id="Top", offset=0)) is DocumentKind.NODE


def test_viewport_covers() -> None:
    outer = Viewport(start=10, end=100)
    assert outer.covers(Viewport(start=10, end=100))
    assert outer.covers(Viewport(start=20, end=50))
    assert not outer.covers(Viewport(start=5, end=50))
    assert not outer.covers(Viewport(start=50, end=101))
