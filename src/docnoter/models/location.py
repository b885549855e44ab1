"""Location values for every supported document kind, and their ordering.

A location is one of three variants:

- ``Paged(page)`` for paginated documents (PDF, DjVu, ...).
- ``Ranged(index, offset)`` for scrolling documents split into indexed sections
  (EPUB chapters, plain text split on form feeds).
- ``Node(node_id, offset)`` for node-graph documents such as help trees.

Comparisons are only defined between locations of the same variant. For the
ranged and node variants, equality also depends on the viewport currently shown
by the viewer: two locations in the same section are equal when both offsets are
visible at once. The viewport is passed explicitly to every comparison.
"""

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from docnoter.errors import LocationContractError, PropertyDecodeError


class DocumentKind(StrEnum):
    """The addressing scheme of a document."""

    PAGED = "paged"
    RANGED = "ranged"
    NODE = "node"


@dataclass(frozen=True)
class Paged:
    """A page number (1-based)."""

    page: int


@dataclass(frozen=True)
class Ranged:
    """A character offset inside the section at ``index``."""

    index: int
    offset: int


@dataclass(frozen=True)
class Node:
    """A character offset inside the named node."""

    node_id: str
    offset: int


Location = Paged | Ranged | Node


@dataclass(frozen=True)
class Viewport:
    """The half-open span ``[start, end)`` currently visible in the viewer."""

    start: int
    end: int

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def covers(self, other: "Viewport") -> bool:
        """True if ``other`` lies entirely within this viewport."""
        return self.start <= other.start and other.end <= self.end


def kind_of(location: Location) -> DocumentKind:
    """Return the document kind a location belongs to."""
    if isinstance(location, Paged):
        return DocumentKind.PAGED
    if isinstance(location, Ranged):
        return DocumentKind.RANGED
    if isinstance(location, Node):
        return DocumentKind.NODE
    msg = f"Not a location: {location!r}"
    raise LocationContractError(msg)


def _check_same_variant(a: Location, b: Location) -> None:
    if type(a) is not type(b) or not isinstance(a, Paged | Ranged | Node):
        msg = f"Cannot compare {a!r} with {b!r}"
        raise LocationContractError(msg)


def _visible_together(a_offset: int, b_offset: int, viewport: Viewport | None) -> bool:
    if a_offset == b_offset:
        return True
    if viewport is None:
        return False
    return viewport.contains(a_offset) and viewport.contains(b_offset)


def equal(a: Location, b: Location, viewport: Viewport | None = None) -> bool:
    """Return True if ``a`` and ``b`` denote the same place in the viewer."""
    _check_same_variant(a, b)
    if isinstance(a, Paged):
        assert isinstance(b, Paged)
        return a.page == b.page
    if isinstance(a, Ranged):
        assert isinstance(b, Ranged)
        return a.index == b.index and _visible_together(a.offset, b.offset, viewport)
    assert isinstance(a, Node) and isinstance(b, Node)
    return a.node_id == b.node_id and _visible_together(a.offset, b.offset, viewport)


def _order_key(a: Location, b: Location) -> tuple[tuple[int, ...], tuple[int, ...]]:
    if isinstance(a, Paged):
        assert isinstance(b, Paged)
        return (a.page,), (b.page,)
    if isinstance(a, Ranged):
        assert isinstance(b, Ranged)
        return (a.index, a.offset), (b.index, b.offset)
    assert isinstance(a, Node) and isinstance(b, Node)
    # Nodes have no global order; only offsets inside one node are comparable.
    if a.node_id != b.node_id:
        msg = f"Cannot order locations in different nodes: {a!r}, {b!r}"
        raise LocationContractError(msg)
    return (a.offset,), (b.offset,)


def less_than(a: Location, b: Location, viewport: Viewport | None = None) -> bool:
    """Return True if ``a`` comes strictly before ``b``."""
    if equal(a, b, viewport):
        return False
    key_a, key_b = _order_key(a, b)
    return key_a < key_b


def greater_than(a: Location, b: Location, viewport: Viewport | None = None) -> bool:
    """Return True if ``a`` comes strictly after ``b``."""
    if equal(a, b, viewport):
        return False
    key_a, key_b = _order_key(a, b)
    return key_a > key_b


def serialize(location: Location) -> str:
    """Encode a location as its canonical property literal."""
    data: Any
    if isinstance(location, Paged):
        data = location.page
    elif isinstance(location, Ranged):
        data = [location.index, location.offset]
    elif isinstance(location, Node):
        data = [location.node_id, location.offset]
    else:
        msg = f"Not a location: {location!r}"
        raise LocationContractError(msg)
    return json.dumps(data, ensure_ascii=False)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse(text: str) -> Location:
    """Decode a location from its property literal.

    Raises:
        PropertyDecodeError: if the text is not a valid location literal.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        msg = f"Malformed location literal: {text!r}"
        raise PropertyDecodeError(msg) from e

    if _is_int(data):
        return Paged(page=data)
    if isinstance(data, list) and len(data) == 2 and _is_int(data[1]):
        head, offset = data
        if _is_int(head):
            return Ranged(index=head, offset=offset)
        if isinstance(head, str):
            return Node(node_id=head, offset=offset)

    msg = f"Not a location literal: {text!r}"
    raise PropertyDecodeError(msg)
