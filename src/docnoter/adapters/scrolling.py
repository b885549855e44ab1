"""Adapters for scrolling documents: indexed sections and node graphs."""

from collections.abc import Mapping, Sequence

from docnoter.adapters.base import BaseAdapter
from docnoter.config import DEFAULT_VIEWPORT_SIZE
from docnoter.errors import LocationContractError
from docnoter.models.location import DocumentKind, Location, Node, Ranged, Viewport


class _ScrollingAdapter(BaseAdapter):
    """A window of ``viewport_size`` characters over the current section.

    Every cursor move or scroll fires a navigation event, whether or not the
    visible span changed.
    """

    def __init__(self, document_id: str | None, *, viewport_size: int) -> None:
        super().__init__(document_id)
        if viewport_size < 1:
            msg = f"Viewport size must be positive, got {viewport_size}"
            raise ValueError(msg)
        self.viewport_size = viewport_size
        self.start = 0
        self.cursor = 0

    def _section_text(self) -> str:
        raise NotImplementedError

    def _clamp(self, offset: int) -> int:
        return min(max(offset, 0), len(self._section_text()))

    def get_viewport_bounds(self) -> Viewport:
        end = min(self.start + self.viewport_size, len(self._section_text()))
        return Viewport(start=self.start, end=max(end, self.start + 1))

    def scroll_to(self, offset: int) -> None:
        """Scroll so the viewport starts at ``offset``; the cursor follows if hidden."""
        self.start = self._clamp(offset)
        if not self.get_viewport_bounds().contains(self.cursor):
            self.cursor = self.start
        self._log_move(f"scrolled to {self.start}")
        self._emit()

    def move_cursor(self, offset: int) -> None:
        """Move the cursor, scrolling just enough to keep it visible."""
        self.cursor = self._clamp(offset)
        if self.cursor < self.start:
            self.start = self.cursor
        elif self.cursor >= self.start + self.viewport_size:
            self.start = self.cursor - self.viewport_size + 1
        self._emit()

    def read_range(self, begin: int, end: int) -> str | None:
        text = self._section_text()
        if not 0 <= begin <= end <= len(text):
            return None
        return text[begin:end]


class RangedAdapter(_ScrollingAdapter):
    """A scrolling document split into indexed sections (chapters)."""

    kind = DocumentKind.RANGED

    def __init__(
        self,
        document_id: str | None,
        sections: Sequence[str],
        *,
        viewport_size: int = DEFAULT_VIEWPORT_SIZE,
        index: int = 0,
    ) -> None:
        super().__init__(document_id, viewport_size=viewport_size)
        if not sections:
            msg = "A ranged document needs at least one section"
            raise ValueError(msg)
        self.sections = list(sections)
        self.index = self._check_index(index)

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self.sections):
            msg = f"Section {index} out of range 0-{len(self.sections) - 1}"
            raise ValueError(msg)
        return index

    def _section_text(self) -> str:
        return self.sections[self.index]

    def get_current_location(self) -> Ranged:
        return Ranged(index=self.index, offset=self.start)

    def navigate_to(self, location: Location) -> None:
        if not isinstance(location, Ranged):
            msg = f"{type(self).__name__} cannot navigate to {location!r}"
            raise LocationContractError(msg)
        self.index = self._check_index(location.index)
        self.start = self.cursor = self._clamp(location.offset)
        self._log_move(f"section {self.index} offset {self.start}")
        self._emit()


class NodeAdapter(_ScrollingAdapter):
    """A hypertext document made of named nodes (a help tree)."""

    kind = DocumentKind.NODE

    def __init__(
        self,
        document_id: str | None,
        nodes: Mapping[str, str],
        *,
        viewport_size: int = DEFAULT_VIEWPORT_SIZE,
        node: str | None = None,
    ) -> None:
        super().__init__(document_id, viewport_size=viewport_size)
        if not nodes:
            msg = "A node document needs at least one node"
            raise ValueError(msg)
        self.nodes = dict(nodes)
        self.node = self._check_node(node if node is not None else next(iter(self.nodes)))

    def _check_node(self, node: str) -> str:
        if node not in self.nodes:
            msg = f"Unknown node: {node!r}"
            raise ValueError(msg)
        return node

    def _section_text(self) -> str:
        return self.nodes[self.node]

    def get_current_location(self) -> Node:
        return Node(node_id=self.node, offset=self.start)

    def navigate_to(self, location: Location) -> None:
        if not isinstance(location, Node):
            msg = f"{type(self).__name__} cannot navigate to {location!r}"
            raise LocationContractError(msg)
        self.node = self._check_node(location.node_id)
        self.start = self.cursor = self._clamp(location.offset)
        self._log_move(f"node {self.node!r} offset {self.start}")
        self._emit()

    def follow(self, node: str) -> None:
        """Jump to the top of another node, as when following a link."""
        self.navigate_to(Node(node_id=node, offset=0))
