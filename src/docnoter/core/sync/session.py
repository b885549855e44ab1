"""A session keeps one document viewer and its notes in step.

Lifecycle: ``UNINITIALIZED`` -> ``ACTIVE`` -> ``KILLED``. A killed session is never
reused; every operation on it is a no-op returning None.

Work happens on navigation events from the adapter and on direct calls (insert,
sync). Each recomputation repartitions the root's children from scratch and
rebuilds all highlight marks. Two caches keep the frequent navigation events cheap:

- the parsed note tree is reused until the note buffer's modification counter
  advances;
- for scrolling documents, an event is ignored while the visible span stays
  inside the span recorded at the last recomputation.
"""

import uuid
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import Any

from loguru import logger

from docnoter.config import (
    DEFAULT_SPLIT_FRACTION,
    PROPERTY_DOCUMENT,
    PROPERTY_LOCATION,
    PROPERTY_REMARK,
    PROPERTY_REMARK_HASH,
    PROPERTY_SPLIT_FRACTION,
)
from docnoter.core.notes.buffer import NoteBuffer
from docnoter.core.sync.highlight import HighlightCoordinator, remark_hash
from docnoter.core.tree import note_tree
from docnoter.core.tree.note_tree import NoteTree, NoteTreeCache
from docnoter.errors import (
    LocationContractError,
    NoAdjacentNoteError,
    ParseError,
    SessionCreateError,
    VirtualDocumentError,
)
from docnoter.markers import RecordingMarkerSurface
from docnoter.models import location as loc
from docnoter.models.location import Location, Node, Ranged, Viewport
from docnoter.models.note import NoteEntry, Partition, encode_literal
from docnoter.protocols import DocumentAdapter, MarkerSurface, Unsubscribe


class SessionState(StrEnum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    KILLED = "killed"


def _section_of(location: Location) -> int | str | None:
    if isinstance(location, Ranged):
        return location.index
    if isinstance(location, Node):
        return location.node_id
    return None


class Session:
    """Synchronize one document adapter with the notes for its document."""

    def __init__(
        self,
        adapter: DocumentAdapter,
        buffer: NoteBuffer,
        *,
        note_markers: MarkerSurface | None = None,
        document_markers: MarkerSurface | None = None,
        default_split_fraction: float = DEFAULT_SPLIT_FRACTION,
        on_kill: Callable[["Session"], None] | None = None,
    ) -> None:
        self.id = uuid.uuid4().hex
        self.adapter = adapter
        self.buffer = buffer
        self.state = SessionState.UNINITIALIZED
        self.document_id: str | None = None
        self.current_location: Location | None = None
        self.partition = Partition()
        self.split_fraction = default_split_fraction
        self.note_markers = note_markers if note_markers is not None else RecordingMarkerSurface()
        if document_markers is None:
            document_markers = adapter.markers

        self._cache = NoteTreeCache()
        # Modification counter and viewport seen at the last recomputation.
        self._tick: int | None = None
        self._viewport: Viewport | None = None
        self._highlights = HighlightCoordinator(
            adapter, note_surface=self.note_markers, document_surface=document_markers
        )
        self._unsubscribe: Unsubscribe | None = None
        self._on_kill = on_kill

    def __repr__(self) -> str:
        return f"Session({self.id[:8]}, {self.document_id!r}, {self.state})"

    @classmethod
    def create(
        cls,
        adapter: DocumentAdapter,
        buffer: NoteBuffer,
        **kwargs: Any,
    ) -> "Session":
        """Create and activate a session.

        Raises:
            SessionCreateError: if the document has no stable identifier.
            ParseError: if the note document is structurally invalid.
        """
        session = cls(adapter, buffer, **kwargs)
        session._activate()
        return session

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def note_highlights(self) -> int:
        return len(self._highlights.note_marks)

    @property
    def document_highlights(self) -> int:
        return len(self._highlights.document_marks)

    # --- Lifecycle ---

    def _activate(self) -> None:
        try:
            document_id = self.adapter.get_document_id()
        except VirtualDocumentError as e:
            msg = f"Cannot take notes on this document: {e}"
            raise SessionCreateError(msg) from e
        self.document_id = document_id

        tree = self._tree()
        root = tree.find_root(document_id)
        if root is None:
            root = self._create_root(document_id)

        if root.split_fraction is not None:
            self.split_fraction = root.split_fraction
        self._resume(root)

        self.current_location = self.adapter.get_current_location()
        self._viewport = self.adapter.get_viewport_bounds()
        self._unsubscribe = self.adapter.on_navigation_event(self.on_navigate)
        self.state = SessionState.ACTIVE
        logger.info("Session {} started for {}", self.id[:8], document_id)
        self._recompute()

    def _create_root(self, document_id: str) -> NoteEntry:
        title = Path(document_id).name or document_id
        entry = NoteEntry(
            level=1,
            title=title,
            properties={PROPERTY_DOCUMENT: encode_literal(document_id)},
        )
        note_tree.append_root(self.buffer, entry)
        logger.info("Created notes heading {!r} for {}", title, document_id)
        root = self._tree().find_root(document_id)
        assert root is not None
        return root

    def _resume(self, root: NoteEntry) -> None:
        """Bring the viewer back to the location saved when the last session ended."""
        saved = root.location
        if saved is None:
            return
        if loc.kind_of(saved) is not self.adapter.kind:
            logger.warning(
                "Saved location {!r} does not fit a {} document", saved, self.adapter.kind
            )
            return
        try:
            self.adapter.navigate_to(saved)
        except ValueError as e:
            logger.warning("Cannot resume at {!r}: {}", saved, e)

    def kill(self) -> None:
        """Save the current location, drop all marks and end the session."""
        if self.state is SessionState.KILLED:
            return
        if self.state is SessionState.ACTIVE:
            try:
                self._persist_location()
            except ParseError as e:
                logger.warning("Not saving location for {}: {}", self.document_id, e)
        self._highlights.release()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.state = SessionState.KILLED
        logger.info("Session {} ended for {}", self.id[:8], self.document_id)
        if self._on_kill is not None:
            self._on_kill(self)

    def _persist_location(self) -> None:
        if self.current_location is None or self.document_id is None:
            return
        root = self._tree().find_root(self.document_id)
        if root is None:
            return
        value = loc.serialize(self.current_location)
        if root.properties.get(PROPERTY_LOCATION) != value:
            note_tree.set_property(self.buffer, root, PROPERTY_LOCATION, value)

    # --- Tree access ---

    def _tree(self) -> NoteTree:
        return self._cache.get(self.buffer, self.document_id)

    def _root(self) -> NoteEntry:
        assert self.document_id is not None
        root = self._tree().find_root(self.document_id)
        if root is None:
            logger.warning("Notes heading for {} disappeared, recreating it", self.document_id)
            root = self._create_root(self.document_id)
        return root

    def _recompute(self) -> None:
        assert self.current_location is not None
        root = self._root()
        self._tick = self.buffer.tick
        self.partition = note_tree.partition(root, self.current_location, self._viewport)
        self._highlights.refresh(self.partition, root)
        logger.debug(
            "Partition at {!r}: {} previous, {} current, {} after",
            self.current_location,
            len(self.partition.previous),
            len(self.partition.current),
            len(self.partition.after),
        )

    def _ensure_fresh(self) -> None:
        if self._tick != self.buffer.tick:
            self._recompute()

    # --- Navigation events ---

    def on_navigate(self) -> None:
        """Handle a navigation event from the adapter."""
        if not self.is_active:
            return
        location = self.adapter.get_current_location()
        viewport = self.adapter.get_viewport_bounds()
        if self._is_redundant(location, viewport):
            return
        self.current_location = location
        self._viewport = viewport
        self._recompute()

    def _is_redundant(self, location: Location, viewport: Viewport | None) -> bool:
        if self._tick != self.buffer.tick or self.current_location is None:
            return False
        if viewport is None:
            return location == self.current_location
        return (
            self._viewport is not None
            and _section_of(location) == _section_of(self.current_location)
            and self._viewport.covers(viewport)
        )

    def _refresh_from_adapter(self) -> None:
        """Recompute after a move this session asked for itself."""
        location = self.adapter.get_current_location()
        viewport = self.adapter.get_viewport_bounds()
        if location == self.current_location and viewport == self._viewport:
            self._ensure_fresh()
            return
        self.current_location = location
        self._viewport = viewport
        self._recompute()

    # --- Commands ---

    def insert_note(
        self,
        title: str,
        remark: tuple[int, int] | None = None,
        *,
        body: str = "",
    ) -> NoteEntry | None:
        """Insert a note for the current location.

        If a note titled ``title`` already exists for this location, ``body`` is
        appended under it instead of creating a sibling.

        Returns:
            The new or extended entry.
        """
        if not self.is_active:
            return None
        assert self.current_location is not None
        self._ensure_fresh()
        root = self._root()

        # Validate everything before touching the buffer.
        remark_props = self._remark_properties(remark) if remark is not None else {}

        existing = next((e for e in self.partition.current if e.title == title), None)
        if existing is not None:
            heading_at = existing.start
            note_tree.append_body(self.buffer, existing, body)
            if remark_props:
                # The append went after the drawer, so its offsets still hold.
                note_tree.set_properties(self.buffer, existing, remark_props)
            logger.info("Appended to note {!r}", title)
        else:
            if self.partition.current:
                anchor = self.partition.current[-1].end
            elif self.partition.previous:
                anchor = self.partition.previous[0].end
            else:
                anchor = note_tree.content_end(root)
            properties = {PROPERTY_LOCATION: loc.serialize(self.current_location)}
            properties.update(remark_props)
            entry = NoteEntry(level=root.level + 1, title=title, properties=properties, body=body)
            heading_at = note_tree.insert(self.buffer, root, anchor, entry)
            logger.info("Inserted note {!r} at {!r}", title, self.current_location)

        self._recompute()
        return self._tree().entry_at(heading_at)

    def _remark_properties(self, remark: tuple[int, int]) -> dict[str, str]:
        begin, end = remark
        text = self.adapter.read_range(begin, end) if begin <= end else None
        if text is None:
            msg = f"Remark range ({begin}, {end}) is not in the document"
            raise ValueError(msg)
        return {
            PROPERTY_REMARK: encode_literal([begin, end]),
            PROPERTY_REMARK_HASH: encode_literal(remark_hash(text)),
        }

    def set_split_fraction(self, fraction: float) -> None:
        """Store the notes window share on the root entry."""
        if not self.is_active:
            return
        if not 0 < fraction < 1:
            msg = f"Split fraction must be between 0 and 1, got {fraction}"
            raise ValueError(msg)
        note_tree.set_property(
            self.buffer, self._root(), PROPERTY_SPLIT_FRACTION, encode_literal(fraction)
        )
        self.split_fraction = fraction

    def _navigate(self, location: Location | None, what: str) -> Location:
        if location is None:
            raise NoAdjacentNoteError(what)
        self.adapter.navigate_to(location)
        self._refresh_from_adapter()
        return location

    def sync_to_current(self) -> Location | None:
        """Move the viewer to the first note for the current location."""
        if not self.is_active:
            return None
        self._ensure_fresh()
        if not self.partition.current:
            logger.debug("No note at the current location")
            return None
        return self._navigate(self.partition.current[0].location, "No current note")

    def sync_to_previous(self) -> Location | None:
        """Move the viewer to the nearest note before the current location.

        Raises:
            NoAdjacentNoteError: if there is no earlier note.
        """
        if not self.is_active:
            return None
        self._ensure_fresh()
        target = self.partition.nearest_previous
        return self._navigate(target.location if target else None, "No previous note")

    def sync_to_next(self) -> Location | None:
        """Move the viewer to the nearest note after the current location.

        Raises:
            NoAdjacentNoteError: if there is no later note.
        """
        if not self.is_active:
            return None
        self._ensure_fresh()
        target = self.partition.nearest_after
        return self._navigate(target.location if target else None, "No next note")

    def sync_from_note(self, offset: int) -> Location | None:
        """Move the viewer to the note enclosing ``offset`` in the note document.

        Raises:
            NoAdjacentNoteError: if no note with a usable location encloses ``offset``.
        """
        if not self.is_active:
            return None
        entry = note_tree.enclosing_child(self._root(), offset)
        location = entry.location if entry is not None else None
        if location is not None and loc.kind_of(location) is not self.adapter.kind:
            location = None
        try:
            return self._navigate(location, f"No note with a location at offset {offset}")
        except (ValueError, LocationContractError) as e:
            msg = f"Cannot show note at offset {offset}: {e}"
            raise NoAdjacentNoteError(msg) from e
