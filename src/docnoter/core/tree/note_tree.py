"""Note tree: lookup, partition against a location, and edits."""

from collections.abc import Iterator, Mapping

from loguru import logger

from docnoter.core.notes.buffer import NoteBuffer
from docnoter.core.tree.outline import parse_outline, render_drawer, render_entry
from docnoter.models import location as loc
from docnoter.models.location import Location, Node, Viewport
from docnoter.models.note import NoteEntry, Partition


class NoteTree:
    """A parsed note document."""

    def __init__(
        self,
        entries: list[NoteEntry],
        *,
        watched_document_id: str | None = None,
    ) -> None:
        self.entries = entries
        self._roots: dict[str, NoteEntry | None] = {}
        if watched_document_id is not None:
            self.find_root(watched_document_id)

    @classmethod
    def load(cls, text: str, watched_document_id: str | None = None) -> "NoteTree":
        """Parse a note document.

        Raises:
            ParseError: if the document is structurally invalid.
        """
        return cls(parse_outline(text), watched_document_id=watched_document_id)

    def find_root(self, document_id: str) -> NoteEntry | None:
        """Return the top-level entry whose document property is ``document_id``."""
        if document_id in self._roots:
            return self._roots[document_id]

        matches = [e for e in self.entries if e.document_id == document_id]
        if len(matches) > 1:
            logger.warning(
                "{} entries claim document {!r}, using {!r}",
                len(matches),
                document_id,
                matches[0].title,
            )
        root = matches[0] if matches else None
        self._roots[document_id] = root
        return root

    def entry_at(self, offset: int) -> NoteEntry | None:
        """Return the deepest entry whose subtree contains ``offset``."""
        found: NoteEntry | None = None
        candidates = self.entries
        while candidates:
            for entry in candidates:
                if entry.start <= offset < entry.end:
                    found = entry
                    candidates = entry.children
                    break
            else:
                break
        return found

    def partition(
        self,
        root: NoteEntry,
        current: Location,
        viewport: Viewport | None = None,
    ) -> Partition:
        return partition(root, current, viewport)


def annotated_children(root: NoteEntry) -> Iterator[tuple[NoteEntry, Location]]:
    """Yield direct children one level below ``root`` with a decodable location."""
    for child in root.children:
        if child.level != root.level + 1:
            continue
        location = child.location
        if location is not None:
            yield child, location


def partition(
    root: NoteEntry,
    current: Location,
    viewport: Viewport | None = None,
) -> Partition:
    """Classify the annotated children of ``root`` as before, at, or after ``current``.

    ``previous`` is nearest-first, so it is built in document order and reversed.
    Children whose location is of another document kind, or (for node documents)
    in another node, cannot be ordered against ``current`` and are left out.
    """
    previous: list[NoteEntry] = []
    at: list[NoteEntry] = []
    after: list[NoteEntry] = []

    for child, location in annotated_children(root):
        if type(location) is not type(current):
            logger.debug("Skipping {!r}: {!r} is not comparable", child.title, location)
            continue
        if (
            isinstance(location, Node)
            and isinstance(current, Node)
            and location.node_id != current.node_id
        ):
            continue
        if loc.equal(location, current, viewport):
            at.append(child)
        elif loc.less_than(location, current, viewport):
            previous.append(child)
        else:
            after.append(child)

    previous.reverse()
    return Partition(previous=tuple(previous), current=tuple(at), after=tuple(after))


def enclosing_child(root: NoteEntry, offset: int) -> NoteEntry | None:
    """Return the child one level below ``root`` whose subtree contains ``offset``."""
    for child in root.children:
        if child.level == root.level + 1 and child.start <= offset < child.end:
            return child
    return None


def content_end(entry: NoteEntry) -> int:
    """Offset where the entry's own content ends and its first child begins."""
    return entry.children[0].start if entry.children else entry.end


def _line_prefix(buffer: NoteBuffer, offset: int) -> str:
    if offset > 0 and buffer.text[offset - 1] != "\n":
        return "\n"
    return ""


def insert(buffer: NoteBuffer, root: NoteEntry, offset: int, entry: NoteEntry) -> int:
    """Insert ``entry`` as a child of ``root`` at ``offset``.

    The entry is promoted or demoted so it sits one level below ``root``; its
    descendants keep their relative depth.

    Returns:
        The offset of the new heading.
    """
    if not root.heading_range[1] <= offset <= root.end:
        msg = f"Offset {offset} is outside {root.title!r} ({root.start}-{root.end})"
        raise ValueError(msg)

    # Compose first so a bad entry leaves the buffer untouched.
    rendered = render_entry(entry, level=root.level + 1)
    prefix = _line_prefix(buffer, offset)
    buffer.insert(offset, prefix + rendered)
    logger.debug("Inserted {!r} under {!r} at {}", entry.title, root.title, offset)
    return offset + len(prefix)


def append_root(buffer: NoteBuffer, entry: NoteEntry) -> int:
    """Append ``entry`` as a new top-level entry at the end of the document."""
    offset = len(buffer)
    rendered = render_entry(entry, level=1)
    prefix = _line_prefix(buffer, offset)
    buffer.insert(offset, prefix + rendered)
    return offset + len(prefix)


def append_body(buffer: NoteBuffer, entry: NoteEntry, text: str) -> int:
    """Append ``text`` to the entry's own body, before its first child.

    Returns:
        The offset where the text starts.
    """
    offset = content_end(entry)
    if not text.endswith("\n"):
        text += "\n"
    prefix = _line_prefix(buffer, offset)
    buffer.insert(offset, prefix + text)
    return offset + len(prefix)


def set_properties(buffer: NoteBuffer, entry: NoteEntry, values: Mapping[str, str]) -> None:
    """Write property values on ``entry``, keeping all other properties."""
    properties = dict(entry.properties)
    properties.update(values)
    drawer = render_drawer(properties)

    if entry.drawer_range is not None:
        buffer.replace(*entry.drawer_range, drawer)
        return

    heading_end = entry.heading_range[1]
    if heading_end < len(buffer) and buffer.text[heading_end] == "\n":
        buffer.insert(heading_end + 1, drawer)
    else:
        buffer.insert(heading_end, "\n" + drawer)


def set_property(buffer: NoteBuffer, entry: NoteEntry, key: str, value: str) -> None:
    set_properties(buffer, entry, {key: value})


class NoteTreeCache:
    """Reuse a parsed tree until the buffer's modification counter advances."""

    def __init__(self) -> None:
        self._buffer: NoteBuffer | None = None
        self._tick: int | None = None
        self._tree: NoteTree | None = None

    def get(self, buffer: NoteBuffer, watched_document_id: str | None = None) -> NoteTree:
        """Return the tree for ``buffer``, reparsing only if it changed.

        Raises:
            ParseError: if a reparse fails. The previous tree stays cached.
        """
        if self._tree is not None and self._buffer is buffer and self._tick == buffer.tick:
            return self._tree

        tree = NoteTree.load(buffer.text, watched_document_id)
        logger.debug("Parsed note tree at tick {} ({} top-level)", buffer.tick, len(tree.entries))
        self._buffer = buffer
        self._tick = buffer.tick
        self._tree = tree
        return tree

    def is_fresh(self, buffer: NoteBuffer) -> bool:
        return self._tree is not None and self._buffer is buffer and self._tick == buffer.tick
