"""Derive highlight marks for the note tree and the document from a partition."""

import hashlib
from types import TracebackType

from loguru import logger

from docnoter.models.note import NoteEntry, Partition
from docnoter.protocols import DocumentAdapter, MarkerSurface

STYLE_CURRENT = "current"
STYLE_NO_NOTE = "no-note"
STYLE_REMARK = "remark"


def remark_hash(text: str) -> str:
    """Content hash of a remarked span."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class MarkSet:
    """Marks acquired together on one surface and released together."""

    def __init__(self, surface: MarkerSurface | None) -> None:
        self._surface = surface
        self._marks: list[object] = []

    def add(self, begin: int, end: int, *, style: str) -> None:
        if self._surface is None:
            return
        self._marks.append(self._surface.add_mark(begin, end, style=style))

    def release(self) -> None:
        if self._surface is not None:
            for mark in self._marks:
                self._surface.remove_mark(mark)
        self._marks.clear()

    def __len__(self) -> int:
        return len(self._marks)

    def __enter__(self) -> "MarkSet":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


class HighlightCoordinator:
    """Keep note-side and document-side marks in line with the latest partition.

    Every refresh releases all marks and builds them again from scratch.
    """

    def __init__(
        self,
        adapter: DocumentAdapter,
        *,
        note_surface: MarkerSurface | None,
        document_surface: MarkerSurface | None,
    ) -> None:
        self._adapter = adapter
        self._note_surface = note_surface
        self._document_surface = document_surface
        self.note_marks = MarkSet(note_surface)
        self.document_marks = MarkSet(document_surface)

    def refresh(self, partition: Partition, root: NoteEntry) -> None:
        self.release()
        note_marks = MarkSet(self._note_surface)
        document_marks = MarkSet(self._document_surface)
        try:
            self._mark_notes(note_marks, partition, root)
            for entry in partition.current:
                self._mark_remark(document_marks, entry)
        except Exception:
            note_marks.release()
            document_marks.release()
            raise
        self.note_marks = note_marks
        self.document_marks = document_marks
        logger.debug(
            "Highlights: {} note mark(s), {} document mark(s)", len(note_marks), len(document_marks)
        )

    def _mark_notes(self, marks: MarkSet, partition: Partition, root: NoteEntry) -> None:
        if partition.current:
            for entry in partition.current:
                marks.add(*entry.heading_range, style=STYLE_CURRENT)
            return
        # No note for this place yet: point at where a new one would go.
        target = partition.nearest_previous or root
        marks.add(*target.heading_range, style=STYLE_NO_NOTE)

    def _mark_remark(self, marks: MarkSet, entry: NoteEntry) -> None:
        if entry.remark is None:
            return
        begin, end = entry.remark
        live = self._adapter.read_range(begin, end)
        if live is None:
            logger.debug("Remark of {!r} lies outside the document", entry.title)
            return
        if entry.remark_hash is not None and entry.remark_hash != remark_hash(live):
            logger.debug("Remark of {!r} no longer matches the document", entry.title)
            return
        marks.add(begin, end, style=STYLE_REMARK)

    def release(self) -> None:
        self.note_marks.release()
        self.document_marks.release()
