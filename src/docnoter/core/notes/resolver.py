"""Decide which note file holds the notes for a document."""

from pathlib import Path

from loguru import logger

from docnoter.config import NOTES_FILE_NAMES, resolve_node_notes_file
from docnoter.core.notes.buffer import NoteBuffer
from docnoter.models.location import DocumentKind


def resolve_note_path(document_id: str, kind: DocumentKind) -> Path:
    """Return the note file for a document.

    Node-graph documents share a single note file. Every other document gets the
    first existing note file found next to it, or the first configured name.
    """
    if kind is DocumentKind.NODE:
        return resolve_node_notes_file()

    directory = Path(document_id).expanduser().parent
    for name in NOTES_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return directory / NOTES_FILE_NAMES[0]


def open_note_buffer(document_id: str, kind: DocumentKind) -> NoteBuffer:
    path = resolve_note_path(document_id, kind)
    logger.debug("Notes for {} ({}) live in {}", document_id, kind, path)
    return NoteBuffer.from_file(path)
