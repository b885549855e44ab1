"""Keep outline notes in step with the documents they annotate."""

from docnoter.core.notes.buffer import NoteBuffer
from docnoter.core.sync.registry import SessionRegistry
from docnoter.core.sync.session import Session, SessionState
from docnoter.protocols import DocumentAdapter, MarkerSurface

__all__ = [
    "DocumentAdapter",
    "MarkerSurface",
    "NoteBuffer",
    "Session",
    "SessionRegistry",
    "SessionState",
]
