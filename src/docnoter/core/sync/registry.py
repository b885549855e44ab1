"""Track live sessions, at most one per document."""

from collections.abc import Iterator
from typing import Any

from loguru import logger

from docnoter.core.notes.buffer import NoteBuffer
from docnoter.core.sync.session import Session
from docnoter.errors import SessionCreateError, VirtualDocumentError
from docnoter.protocols import DocumentAdapter


class SessionRegistry:
    """Map document ids to their active session.

    A document adapter is owned by exactly one session; attaching a second
    session to the same document fails until the first one is killed.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def attach(self, adapter: DocumentAdapter, buffer: NoteBuffer, **kwargs: Any) -> Session:
        """Create a session for ``adapter`` and register it.

        Raises:
            SessionCreateError: if the document has no stable identifier or
                already has a live session.
        """
        try:
            document_id = adapter.get_document_id()
        except VirtualDocumentError as e:
            msg = f"Cannot take notes on this document: {e}"
            raise SessionCreateError(msg) from e

        existing = self._sessions.get(document_id)
        if existing is not None and existing.is_active:
            msg = f"{document_id} already has a live session ({existing.id[:8]})"
            raise SessionCreateError(msg)

        session = Session.create(adapter, buffer, on_kill=self._forget, **kwargs)
        self._sessions[document_id] = session
        return session

    def _forget(self, session: Session) -> None:
        if session.document_id is not None and self._sessions.get(session.document_id) is session:
            del self._sessions[session.document_id]
            logger.debug("Forgot session {} ({} left)", session.id[:8], len(self._sessions))

    def get(self, document_id: str) -> Session | None:
        return self._sessions.get(document_id)

    def kill(self, document_id: str) -> bool:
        """Kill the session for ``document_id``. Returns False if there was none."""
        session = self._sessions.get(document_id)
        if session is None:
            return False
        session.kill()
        return True

    def kill_all(self) -> None:
        for session in list(self._sessions.values()):
            session.kill()

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._sessions

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))

    def __len__(self) -> int:
        return len(self._sessions)
