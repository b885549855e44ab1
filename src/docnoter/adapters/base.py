"""Shared plumbing for the reference document adapters."""

from loguru import logger

from docnoter.errors import VirtualDocumentError
from docnoter.markers import RecordingMarkerSurface
from docnoter.protocols import NavigationCallback, Unsubscribe


class BaseAdapter:
    """Event fan-out, document identity and a document-side marker surface."""

    def __init__(self, document_id: str | None) -> None:
        self._document_id = document_id
        self._listeners: list[NavigationCallback] = []
        self.markers = RecordingMarkerSurface()

    def get_document_id(self) -> str:
        if not self._document_id:
            msg = f"{type(self).__name__} shows a document without a backing identifier"
            raise VirtualDocumentError(msg)
        return self._document_id

    def on_navigation_event(self, callback: NavigationCallback) -> Unsubscribe:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self) -> None:
        # Copy: a listener may unsubscribe while being notified.
        for callback in list(self._listeners):
            callback()

    def _log_move(self, what: str) -> None:
        logger.debug("{} moved: {}", type(self).__name__, what)
