"""Protocols for the collaborators the sync engine drives."""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from docnoter.models.location import DocumentKind, Location, Viewport

NavigationCallback = Callable[[], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class MarkerSurface(Protocol):
    """Protocol for anything that can display highlighted spans."""

    def add_mark(self, begin: int, end: int, *, style: str) -> object:
        """Highlight ``[begin, end)`` and return a handle for removal."""
        ...

    def remove_mark(self, mark: object) -> None:
        """Remove a mark previously returned by ``add_mark``."""
        ...


@runtime_checkable
class DocumentAdapter(Protocol):
    """Protocol for document viewers, one implementation per document kind."""

    kind: DocumentKind

    @property
    def markers(self) -> MarkerSurface:
        """Surface that document-side highlights (remarks) are drawn on."""
        ...

    def get_document_id(self) -> str:
        """Return a stable identifier for the open document.

        Raises VirtualDocumentError if the document has no backing identity.
        """
        ...

    def get_current_location(self) -> Location:
        """Return the location currently shown."""
        ...

    def navigate_to(self, location: Location) -> None:
        """Move the viewer to ``location``."""
        ...

    def on_navigation_event(self, callback: NavigationCallback) -> Unsubscribe:
        """Register a callback fired after user-driven movement."""
        ...

    def get_viewport_bounds(self) -> Viewport | None:
        """Return the visible span, or None for kinds without one."""
        ...

    def read_range(self, begin: int, end: int) -> str | None:
        """Return live document text for ``[begin, end)``, or None if unavailable."""
        ...
