"""Exception taxonomy for the note synchronization engine."""


class DocnoterError(Exception):
    """Base class for all docnoter errors."""


class ParseError(DocnoterError):
    """The note document is structurally invalid."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


class PropertyDecodeError(DocnoterError, ValueError):
    """A single property value could not be decoded.

    Callers recover by treating the property as absent.
    """


class VirtualDocumentError(DocnoterError):
    """The open document has no stable backing identifier."""


class SessionCreateError(DocnoterError):
    """A session could not be created for a document."""


class NoAdjacentNoteError(DocnoterError):
    """Navigation was requested but there is no note in that direction."""


class LocationContractError(DocnoterError, TypeError):
    """Two locations were compared that cannot be compared."""
