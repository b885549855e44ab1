"""In-memory note document with a modification counter."""

from pathlib import Path

from loguru import logger


class NoteBuffer:
    """Hold the text of a note document and track modifications.

    - ``tick`` increases on every mutation; caches key on it.
    - ``save()`` does not rewrite the file if its contents are the same.
    """

    def __init__(self, text: str = "", *, path: Path | None = None) -> None:
        self._text = text
        self.path = path
        self.tick = 0
        # Contents as last read from or written to disk.
        self._saved_text: str | None = None

    @classmethod
    def from_file(cls, path: Path) -> "NoteBuffer":
        """Load a note file. A missing file yields an empty buffer bound to ``path``."""
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("Note file {} not found, starting empty", path)
            text = ""
        buffer = cls(text, path=path)
        buffer._saved_text = text
        return buffer

    @property
    def text(self) -> str:
        return self._text

    @property
    def modified(self) -> bool:
        return self._text != (self._saved_text or "")

    def __len__(self) -> int:
        return len(self._text)

    def _check_span(self, start: int, end: int) -> None:
        if not 0 <= start <= end <= len(self._text):
            msg = f"Span ({start}, {end}) outside buffer of length {len(self._text)}"
            raise ValueError(msg)

    def insert(self, offset: int, text: str) -> None:
        """Insert ``text`` at ``offset``."""
        self.replace(offset, offset, text)

    def replace(self, start: int, end: int, text: str) -> None:
        """Replace the span ``[start, end)`` with ``text``."""
        self._check_span(start, end)
        if start == end and not text:
            return
        self._text = self._text[:start] + text + self._text[end:]
        self.tick += 1
        logger.debug("Note buffer edited at {}-{} (tick {})", start, end, self.tick)

    def save(self) -> bool:
        """Write the buffer to its file if the contents changed.

        Returns:
            True if the file was written.
        """
        if self.path is None:
            msg = "Note buffer has no file to save to"
            raise ValueError(msg)
        if self._saved_text is not None and self._saved_text == self._text:
            logger.debug("Note file {} unchanged, not writing", self.path)
            return False

        action = "update" if self.path.exists() else "create"
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self._text, encoding="utf-8")
        self._saved_text = self._text
        logger.info("Saved notes ({}) {}", action, self.path)
        return True
