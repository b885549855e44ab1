"""A marker surface that records marks instead of drawing them."""

import itertools
from dataclasses import dataclass


@dataclass(frozen=True)
class Mark:
    """A highlighted span."""

    id: int
    begin: int
    end: int
    style: str


class RecordingMarkerSurface:
    """Keep live marks in a dict, keyed by mark id."""

    def __init__(self) -> None:
        self.marks: dict[int, Mark] = {}
        self._ids = itertools.count(1)

    def add_mark(self, begin: int, end: int, *, style: str) -> Mark:
        if begin > end:
            msg = f"Mark begins after it ends: ({begin}, {end})"
            raise ValueError(msg)
        mark = Mark(id=next(self._ids), begin=begin, end=end, style=style)
        self.marks[mark.id] = mark
        return mark

    def remove_mark(self, mark: object) -> None:
        if not isinstance(mark, Mark) or mark.id not in self.marks:
            msg = f"Unknown mark: {mark!r}"
            raise KeyError(msg)
        del self.marks[mark.id]

    def spans(self, style: str | None = None) -> list[tuple[int, int]]:
        """Return the live spans, optionally only those with ``style``."""
        return sorted(
            (m.begin, m.end) for m in self.marks.values() if style is None or m.style == style
        )

    def __len__(self) -> int:
        return len(self.marks)
