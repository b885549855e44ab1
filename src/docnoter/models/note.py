"""Domain models for the note tree."""

import json
import string
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

from loguru import logger

from docnoter.config import (
    PROPERTY_DOCUMENT,
    PROPERTY_LOCATION,
    PROPERTY_REMARK,
    PROPERTY_REMARK_HASH,
    PROPERTY_SPLIT_FRACTION,
)
from docnoter.errors import PropertyDecodeError
from docnoter.models import location as loc
from docnoter.models.location import Location


def decode_literal(raw: str) -> Any:
    """Decode a property value literal.

    Raises:
        PropertyDecodeError: if the value is not a valid literal.
    """
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        msg = f"Malformed property literal: {raw!r}"
        raise PropertyDecodeError(msg) from e


def encode_literal(value: Any) -> str:
    """Encode a property value in canonical literal form."""
    return json.dumps(value, ensure_ascii=False)


def _decode_document_id(raw: str) -> str:
    value = decode_literal(raw)
    if not isinstance(value, str) or not value:
        msg = f"Document id must be a non-empty string: {raw!r}"
        raise PropertyDecodeError(msg)
    return value


def _decode_remark(raw: str) -> tuple[int, int]:
    value = decode_literal(raw)
    if (
        isinstance(value, list)
        and len(value) == 2
        and all(isinstance(v, int) and not isinstance(v, bool) for v in value)
        and 0 <= value[0] <= value[1]
    ):
        return value[0], value[1]
    msg = f"Remark range must be [begin, end]: {raw!r}"
    raise PropertyDecodeError(msg)


def _decode_remark_hash(raw: str) -> str:
    value = decode_literal(raw)
    if isinstance(value, str) and value and all(c in string.hexdigits for c in value):
        return value.lower()
    msg = f"Remark hash must be a hex string: {raw!r}"
    raise PropertyDecodeError(msg)


def _decode_split_fraction(raw: str) -> float:
    value = decode_literal(raw)
    if isinstance(value, int | float) and not isinstance(value, bool) and 0 < value < 1:
        return float(value)
    msg = f"Split fraction must be a number between 0 and 1: {raw!r}"
    raise PropertyDecodeError(msg)


@dataclass(eq=False)
class NoteEntry:
    """A single headline in the note tree.

    ``heading_range`` spans the heading line (without its newline); ``body_range``
    spans the whole subtree, from the heading start to the start of the next
    heading at the same or a shallower level.
    """

    level: int
    title: str
    properties: dict[str, str] = field(default_factory=dict)
    children: list["NoteEntry"] = field(default_factory=list)
    body: str = ""
    heading_range: tuple[int, int] = (0, 0)
    body_range: tuple[int, int] = (0, 0)
    drawer_range: tuple[int, int] | None = None
    parent: "NoteEntry | None" = field(default=None, repr=False)

    @property
    def start(self) -> int:
        return self.body_range[0]

    @property
    def end(self) -> int:
        return self.body_range[1]

    def _decoded(self, key: str, decoder: Any) -> Any:
        raw = self.properties.get(key)
        if raw is None:
            return None
        try:
            return decoder(raw)
        except PropertyDecodeError as e:
            logger.warning("Ignoring property {} on {!r}: {}", key, self.title, e)
            return None

    @cached_property
    def document_id(self) -> str | None:
        return self._decoded(PROPERTY_DOCUMENT, _decode_document_id)

    @cached_property
    def location(self) -> Location | None:
        return self._decoded(PROPERTY_LOCATION, loc.parse)

    @cached_property
    def remark(self) -> tuple[int, int] | None:
        return self._decoded(PROPERTY_REMARK, _decode_remark)

    @cached_property
    def remark_hash(self) -> str | None:
        return self._decoded(PROPERTY_REMARK_HASH, _decode_remark_hash)

    @cached_property
    def split_fraction(self) -> float | None:
        return self._decoded(PROPERTY_SPLIT_FRACTION, _decode_split_fraction)


@dataclass(frozen=True)
class Partition:
    """Annotated children of a root, classified against the current location.

    ``previous`` is nearest-first (descending), ``after`` nearest-first (ascending).
    """

    previous: tuple[NoteEntry, ...] = ()
    current: tuple[NoteEntry, ...] = ()
    after: tuple[NoteEntry, ...] = ()

    @property
    def nearest_previous(self) -> NoteEntry | None:
        return self.previous[0] if self.previous else None

    @property
    def nearest_after(self) -> NoteEntry | None:
        return self.after[0] if self.after else None

    def annotated(self) -> tuple[NoteEntry, ...]:
        return self.previous + self.current + self.after

    def titles(self) -> dict[str, list[str]]:
        return {
            "previous": [e.title for e in self.previous],
            "current": [e.title for e in self.current],
            "after": [e.title for e in self.after],
        }
