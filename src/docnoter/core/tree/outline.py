"""Parse and render the outline markup notes are persisted in.

The markup is a small subset of Org syntax::

    * Heading
    :PROPERTIES:
    :KEY: value
    :END:
    body text
    ** Child heading

The number of stars is the heading level. A property drawer is only recognised
directly below a heading line; elsewhere those lines are plain body text.
"""

import io
import re

from docnoter.errors import ParseError
from docnoter.models.note import NoteEntry

_HEADING_RE = re.compile(r"^(\*+) +(.*?)\s*$")
_PROPERTY_RE = re.compile(r"^:([^:\s]+):(?:\s+(.*?))?\s*$")
_DRAWER_START = ":PROPERTIES:"
_DRAWER_END = ":END:"


def parse_outline(text: str) -> list[NoteEntry]:
    """Parse an outline document into its top-level entries.

    Offsets stored on the entries are character offsets into ``text``.

    Raises:
        ParseError: on an unterminated or malformed property drawer.
    """
    top_level: list[NoteEntry] = []
    # Open entries, outermost first
    stack: list[NoteEntry] = []
    lines = text.splitlines(keepends=True)

    pos = 0
    i = 0
    while i < len(lines):
        line = lines[i]
        content = line.rstrip("\r\n")
        m = _HEADING_RE.match(content)
        if not m:
            if stack:
                stack[-1].body += line
            pos += len(line)
            i += 1
            continue

        level = len(m.group(1))
        while stack and stack[-1].level >= level:
            closed = stack.pop()
            closed.body_range = (closed.start, pos)

        entry = NoteEntry(
            level=level,
            title=m.group(2),
            heading_range=(pos, pos + len(content)),
            body_range=(pos, len(text)),
        )
        if stack:
            entry.parent = stack[-1]
            stack[-1].children.append(entry)
        else:
            top_level.append(entry)
        stack.append(entry)
        pos += len(line)
        i += 1

        if i < len(lines) and lines[i].strip() == _DRAWER_START:
            i, pos = _parse_drawer(entry, lines, i, pos)

    return top_level


def _parse_drawer(entry: NoteEntry, lines: list[str], i: int, pos: int) -> tuple[int, int]:
    """Read the property drawer starting at ``lines[i]`` into ``entry``.

    Returns the line index and offset just past the drawer.
    """
    drawer_start = pos
    pos += len(lines[i])
    i += 1
    while i < len(lines):
        line = lines[i]
        stripped = line.strip()
        if stripped == _DRAWER_END:
            pos += len(line)
            entry.drawer_range = (drawer_start, pos)
            return i + 1, pos
        m = _PROPERTY_RE.match(stripped)
        if not m:
            msg = f"Malformed property line under {entry.title!r}: {stripped!r}"
            raise ParseError(msg, offset=pos)
        entry.properties[m.group(1)] = m.group(2) or ""
        pos += len(line)
        i += 1

    msg = f"Unterminated property drawer under {entry.title!r}"
    raise ParseError(msg, offset=drawer_start)


def format_property_line(key: str, value: str) -> str:
    if not key or ":" in key or any(c.isspace() for c in key):
        msg = f"Invalid property key: {key!r}"
        raise ValueError(msg)
    return f":{key}: {value}"


def render_drawer(properties: dict[str, str]) -> str:
    """Render a property drawer, or an empty string when there are no properties."""
    if not properties:
        return ""
    out = io.StringIO()
    out.write(_DRAWER_START + "\n")
    for key, value in properties.items():
        out.write(format_property_line(key, value) + "\n")
    out.write(_DRAWER_END + "\n")
    return out.getvalue()


def render_entry(entry: NoteEntry, *, level: int) -> str:
    """Render an entry subtree with the entry itself at ``level``.

    Descendants keep their depth relative to the entry.
    """
    if level < 1:
        msg = f"Heading level must be positive, got {level}"
        raise ValueError(msg)
    if "\n" in entry.title:
        msg = f"Heading title must be a single line: {entry.title!r}"
        raise ValueError(msg)

    out = io.StringIO()
    out.write(f"{'*' * level} {entry.title}\n")
    out.write(render_drawer(entry.properties))
    if entry.body:
        out.write(entry.body if entry.body.endswith("\n") else entry.body + "\n")
    for child in entry.children:
        out.write(render_entry(child, level=max(level + 1, level + child.level - entry.level)))
    return out.getvalue()
