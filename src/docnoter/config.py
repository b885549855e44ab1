"""Configuration constants for docnoter."""

import os
from pathlib import Path

# Reserved property keys, one per semantic role. Other keys are preserved untouched.
PROPERTY_DOCUMENT: str = "NOTER_DOCUMENT"
PROPERTY_LOCATION: str = "NOTER_LOCATION"
PROPERTY_REMARK: str = "NOTER_REMARK"
PROPERTY_REMARK_HASH: str = "NOTER_REMARK_HASH"
PROPERTY_SPLIT_FRACTION: str = "NOTER_SPLIT_FRACTION"

# Used when the root entry carries no (valid) split fraction.
DEFAULT_SPLIT_FRACTION: float = 0.5

# Note file names looked up next to a document. First file found is used; when none
# exists the first name is created.
NOTES_FILE_NAMES: list[str] = ["Notes.org", "notes.org", "README.org"]

# Node-graph documents (help trees) all share one note file. First file found is used.
NODE_NOTES_FILES: list[Path] = [
    Path("~/.local/share/docnoter/node-notes.org").expanduser(),
    Path("~/.config/docnoter/node-notes.org").expanduser(),
]

# Number of characters visible at once for range/node documents opened from disk.
DEFAULT_VIEWPORT_SIZE: int = 2000


def resolve_node_notes_file() -> Path:
    """Return the note file shared by all node-graph documents.

    The ``DOCNOTER_NODE_NOTES`` environment variable wins; otherwise the first
    existing candidate, falling back to the first candidate.
    """
    override = os.environ.get("DOCNOTER_NODE_NOTES")
    if override:
        return Path(override).expanduser()
    for candidate in NODE_NOTES_FILES:
        if candidate.is_file():
            return candidate
    return NODE_NOTES_FILES[0]
