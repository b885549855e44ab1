"""Pick and build the adapter for a document kind."""

import json
from pathlib import Path

from loguru import logger

from docnoter.adapters.paged import PagedAdapter
from docnoter.adapters.scrolling import NodeAdapter, RangedAdapter
from docnoter.config import DEFAULT_VIEWPORT_SIZE
from docnoter.models.location import DocumentKind

AdapterType = type[PagedAdapter] | type[RangedAdapter] | type[NodeAdapter]

ADAPTERS: dict[DocumentKind, AdapterType] = {
    DocumentKind.PAGED: PagedAdapter,
    DocumentKind.RANGED: RangedAdapter,
    DocumentKind.NODE: NodeAdapter,
}

# Pages and sections in plain text documents are separated by form feeds.
SECTION_SEPARATOR = "\f"


def adapter_for(kind: DocumentKind) -> AdapterType:
    return ADAPTERS[kind]


def open_document(
    path: Path,
    kind: DocumentKind,
    *,
    viewport_size: int = DEFAULT_VIEWPORT_SIZE,
) -> PagedAdapter | RangedAdapter | NodeAdapter:
    """Open a document from disk with the adapter for ``kind``.

    Paged and ranged documents are UTF-8 text split on form feeds. Node documents
    are JSON objects mapping node names to node text.
    """
    document_id = str(path.expanduser().resolve())
    text = path.read_text(encoding="utf-8")
    logger.debug("Opening {} as {}", document_id, kind)

    if kind is DocumentKind.PAGED:
        return PagedAdapter(document_id, text.split(SECTION_SEPARATOR))
    if kind is DocumentKind.RANGED:
        return RangedAdapter(
            document_id, text.split(SECTION_SEPARATOR), viewport_size=viewport_size
        )

    nodes = json.loads(text)
    if not isinstance(nodes, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in nodes.items()
    ):
        msg = f"Node document must map node names to text: {path}"
        raise ValueError(msg)
    return NodeAdapter(document_id, nodes, viewport_size=viewport_size)
