"""Shared test fixtures."""

import pytest

from docnoter.adapters.paged import PagedAdapter
from docnoter.adapters.scrolling import NodeAdapter, RangedAdapter
from docnoter.core.notes.buffer import NoteBuffer
from tests.unit.samples import (
    BOOK_ID,
    BOOK_NOTES,
    BOOK_SECTIONS,
    MANUAL_ID,
    MANUAL_NODES,
    MANUAL_NOTES,
    PAPER_ID,
    PAPER_NOTES,
    PAPER_PAGES,
)


@pytest.fixture
def paper_buffer() -> NoteBuffer:
    return NoteBuffer(PAPER_NOTES)


@pytest.fixture
def paper_adapter() -> PagedAdapter:
    return PagedAdapter(PAPER_ID, PAPER_PAGES)


@pytest.fixture
def book_buffer() -> NoteBuffer:
    return NoteBuffer(BOOK_NOTES)


@pytest.fixture
def book_adapter() -> RangedAdapter:
    return RangedAdapter(BOOK_ID, BOOK_SECTIONS, viewport_size=100)


@pytest.fixture
def manual_buffer() -> NoteBuffer:
    return NoteBuffer(MANUAL_NOTES)


@pytest.fixture
def manual_adapter() -> NodeAdapter:
    return NodeAdapter(MANUAL_ID, MANUAL_NODES, viewport_size=50, node="Buffers")
