"""Tests for the session registry."""

import pytest

from docnoter.adapters.paged import PagedAdapter
from docnoter.adapters.scrolling import RangedAdapter
from docnoter.core.notes.buffer import NoteBuffer
from docnoter.core.sync.registry import SessionRegistry
from docnoter.errors import SessionCreateError
from docnoter.models.location import DocumentKind, Paged
from tests.unit.fakes import FakeAdapter
from tests.unit.samples import BOOK_ID, PAPER_ID, PAPER_PAGES


def test_one_live_session_per_document(
    paper_adapter: PagedAdapter, paper_buffer: NoteBuffer
) -> None:
    registry = SessionRegistry()
    session = registry.attach(paper_adapter, paper_buffer)

    with pytest.raises(SessionCreateError):
        registry.attach(PagedAdapter(PAPER_ID, PAPER_PAGES), paper_buffer)

    assert registry.get(PAPER_ID) is session
    assert PAPER_ID in registry
    assert len(registry) == 1


def test_reattach_after_kill(paper_adapter: PagedAdapter, paper_buffer: NoteBuffer) -> None:
    registry = SessionRegistry()
    first = registry.attach(paper_adapter, paper_buffer)

    assert registry.kill(PAPER_ID) is True
    assert not first.is_active
    assert PAPER_ID not in registry

    second = registry.attach(PagedAdapter(PAPER_ID, PAPER_PAGES), paper_buffer)
    assert second is not first
    assert registry.get(PAPER_ID) is second


def test_killing_session_directly_unregisters_it(
    paper_adapter: PagedAdapter, paper_buffer: NoteBuffer
) -> None:
    registry = SessionRegistry()
    session = registry.attach(paper_adapter, paper_buffer)
    session.kill()
    assert registry.get(PAPER_ID) is None
    assert registry.kill(PAPER_ID) is False


def test_sessions_for_different_documents_coexist(
    paper_adapter: PagedAdapter,
    paper_buffer: NoteBuffer,
    book_adapter: RangedAdapter,
    book_buffer: NoteBuffer,
) -> None:
    registry = SessionRegistry()
    paper = registry.attach(paper_adapter, paper_buffer)
    book = registry.attach(book_adapter, book_buffer)

    assert len(registry) == 2
    assert set(registry) == {paper, book}

    paper_adapter.turn_page()
    assert paper.current_location == Paged(page=2)
    assert [e.title for e in book.partition.current] == ["Opening line"]

    registry.kill_all()
    assert len(registry) == 0
    assert not paper.is_active
    assert not book.is_active
    assert BOOK_ID not in registry


def test_attach_virtual_document_fails() -> None:
    registry = SessionRegistry()
    with pytest.raises(SessionCreateError):
        registry.attach(
            FakeAdapter(DocumentKind.PAGED, Paged(page=1), document_id=None), NoteBuffer()
        )
    assert len(registry) == 0


def test_attach_passes_session_options() -> None:
    registry = SessionRegistry()
    adapter = FakeAdapter(DocumentKind.PAGED, Paged(page=1))
    session = registry.attach(adapter, NoteBuffer(), default_split_fraction=0.4)
    assert session.split_fraction == 0.4
    session.kill()
    assert len(registry) == 0
