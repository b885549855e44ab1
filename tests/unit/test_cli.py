"""Tests for the docnoter command line."""

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from docnoter.cli import app, format_location
from docnoter.core.tree.note_tree import NoteTree
from docnoter.logging_config import configure_logging
from docnoter.models.location import Node, Paged, Ranged

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Point loguru back at the real stderr once the runner's stream is gone."""
    yield
    configure_logging()


@pytest.fixture
def paper(tmp_path: Path) -> Path:
    path = tmp_path / "paper.txt"
    path.write_text("Page one.\fPage two.\fPage three.\fPage four.\fPage five.", encoding="utf-8")
    return path


@pytest.fixture
def book(tmp_path: Path) -> Path:
    path = tmp_path / "book.txt"
    path.write_text("Chapter one.\fChapter two. It was a dark night.", encoding="utf-8")
    return path


def _notes(document: Path) -> str:
    return (document.parent / "Notes.org").read_text(encoding="utf-8")


def test_insert_creates_note_file(paper: Path) -> None:
    """Inserting into a fresh directory creates Notes.org with a root and the note."""
    result = runner.invoke(app, ["insert", str(paper), "Fig 1", "-p", "3", "-b", "A pipeline."])

    assert result.exit_code == 0, result.output
    assert "Noted 'Fig 1' at page 3" in result.output
    root = NoteTree.load(_notes(paper)).find_root(str(paper.resolve()))
    assert root is not None
    assert root.title == "paper.txt"
    assert root.location == Paged(page=3)
    assert [e.title for e in root.children] == ["Fig 1"]
    assert root.children[0].location == Paged(page=3)
    assert "A pipeline." in root.children[0].body


def test_insert_with_remark(paper: Path) -> None:
    result = runner.invoke(app, ["insert", str(paper), "Two", "-p", "2", "--remark", "0", "4"])

    assert result.exit_code == 0, result.output
    root = NoteTree.load(_notes(paper)).find_root(str(paper.resolve()))
    assert root is not None
    assert root.children[0].remark == (0, 4)


def test_insert_with_bad_remark_fails(paper: Path) -> None:
    result = runner.invoke(app, ["insert", str(paper), "Two", "--remark", "0", "400"])
    assert result.exit_code == 1


def test_attach_resumes_and_lists_notes(paper: Path) -> None:
    """A later session starts where the previous one was left."""
    runner.invoke(app, ["insert", str(paper), "Fig 1", "-p", "3"])
    runner.invoke(app, ["insert", str(paper), "Refs", "-p", "5"])

    result = runner.invoke(app, ["attach", str(paper)])

    assert result.exit_code == 0, result.output
    assert "at page 5" in result.output
    assert "previous: Fig 1" in result.output
    assert "current: Refs" in result.output
    assert "after: -" in result.output


def test_attach_json(paper: Path) -> None:
    runner.invoke(app, ["insert", str(paper), "Fig 1", "-p", "3"])

    result = runner.invoke(app, ["attach", str(paper), "-p", "1", "--json"])

    assert result.exit_code == 0, result.output
    parsed = json.loads(result.stdout)
    assert parsed["location"] == "page 1"
    assert parsed["previous"] == []
    assert parsed["current"] == []
    assert parsed["after"] == ["Fig 1"]


def test_attach_explicit_notes_file(paper: Path, tmp_path: Path) -> None:
    notes = tmp_path / "elsewhere" / "mine.org"

    result = runner.invoke(app, ["attach", str(paper), "--notes", str(notes)])

    assert result.exit_code == 0, result.output
    assert notes.exists()
    assert not (paper.parent / "Notes.org").exists()


def test_sync_moves_between_notes(paper: Path) -> None:
    runner.invoke(app, ["insert", str(paper), "Fig 1", "-p", "3"])

    result = runner.invoke(app, ["sync", str(paper), "previous", "-p", "5"])
    assert result.exit_code == 0, result.output
    assert "page 3" in result.output

    result = runner.invoke(app, ["sync", str(paper), "next", "-p", "1"])
    assert result.exit_code == 0, result.output
    assert "page 3" in result.output


def test_sync_without_next_note_fails(paper: Path) -> None:
    runner.invoke(app, ["insert", str(paper), "Fig 1", "-p", "3"])

    result = runner.invoke(app, ["sync", str(paper), "next"])

    assert result.exit_code == 1
    assert "No next note" in result.output


def test_goto_note_offset(paper: Path) -> None:
    """goto shows the note enclosing an offset in the note file."""
    runner.invoke(app, ["insert", str(paper), "Fig 1", "-p", "3", "-b", "Pipeline figure."])
    runner.invoke(app, ["insert", str(paper), "Refs", "-p", "5"])
    notes = paper.parent / "Notes.org"
    offset = _notes(paper).index("Pipeline figure.")

    result = runner.invoke(app, ["goto", str(paper), str(offset), "-N", str(notes)])

    assert result.exit_code == 0, result.output
    assert "page 3" in result.output


def test_missing_document_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, ["attach", str(tmp_path / "nope.txt")])
    assert result.exit_code == 1
    assert not (tmp_path / "Notes.org").exists()


def test_page_out_of_range_fails(paper: Path) -> None:
    result = runner.invoke(app, ["attach", str(paper), "-p", "9"])
    assert result.exit_code == 1


def test_ranged_document(book: Path) -> None:
    result = runner.invoke(
        app, ["insert", str(book), "Dark night", "--kind", "ranged", "-i", "1", "-o", "13"]
    )

    assert result.exit_code == 0, result.output
    assert "Noted 'Dark night' at section 1 offset 13" in result.output
    assert ":NOTER_LOCATION: [1, 13]" in _notes(book)


def test_format_location() -> None:
    assert format_location(Paged(page=2)) == "page 2"
    assert format_location(Ranged(index=1, offset=5)) == "section 1 offset 5"
    assert format_location(Node(node_id="Top", offset=0)) == "node 'Top' offset 0"
    assert format_location(None) == "nowhere"


def test_verbose_logs_carry_module(paper: Path) -> None:
    result = runner.invoke(app, ["--verbose", "attach", str(paper)])

    assert result.exit_code == 0, result.output
    assert "docnoter.core.sync.session:" in result.output
