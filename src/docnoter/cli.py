"""CLI for docnoter: take notes on a document and move between them."""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from docnoter.adapters.registry import open_document
from docnoter.config import DEFAULT_VIEWPORT_SIZE
from docnoter.core.notes.buffer import NoteBuffer
from docnoter.core.notes.resolver import open_note_buffer
from docnoter.core.sync.registry import SessionRegistry
from docnoter.core.sync.session import Session
from docnoter.errors import NoAdjacentNoteError, ParseError, SessionCreateError
from docnoter.logging_config import configure_logging
from docnoter.models.location import DocumentKind, Location, Node, Paged, Ranged
from docnoter.protocols import DocumentAdapter

app = typer.Typer(help="docnoter: keep outline notes in step with the documents they annotate.")


class SyncDirection(StrEnum):
    CURRENT = "current"
    PREVIOUS = "previous"
    NEXT = "next"


DocumentArg = Annotated[Path, typer.Argument(help="Document to take notes on")]
KindOpt = Annotated[
    DocumentKind, typer.Option("--kind", "-k", help="How the document is addressed")
]
NotesOpt = Annotated[
    Path | None, typer.Option("--notes", "-N", help="Note file (default: resolved per document)")
]
PageOpt = Annotated[int | None, typer.Option("--page", "-p", help="Page to show (paged)")]
IndexOpt = Annotated[int | None, typer.Option("--index", "-i", help="Section to show (ranged)")]
NodeOpt = Annotated[str | None, typer.Option("--node", help="Node to show (node)")]
OffsetOpt = Annotated[
    int | None, typer.Option("--offset", "-o", help="Offset to scroll to (ranged, node)")
]
ViewportOpt = Annotated[
    int, typer.Option("--viewport-size", help="Visible characters (ranged, node)")
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def format_location(location: Location | None) -> str:
    if isinstance(location, Paged):
        return f"page {location.page}"
    if isinstance(location, Ranged):
        return f"section {location.index} offset {location.offset}"
    if isinstance(location, Node):
        return f"node {location.node_id!r} offset {location.offset}"
    return "nowhere"


def _target_location(
    adapter: DocumentAdapter,
    *,
    page: int | None,
    index: int | None,
    node: str | None,
    offset: int | None,
) -> Location | None:
    """Build the location requested on the command line, if any."""
    current = adapter.get_current_location()
    if isinstance(current, Paged):
        return Paged(page=page) if page is not None else None
    if isinstance(current, Ranged):
        if index is None and offset is None:
            return None
        return Ranged(
            index=current.index if index is None else index,
            offset=0 if offset is None else offset,
        )
    if node is None and offset is None:
        return None
    return Node(
        node_id=current.node_id if node is None else node,
        offset=0 if offset is None else offset,
    )


@contextmanager
def _open_session(
    document: Path,
    kind: DocumentKind,
    *,
    notes: Path | None,
    page: int | None = None,
    index: int | None = None,
    node: str | None = None,
    offset: int | None = None,
    viewport_size: int = DEFAULT_VIEWPORT_SIZE,
) -> Iterator[Session]:
    """Attach a session, move to the requested location, then kill and save."""
    if not document.exists():
        logger.error("Document not found: {}", document)
        raise typer.Exit(1)

    try:
        adapter = open_document(document, kind, viewport_size=viewport_size)
    except (ValueError, UnicodeDecodeError) as e:
        logger.error("Cannot open {} as {}: {}", document, kind, e)
        raise typer.Exit(1) from e

    buffer: NoteBuffer
    if notes is not None:
        buffer = NoteBuffer.from_file(notes)
    else:
        buffer = open_note_buffer(adapter.get_document_id(), kind)

    registry = SessionRegistry()
    try:
        session = registry.attach(adapter, buffer)
    except (SessionCreateError, ParseError) as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    try:
        target = _target_location(adapter, page=page, index=index, node=node, offset=offset)
        if target is not None:
            try:
                adapter.navigate_to(target)
            except ValueError as e:
                logger.error("Cannot go to {}: {}", format_location(target), e)
                raise typer.Exit(1) from e
        yield session
    finally:
        registry.kill_all()
        buffer.save()


def _partition_data(session: Session) -> dict[str, Any]:
    return {
        "document": session.document_id,
        "location": format_location(session.current_location),
        **session.partition.titles(),
    }


@app.command()
def attach(
    document: DocumentArg,
    kind: KindOpt = DocumentKind.PAGED,
    notes: NotesOpt = None,
    page: PageOpt = None,
    index: IndexOpt = None,
    node: NodeOpt = None,
    offset: OffsetOpt = None,
    viewport_size: ViewportOpt = DEFAULT_VIEWPORT_SIZE,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show which notes come before, at, and after a location."""
    with _open_session(
        document,
        kind,
        notes=notes,
        page=page,
        index=index,
        node=node,
        offset=offset,
        viewport_size=viewport_size,
    ) as session:
        data = _partition_data(session)

    if output_json:
        typer.echo(json.dumps(data, indent=2))
        return
    typer.echo(f"Notes for {data['document']} at {data['location']}:\n")
    for group in ("previous", "current", "after"):
        titles = data[group]
        typer.echo(f"  {group}: {', '.join(titles) if titles else '-'}")


@app.command()
def insert(
    document: DocumentArg,
    title: str = typer.Argument(..., help="Heading of the note"),
    kind: KindOpt = DocumentKind.PAGED,
    notes: NotesOpt = None,
    page: PageOpt = None,
    index: IndexOpt = None,
    node: NodeOpt = None,
    offset: OffsetOpt = None,
    viewport_size: ViewportOpt = DEFAULT_VIEWPORT_SIZE,
    remark: Annotated[
        tuple[int, int] | None,
        typer.Option("--remark", "-r", help="Document span BEGIN END the note remarks on"),
    ] = None,
    body: str = typer.Option("", "--body", "-b", help="Note text"),
) -> None:
    """Insert a note for a location (or append to an existing one)."""
    span = (remark[0], remark[1]) if remark is not None and None not in remark else None
    with _open_session(
        document,
        kind,
        notes=notes,
        page=page,
        index=index,
        node=node,
        offset=offset,
        viewport_size=viewport_size,
    ) as session:
        try:
            entry = session.insert_note(title, span, body=body)
        except ValueError as e:
            logger.error("{}", e)
            raise typer.Exit(1) from e
        location = session.current_location

    if entry is not None:
        typer.echo(f"Noted {entry.title!r} at {format_location(location)}")


@app.command()
def sync(
    document: DocumentArg,
    direction: SyncDirection = typer.Argument(SyncDirection.CURRENT, help="Where to go"),
    kind: KindOpt = DocumentKind.PAGED,
    notes: NotesOpt = None,
    page: PageOpt = None,
    index: IndexOpt = None,
    node: NodeOpt = None,
    offset: OffsetOpt = None,
    viewport_size: ViewportOpt = DEFAULT_VIEWPORT_SIZE,
) -> None:
    """Move the document to the current, previous or next note."""
    with _open_session(
        document,
        kind,
        notes=notes,
        page=page,
        index=index,
        node=node,
        offset=offset,
        viewport_size=viewport_size,
    ) as session:
        try:
            if direction is SyncDirection.PREVIOUS:
                session.sync_to_previous()
            elif direction is SyncDirection.NEXT:
                session.sync_to_next()
            else:
                session.sync_to_current()
        except NoAdjacentNoteError as e:
            typer.echo(str(e))
            raise typer.Exit(1) from e
        location = session.current_location

    typer.echo(format_location(location))


@app.command()
def goto(
    document: DocumentArg,
    note_offset: int = typer.Argument(..., help="Character offset inside the note file"),
    kind: KindOpt = DocumentKind.PAGED,
    notes: NotesOpt = None,
    viewport_size: ViewportOpt = DEFAULT_VIEWPORT_SIZE,
) -> None:
    """Move the document to the note enclosing an offset in the note file."""
    with _open_session(document, kind, notes=notes, viewport_size=viewport_size) as session:
        try:
            session.sync_from_note(note_offset)
        except NoAdjacentNoteError as e:
            typer.echo(str(e))
            raise typer.Exit(1) from e
        location = session.current_location

    typer.echo(format_location(location))
