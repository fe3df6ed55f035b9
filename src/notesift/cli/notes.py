"""notesift notes — list the notes stored in the note database."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from notesift.cli.errors import err_no_db
from notesift.db.connection import Database
from notesift.db.migrations import initialize
from notesift.db.repository import NoteRepository

console = Console()

_DEFAULT_DB = Path(".notesift.db")
_TITLE_WIDTH = 40


def notes_cmd(
    db: Annotated[
        Path,
        typer.Option("--db", help="Path to the note database."),
    ] = _DEFAULT_DB,
    source: Annotated[
        str | None,
        typer.Option("--source", "-s", help="Only show notes extracted from this file name."),
    ] = None,
) -> None:
    """List stored notes."""
    if not db.exists():
        console.print(err_no_db(str(db)))
        raise typer.Exit(1)

    conn = Database(db).connect()
    try:
        initialize(conn)
        repo = NoteRepository(conn)
        notes = repo.list_notes_by_source(source) if source else repo.list_notes()
    finally:
        conn.close()

    if not notes:
        if source:
            console.print(
                f"[yellow]No notes found for source:[/] '{source}'\n"
                "  Run:  notesift notes  to see all stored notes."
            )
        else:
            console.print("[yellow]No notes stored yet.[/]  Run:  notesift ingest PATH")
        return

    table = Table(title=f"Notes ({len(notes)})")
    table.add_column("Title", style="bold", max_width=_TITLE_WIDTH)
    table.add_column("Type")
    table.add_column("Category")
    table.add_column("Source")
    table.add_column("Extracted from", style="dim")
    table.add_column("Created")

    for note in notes:
        table.add_row(
            note.title,
            note.type.value,
            note.category,
            note.source_file or "—",
            note.extracted_from or "",
            note.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)
