"""notesift CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from notesift.cli.ingest import ingest_cmd
from notesift.cli.notes import notes_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("notesift")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"notesift {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="notesift",
    help=(
        "notesift — turn uploaded files into searchable notes.\n\n"
        "  notesift ingest  Extract, segment and store notes from files.\n"
        "  notesift notes   List stored notes."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """notesift — turn uploaded files into searchable notes."""


app.command("ingest")(ingest_cmd)
app.command("notes")(notes_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed notesift version."""
    typer.echo(f"notesift {_installed_version()}")


if __name__ == "__main__":
    app()
