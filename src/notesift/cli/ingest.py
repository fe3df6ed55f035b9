"""notesift ingest — turn files into notes and store them in the note database.

Each PATH is a file or a directory. Directories are expanded to the files they
contain (--recursive for subdirectories, max 10 levels; hidden entries are
skipped). Every file is classified by extension, extracted, segmented into
units and stored as one note per unit.
"""

from __future__ import annotations

import fnmatch
import functools
import json
import logging
import sqlite3
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from notesift import llm_client
from notesift.cli.errors import (
    err_audio_too_large,
    err_config,
    err_no_api_key,
    err_no_sources,
    err_path_not_found,
)
from notesift.config import ConfigError, NotesiftConfig, load_config
from notesift.db.connection import Database
from notesift.db.migrations import initialize
from notesift.db.repository import NoteRepository
from notesift.ingest.analysis import AudioAnalyzer
from notesift.ingest.audio import transcribe_with_litellm
from notesift.ingest.classifier import classify
from notesift.ingest.dispatch import build_extractors
from notesift.ingest.pipeline import FileResult, IngestPipeline
from notesift.ingest.synthesizer import NoteSynthesizer
from notesift.models import ExtractionStatus, FileCategory, UploadedFile

console = Console()

_DEFAULT_DB = ".notesift.db"
_MAX_DEPTH = 10

_STATUS_STYLE = {
    ExtractionStatus.OK: "green",
    ExtractionStatus.PLACEHOLDER: "cyan",
    ExtractionStatus.EMPTY: "yellow",
    ExtractionStatus.UNSUPPORTED: "yellow",
    ExtractionStatus.FAILED: "red",
}


def ingest_cmd(
    paths: Annotated[
        list[Path] | None,
        typer.Argument(help="Files or directories to ingest."),
    ] = None,
    db: Annotated[
        Path,
        typer.Option("--db", help="Path to the note database (created if missing)."),
    ] = Path(_DEFAULT_DB),
    category: Annotated[
        str | None,
        typer.Option("--category", help="Category assigned to every note (default: Uploads)."),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Recurse into subdirectories (max 10 levels)."),
    ] = False,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", help="Glob pattern to exclude (repeatable)."),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", min=1, help="Number of files processed in parallel."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show the notes that would be created without writing."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the created notes as JSON."),
    ] = False,
    analyze: Annotated[
        bool | None,
        typer.Option("--analyze/--no-analyze", help="Run AI analysis over audio transcripts."),
    ] = None,
    transcribe: Annotated[
        bool,
        typer.Option("--transcribe", help="Transcribe audio with the configured speech model."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """Ingest files and store one note per extracted unit."""
    if verbose:
        _configure_logging()

    if not paths:
        console.print(err_no_sources())
        raise typer.Exit(1)

    for path in paths:
        if not path.exists():
            console.print(err_path_not_found(str(path)))
            raise typer.Exit(1)

    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)

    # ---- CLI flags override config ----
    if category:
        cfg.notes.category = category
    if workers is not None:
        cfg.pipeline.workers = workers
    if analyze is not None:
        cfg.analysis.enabled = analyze
    if transcribe:
        cfg.transcription.enabled = True

    files = _expand_paths(paths, recursive=recursive, exclude=exclude or [])
    if not files:
        console.print("[yellow]No files found to ingest.[/]")
        raise typer.Exit(0)

    uploads = _load_uploads(files)
    pipeline_kwargs = _pipeline_parts(cfg, uploads)

    if dry_run:
        results = _run(IngestPipeline(**pipeline_kwargs), uploads, cfg, quiet=json_output)
    else:
        conn = _open_db(db)
        try:
            store = NoteRepository(conn)
            results = _run(
                IngestPipeline(store=store, **pipeline_kwargs), uploads, cfg, quiet=json_output
            )
        except sqlite3.Error as exc:
            console.print(f"[red]Error:[/] Could not store notes in '{db}': {exc}")
            raise typer.Exit(1)
        finally:
            conn.close()

    if json_output:
        notes = [note.to_dict() for result in results for note in result.notes]
        typer.echo(json.dumps(notes, indent=2, ensure_ascii=False))
        return

    _show_summary(results)
    total = sum(len(r.notes) for r in results)
    if dry_run:
        console.print(f"[dim]Dry run — {total} notes not written to {db}[/]")
    else:
        console.print(f"[green]✓[/] {total} notes stored in {db}")


# ------------------------------------------------------------------
# Pipeline assembly
# ------------------------------------------------------------------


def _pipeline_parts(cfg: NotesiftConfig, uploads: list[UploadedFile]) -> dict:
    """Build the extractor table and synthesizer from the merged config."""
    transcriber = None
    if cfg.transcription.enabled:
        model = cfg.transcription.model
        try:
            llm_client.validate_api_key(model)
        except EnvironmentError:
            console.print(err_no_api_key(llm_client.provider_of(model)))
            raise typer.Exit(1)
        for upload in uploads:
            if classify(upload.name) is FileCategory.AUDIO and upload.size > cfg.transcription.max_bytes:
                console.print(
                    err_audio_too_large(
                        upload.name,
                        upload.size / (1024 * 1024),
                        cfg.transcription.max_bytes / (1024 * 1024),
                    )
                )
        transcriber = functools.partial(
            transcribe_with_litellm, model=model, max_bytes=cfg.transcription.max_bytes
        )

    analyzer = None
    if cfg.analysis.enabled:
        analyzer = AudioAnalyzer(model=cfg.analysis.model, max_tokens=cfg.analysis.max_tokens)

    return {
        "extractors": build_extractors(transcriber=transcriber, analyzer=analyzer),
        "synthesizer": NoteSynthesizer(category=cfg.notes.category),
    }


def _run(
    pipeline: IngestPipeline,
    uploads: list[UploadedFile],
    cfg: NotesiftConfig,
    quiet: bool,
) -> list[FileResult]:
    if quiet:
        return pipeline.process_batch(uploads, workers=cfg.pipeline.workers)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        transient=True,
        console=console,
    ) as prog:
        prog.add_task(f"Processing {len(uploads)} files…", total=None)
        return pipeline.process_batch(uploads, workers=cfg.pipeline.workers)


def _load_uploads(files: list[Path]) -> list[UploadedFile]:
    uploads: list[UploadedFile] = []
    for f in files:
        try:
            uploads.append(UploadedFile.from_path(f))
        except OSError as exc:
            console.print(f"[red]✗ Could not read[/] {f}: {exc}")
    return uploads


# ------------------------------------------------------------------
# Directory expansion
# ------------------------------------------------------------------


def _expand_paths(paths: list[Path], recursive: bool, exclude: list[str]) -> list[Path]:
    """Expand directories to the files they contain; files pass through."""
    result: list[Path] = []
    for p in paths:
        if p.is_dir():
            files = _scan_dir(p, recursive=recursive, exclude=exclude, depth=0)
            if not files:
                console.print(f"[yellow]No files found in directory:[/] {p}")
            result.extend(files)
        elif not any(fnmatch.fnmatch(p.name, pat) for pat in exclude):
            result.append(p)
    return result


def _scan_dir(
    directory: Path,
    recursive: bool,
    exclude: list[str],
    depth: int,
    max_depth: int = _MAX_DEPTH,
) -> list[Path]:
    """Return the files in *directory* (optionally recursive)."""
    if depth > max_depth:
        return []
    files: list[Path] = []
    try:
        entries = sorted(directory.iterdir())
    except PermissionError:
        return []
    for entry in entries:
        if entry.name.startswith("."):
            continue
        if any(fnmatch.fnmatch(entry.name, pat) for pat in exclude):
            continue
        if entry.is_file():
            files.append(entry)
        elif entry.is_dir() and recursive and depth < max_depth:
            files.extend(
                _scan_dir(entry, recursive=recursive, exclude=exclude, depth=depth + 1)
            )
    return files


# ------------------------------------------------------------------
# Output
# ------------------------------------------------------------------


def _show_summary(results: list[FileResult]) -> None:
    table = Table(title="Ingested files", show_lines=False)
    table.add_column("File", style="bold")
    table.add_column("Category")
    table.add_column("Status")
    table.add_column("Strategy")
    table.add_column("Notes", justify="right")

    for r in results:
        style = _STATUS_STYLE.get(r.processed.status, "white")
        table.add_row(
            r.processed.name,
            r.processed.category.value,
            f"[{style}]{r.processed.status.value}[/]",
            r.strategy,
            str(len(r.notes)),
        )
    console.print(table)

    for r in results:
        if r.processed.error:
            console.print(f"  [yellow]⚠[/] {r.processed.name}: {r.processed.error}")


# ------------------------------------------------------------------
# Setup helpers
# ------------------------------------------------------------------


def _open_db(db_path: Path) -> sqlite3.Connection:
    """Open (or create) the note database and run migrations."""
    conn = Database(db_path).connect()
    initialize(conn)
    return conn


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
