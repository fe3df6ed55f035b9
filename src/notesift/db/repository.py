"""Repository for stored notes — the SQLite persistence collaborator.

Implements the ``NoteStore`` protocol used by the ingest pipeline.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import Sequence

from notesift.models import NoteRecord, NoteType

_COLUMNS = (
    "id, title, content, type, tags, category, created_at, updated_at, summary, "
    "is_starred, transcription, file_url, duration, source_file, extracted_from"
)


class NoteRepository:
    """Data access layer for note records.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see notesift.db.migrations.initialize).
        """
        self._conn = conn

    def add_notes(self, notes: Sequence[NoteRecord]) -> None:
        """Insert *notes* in one transaction.

        Raises:
            sqlite3.IntegrityError: If a note id already exists; nothing is stored.
        """
        with self._conn:
            self._conn.executemany(
                f"INSERT INTO notes ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [_note_to_row(n) for n in notes],
            )

    def get_note(self, note_id: str) -> NoteRecord | None:
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM notes WHERE id = ?", (note_id,)
        ).fetchone()
        return _row_to_note(row) if row else None

    def list_notes(self) -> list[NoteRecord]:
        """Return all notes, oldest first."""
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM notes ORDER BY created_at, rowid"
        ).fetchall()
        return [_row_to_note(r) for r in rows]

    def list_notes_by_source(self, source_file: str) -> list[NoteRecord]:
        """Return the notes extracted from *source_file*, in insertion order."""
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM notes WHERE source_file = ? ORDER BY rowid",
            (source_file,),
        ).fetchall()
        return [_row_to_note(r) for r in rows]

    def count_notes(self, source_file: str | None = None) -> int:
        if source_file is None:
            return self._conn.execute("SELECT COUNT(*) FROM notes").fetchone()[0]
        return self._conn.execute(
            "SELECT COUNT(*) FROM notes WHERE source_file = ?", (source_file,)
        ).fetchone()[0]

    def delete_by_source(self, source_file: str) -> int:
        """Delete every note from *source_file*. Returns the number deleted."""
        with self._conn:
            cur = self._conn.execute("DELETE FROM notes WHERE source_file = ?", (source_file,))
        return cur.rowcount


# ------------------------------------------------------------------
# Row ↔ model helpers
# ------------------------------------------------------------------


def _note_to_row(note: NoteRecord) -> tuple:
    return (
        note.id,
        note.title,
        note.content,
        note.type.value,
        json.dumps(note.tags),
        note.category,
        note.created_at.isoformat(),
        note.updated_at.isoformat(),
        note.summary,
        int(note.is_starred),
        note.transcription,
        note.file_url,
        note.duration,
        note.source_file,
        note.extracted_from,
    )


def _row_to_note(row: sqlite3.Row) -> NoteRecord:
    return NoteRecord(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        type=NoteType(row["type"]),
        tags=json.loads(row["tags"]),
        category=row["category"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        summary=row["summary"],
        is_starred=bool(row["is_starred"]),
        transcription=row["transcription"],
        file_url=row["file_url"],
        duration=row["duration"],
        source_file=row["source_file"],
        extracted_from=row["extracted_from"],
    )
