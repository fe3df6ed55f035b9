"""notesift database layer."""

from notesift.db.connection import Database
from notesift.db.migrations import MIGRATIONS, initialize, run_migrations
from notesift.db.repository import NoteRepository

__all__ = [
    "Database",
    "MIGRATIONS",
    "NoteRepository",
    "initialize",
    "run_migrations",
]
