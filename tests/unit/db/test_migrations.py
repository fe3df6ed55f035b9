"""Tests for the schema migration runner and connection setup."""

from __future__ import annotations

from notesift.db.connection import Database
from notesift.db.migrations import MIGRATIONS, initialize, run_migrations


def _tables(conn) -> set[str]:
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    return {r[0] for r in rows}


def test_initialize_creates_tables(tmp_db):
    assert {"schema_version", "notes"} <= _tables(tmp_db)


def test_schema_version_recorded(tmp_db):
    version = tmp_db.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
    assert version == MIGRATIONS[-1][0]


def test_run_migrations_idempotent(tmp_db):
    run_migrations(tmp_db)
    run_migrations(tmp_db)
    count = tmp_db.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0]
    assert count == len(MIGRATIONS)


def test_connection_pragmas(tmp_path):
    conn = Database(tmp_path / "x.db").connect()
    try:
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
    finally:
        conn.close()


def test_context_manager_closes(tmp_path):
    db = Database(tmp_path / "ctx.db")
    with db as conn:
        initialize(conn)
        assert "notes" in _tables(conn)
    assert db._conn is None
