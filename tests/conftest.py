"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from notesift.db.connection import Database
from notesift.db.migrations import initialize
from notesift.models import UploadedFile


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".notesift.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def upload():
    """Factory for in-memory uploads: ``upload("a.txt", b"...")``."""

    def _make(name: str, data: bytes | str = b"", mime_type: str = "", **kwargs) -> UploadedFile:
        if isinstance(data, str):
            data = data.encode("utf-8")
        return UploadedFile(name=name, data=data, mime_type=mime_type, **kwargs)

    return _make
