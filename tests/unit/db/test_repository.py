"""Tests for NoteRepository."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

import pytest

from notesift.db.repository import NoteRepository
from notesift.models import NoteRecord, NoteType

_T0 = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def repo(tmp_db):
    return NoteRepository(tmp_db)


def _note(id="n1", source="doc.md", title="Title", created=_T0, **kwargs):
    return NoteRecord(
        id=id,
        title=title,
        content=kwargs.pop("content", "body"),
        type=kwargs.pop("type", NoteType.TEXT),
        tags=kwargs.pop("tags", ["text", "uploaded"]),
        category=kwargs.pop("category", "Uploads"),
        created_at=created,
        updated_at=created,
        summary=kwargs.pop("summary", "body"),
        source_file=source,
        **kwargs,
    )


def test_add_and_get_note(repo):
    repo.add_notes([_note(duration=12.5, transcription="hi", file_url="data:x", is_starred=True)])
    note = repo.get_note("n1")

    assert note is not None
    assert note.title == "Title"
    assert note.type is NoteType.TEXT
    assert note.tags == ["text", "uploaded"]
    assert note.created_at == _T0
    assert note.duration == 12.5
    assert note.transcription == "hi"
    assert note.file_url == "data:x"
    assert note.is_starred is True


def test_get_note_not_found(repo):
    assert repo.get_note("missing") is None


def test_list_notes_empty(repo):
    assert repo.list_notes() == []


def test_list_notes_ordered_by_creation(repo):
    later = datetime(2024, 3, 2, tzinfo=timezone.utc)
    repo.add_notes([_note(id="b", created=later), _note(id="a")])
    assert [n.id for n in repo.list_notes()] == ["a", "b"]


def test_list_notes_by_source_keeps_insertion_order(repo):
    repo.add_notes([_note(id="x2", source="a.md"), _note(id="x1", source="a.md")])
    repo.add_notes([_note(id="y", source="b.md")])
    assert [n.id for n in repo.list_notes_by_source("a.md")] == ["x2", "x1"]


def test_count_notes(repo):
    repo.add_notes([_note(id="1"), _note(id="2"), _note(id="3", source="other.md")])
    assert repo.count_notes() == 3
    assert repo.count_notes("doc.md") == 2


def test_delete_by_source(repo):
    repo.add_notes([_note(id="1"), _note(id="2"), _note(id="3", source="keep.md")])
    assert repo.delete_by_source("doc.md") == 2
    assert [n.id for n in repo.list_notes()] == ["3"]


def test_duplicate_id_rolls_back_batch(repo):
    repo.add_notes([_note(id="dup")])
    with pytest.raises(sqlite3.IntegrityError):
        repo.add_notes([_note(id="fresh"), _note(id="dup")])
    assert repo.get_note("fresh") is None
