"""Tests for the plain text, code, archive, generic and presentation extractors."""

from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO

import pytest
from pptx import Presentation

from notesift.ingest.archive import ArchiveExtractor
from notesift.ingest.code import CodeExtractor, language_for
from notesift.ingest.plaintext import GenericExtractor, PlainTextExtractor
from notesift.ingest.presentation import PresentationExtractor
from notesift.models import ExtractionStatus, FileCategory


def _pptx_bytes(slides: list[tuple[str, str]]) -> bytes:
    deck = Presentation()
    for title, body in slides:
        slide = deck.slides.add_slide(deck.slide_layouts[1])
        slide.shapes.title.text = title
        slide.placeholders[1].text = body
    buf = BytesIO()
    deck.save(buf)
    return buf.getvalue()


# ------------------------------------------------------------------
# Plain text
# ------------------------------------------------------------------


def test_plaintext_verbatim(upload):
    processed = PlainTextExtractor().extract(upload("a.txt", "line one\nline two"))
    assert processed.content == "line one\nline two"
    assert processed.category is FileCategory.TEXT
    assert processed.status is ExtractionStatus.OK


def test_plaintext_invalid_utf8_is_replaced(upload):
    processed = PlainTextExtractor().extract(upload("a.txt", b"caf\xe9"))
    assert processed.content == "caf\ufffd"


def test_metadata_carries_upload_fields(upload):
    ts = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    processed = PlainTextExtractor().extract(
        upload("a.txt", "x", "text/plain", last_modified=ts)
    )
    assert processed.metadata["original_name"] == "a.txt"
    assert processed.metadata["size"] == 1
    assert processed.metadata["mime_type"] == "text/plain"
    assert processed.metadata["last_modified"] == ts
    with pytest.raises(TypeError):
        processed.metadata["size"] = 2  # type: ignore[index]


# ------------------------------------------------------------------
# Code
# ------------------------------------------------------------------


def test_code_fenced_with_language(upload):
    source = "def main():\n    return 1"
    processed = CodeExtractor().extract(upload("main.py", source))

    assert processed.metadata["language"] == "Python"
    assert processed.metadata["lines"] == 2
    assert "• Language: Python" in processed.content
    assert "• Lines: 2" in processed.content
    assert f"```python\n{source}\n```" in processed.content


@pytest.mark.parametrize(
    "name, language",
    [("app.tsx", "React TSX"), ("x.cpp", "C++"), ("c.yml", "YAML"), ("y.rb", "Unknown")],
)
def test_language_for(name, language):
    assert language_for(name) == language


# ------------------------------------------------------------------
# Archive / generic
# ------------------------------------------------------------------


def test_archive_is_placeholder(upload):
    processed = ArchiveExtractor().extract(upload("bundle.zip", b"PK\x03\x04", "application/zip"))
    assert processed.status is ExtractionStatus.PLACEHOLDER
    assert "• Format: .zip" in processed.content
    assert "• Type: application/zip" in processed.content


def test_generic_text_preview(upload):
    processed = GenericExtractor().extract(upload("notes.log", "x" * 600))
    assert processed.status is ExtractionStatus.OK
    assert processed.content.startswith("[Generic File: notes.log]")
    assert "x" * 500 + "..." in processed.content
    assert "x" * 501 not in processed.content
    assert "• Last Modified: Unknown" in processed.content


def test_generic_binary(upload):
    processed = GenericExtractor().extract(upload("blob.bin", b"\xff\xfe\x00\x81"))
    assert processed.status is ExtractionStatus.UNSUPPORTED
    assert processed.error == "binary content"
    assert processed.content.startswith("[Binary File: blob.bin]")


# ------------------------------------------------------------------
# Presentation
# ------------------------------------------------------------------


def test_pptx_slide_blocks(upload):
    data = _pptx_bytes([("Roadmap", "Ship v2 in Q3"), ("Risks", "Hiring is slow")])
    processed = PresentationExtractor().extract(upload("deck.pptx", data))

    assert processed.status is ExtractionStatus.OK
    assert processed.metadata["slides"] == 2
    assert "--- Slide 1 ---\nRoadmap\nShip v2 in Q3" in processed.content
    assert "--- Slide 2 ---\nRisks\nHiring is slow" in processed.content


def test_pptx_without_text(upload):
    deck = Presentation()
    deck.slides.add_slide(deck.slide_layouts[6])
    buf = BytesIO()
    deck.save(buf)
    processed = PresentationExtractor().extract(upload("blank.pptx", buf.getvalue()))
    assert processed.status is ExtractionStatus.EMPTY
    assert processed.metadata["slides"] == 1


def test_legacy_ppt_unsupported(upload):
    processed = PresentationExtractor().extract(upload("old.ppt", b"\xd0\xcf"))
    assert processed.status is ExtractionStatus.UNSUPPORTED
    assert "Please convert to .pptx format" in processed.content


def test_corrupt_pptx(upload):
    processed = PresentationExtractor().extract(upload("broken.pptx", b"nope"))
    assert processed.failed
