"""Tests for the document extractor: PDF, Word and legacy formats."""

from __future__ import annotations

from io import BytesIO
from unittest.mock import MagicMock, patch

import docx
import pytest

from notesift.ingest.banners import LEGACY_DOC
from notesift.ingest.document import DocumentExtractor
from notesift.ingest.dispatch import process_file
from notesift.models import ExtractionStatus, FileCategory


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _mock_reader(page_texts: list[str], encrypted: bool = False):
    """Return a mock PdfReader with pages that yield the given texts."""
    pages = []
    for text in page_texts:
        page = MagicMock()
        page.extract_text.return_value = text
        page.images = []
        pages.append(page)
    reader = MagicMock()
    reader.is_encrypted = encrypted
    reader.pages = pages
    return reader


def _docx_bytes(paragraphs: list[str], table: list[list[str]] | None = None) -> bytes:
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    if table:
        t = document.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                t.cell(r, c).text = value
    buf = BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture
def extractor():
    return DocumentExtractor()


# ------------------------------------------------------------------
# Legacy / unsupported
# ------------------------------------------------------------------


def test_legacy_doc_returns_fixed_message(upload):
    processed = process_file(upload("old.doc", b"\xd0\xcf\x11\xe0 binary"))
    assert processed.category is FileCategory.DOCUMENT
    assert processed.content == LEGACY_DOC
    assert processed.status is ExtractionStatus.UNSUPPORTED


def test_odt_is_unsupported(extractor, upload):
    processed = extractor.extract(upload("notes.odt", b"PK"))
    assert processed.status is ExtractionStatus.UNSUPPORTED
    assert ".odt" in processed.content


# ------------------------------------------------------------------
# PDF
# ------------------------------------------------------------------


def test_pdf_pages_become_blocks(extractor, upload):
    with patch("notesift.ingest.pdf.pypdf") as mock_pypdf:
        mock_pypdf.PdfReader.return_value = _mock_reader(["First page.", "Second page."])
        processed = extractor.extract(upload("doc.pdf", b"%PDF-1.4"))

    assert processed.status is ExtractionStatus.OK
    assert processed.metadata["pages"] == 2
    assert "• Total Pages: 2" in processed.content
    assert "--- Page 1 ---\nFirst page." in processed.content
    assert "--- Page 2 ---\nSecond page." in processed.content


def test_pdf_blank_pages_skipped(extractor, upload):
    with patch("notesift.ingest.pdf.pypdf") as mock_pypdf:
        mock_pypdf.PdfReader.return_value = _mock_reader(["", "  ", "Real content here."])
        processed = extractor.extract(upload("doc.pdf", b"%PDF-1.4"))

    assert "--- Page 1 ---" not in processed.content
    assert "--- Page 3 ---\nReal content here." in processed.content


def test_pdf_without_text_is_empty(extractor, upload):
    with patch("notesift.ingest.pdf.pypdf") as mock_pypdf:
        mock_pypdf.PdfReader.return_value = _mock_reader(["", ""])
        processed = extractor.extract(upload("scan.pdf", b"%PDF-1.4"))

    assert processed.status is ExtractionStatus.EMPTY
    assert "only images or scanned content" in processed.content


def test_pdf_failing_page_keeps_placeholder(extractor, upload):
    reader = _mock_reader(["Good page.", "ignored"])
    reader.pages[1].extract_text.side_effect = RuntimeError("bad stream")
    with patch("notesift.ingest.pdf.pypdf") as mock_pypdf:
        mock_pypdf.PdfReader.return_value = reader
        processed = extractor.extract(upload("doc.pdf", b"%PDF-1.4"))

    assert processed.status is ExtractionStatus.OK
    assert "--- Page 2 ---\n[Page content could not be extracted]" in processed.content


def test_pdf_all_pages_failing_is_failed(extractor, upload):
    reader = _mock_reader(["ignored", "ignored"])
    for page in reader.pages:
        page.extract_text.side_effect = RuntimeError("bad stream")
    with patch("notesift.ingest.pdf.pypdf") as mock_pypdf:
        mock_pypdf.PdfReader.return_value = reader
        processed = extractor.extract(upload("doc.pdf", b"%PDF-1.4"))

    assert processed.status is ExtractionStatus.FAILED
    assert processed.error == "No page text could be extracted (2 of 2 pages failed)"
    assert processed.metadata["failed_pages"] == 2
    assert "• Text Content: No" in processed.content


def test_pdf_password_protected(extractor, upload):
    reader = _mock_reader(["secret"], encrypted=True)
    reader.decrypt.return_value = 0
    with patch("notesift.ingest.pdf.pypdf") as mock_pypdf:
        mock_pypdf.PdfReader.return_value = reader
        processed = extractor.extract(upload("locked.pdf", b"%PDF-1.4"))

    assert processed.failed
    assert processed.error == "PDF is password-protected"
    assert processed.content.startswith("[PDF File: locked.pdf]")


def test_pdf_corrupt_bytes_fail_without_raising(extractor, upload):
    processed = extractor.extract(upload("broken.pdf", b"not a pdf at all"))
    assert processed.failed
    assert "❌ **Extraction Error:**" in processed.content


# ------------------------------------------------------------------
# Word
# ------------------------------------------------------------------


def test_docx_paragraphs_and_tables(extractor, upload):
    data = _docx_bytes(["First paragraph.", "", "Second paragraph."], table=[["a", "b"], ["c", "d"]])
    processed = extractor.extract(upload("memo.docx", data))

    assert processed.status is ExtractionStatus.OK
    assert "• Paragraphs: 4" in processed.content
    assert "First paragraph.\n\nSecond paragraph.\n\na | b\n\nc | d" in processed.content


def test_docx_empty_document(extractor, upload):
    processed = extractor.extract(upload("blank.docx", _docx_bytes([])))
    assert processed.status is ExtractionStatus.EMPTY
    assert "appears to be empty" in processed.content


def test_docx_corrupt_bytes(extractor, upload):
    processed = extractor.extract(upload("broken.docx", b"garbage"))
    assert processed.failed
    assert processed.content.startswith("[Word Document: broken.docx]")
