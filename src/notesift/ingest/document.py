"""Document extractor — routes PDF and Word files to their readers."""

from __future__ import annotations

from notesift.ingest import banners
from notesift.ingest.base import BaseExtractor, Extraction
from notesift.ingest.classifier import file_extension
from notesift.ingest.pdf import extract_pdf
from notesift.ingest.word import extract_docx
from notesift.models import FileCategory, UploadedFile


class DocumentExtractor(BaseExtractor):
    """.pdf → pypdf, .docx → python-docx, .doc → fixed unsupported message."""

    category = FileCategory.DOCUMENT

    def _extract(self, upload: UploadedFile) -> Extraction:
        ext = file_extension(upload.name)
        if ext == ".pdf":
            return extract_pdf(upload)
        if ext == ".docx":
            return extract_docx(upload)
        if ext == ".doc":
            return Extraction.unsupported(banners.LEGACY_DOC)
        return Extraction.unsupported(banners.unsupported_document(ext))
