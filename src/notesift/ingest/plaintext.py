"""Plain text and unknown-type extractors."""

from __future__ import annotations

from notesift.ingest import banners
from notesift.ingest.base import BaseExtractor, Extraction
from notesift.models import ExtractionStatus, FileCategory, UploadedFile


class PlainTextExtractor(BaseExtractor):
    """Decode the upload as UTF-8 and return it verbatim."""

    category = FileCategory.TEXT

    def _extract(self, upload: UploadedFile) -> Extraction:
        return Extraction(content=upload.text())


class GenericExtractor(BaseExtractor):
    """Fallback for unrecognised extensions.

    Strict UTF-8 decode into a generic-file banner; anything that does not
    decode is reported as a binary file.
    """

    category = FileCategory.UNKNOWN

    def _extract(self, upload: UploadedFile) -> Extraction:
        mime = upload.mime_type or "Unknown"
        try:
            text = upload.text(errors="strict")
        except UnicodeDecodeError:
            return Extraction(
                content=banners.binary_file(upload.name, mime, upload.size, upload.last_modified),
                status=ExtractionStatus.UNSUPPORTED,
                error="binary content",
            )
        return Extraction(
            content=banners.generic_file(
                upload.name, mime, upload.size, upload.last_modified, text
            )
        )
