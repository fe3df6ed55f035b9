"""Archive extractor — descriptive banner only; archives are never unpacked."""

from __future__ import annotations

from notesift.ingest import banners
from notesift.ingest.base import BaseExtractor, Extraction
from notesift.ingest.classifier import file_extension
from notesift.models import ExtractionStatus, FileCategory, UploadedFile


class ArchiveExtractor(BaseExtractor):
    category = FileCategory.ARCHIVE

    def _extract(self, upload: UploadedFile) -> Extraction:
        return Extraction(
            content=banners.archive(
                upload.name,
                upload.size,
                upload.mime_type or "Unknown",
                file_extension(upload.name),
            ),
            status=ExtractionStatus.PLACEHOLDER,
        )
