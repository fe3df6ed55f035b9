"""Extractor dispatch — one extractor per FileCategory.

Category dispatch:
  text          → PlainTextExtractor
  document      → DocumentExtractor (.pdf, .docx, .doc)
  spreadsheet   → SpreadsheetExtractor (.csv, .xlsx)
  presentation  → PresentationExtractor (.pptx)
  image         → ImageExtractor
  audio         → AudioExtractor (optional speech + AI collaborators)
  video         → VideoExtractor
  code          → CodeExtractor
  archive       → ArchiveExtractor
  unknown       → GenericExtractor
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from notesift.ingest.analysis import AudioAnalyzer
from notesift.ingest.archive import ArchiveExtractor
from notesift.ingest.audio import AudioExtractor, Transcriber, VideoExtractor
from notesift.ingest.base import BaseExtractor
from notesift.ingest.classifier import classify
from notesift.ingest.code import CodeExtractor
from notesift.ingest.document import DocumentExtractor
from notesift.ingest.image import ImageExtractor
from notesift.ingest.plaintext import GenericExtractor, PlainTextExtractor
from notesift.ingest.presentation import PresentationExtractor
from notesift.ingest.spreadsheet import SpreadsheetExtractor
from notesift.models import FileCategory, ProcessedFile, UploadedFile


def build_extractors(
    transcriber: Transcriber | None = None,
    analyzer: AudioAnalyzer | None = None,
) -> Mapping[FileCategory, BaseExtractor]:
    """Return the category → extractor table.

    Raises:
        RuntimeError: If a FileCategory has no extractor.
    """
    table: dict[FileCategory, BaseExtractor] = {
        FileCategory.TEXT: PlainTextExtractor(),
        FileCategory.DOCUMENT: DocumentExtractor(),
        FileCategory.SPREADSHEET: SpreadsheetExtractor(),
        FileCategory.PRESENTATION: PresentationExtractor(),
        FileCategory.IMAGE: ImageExtractor(),
        FileCategory.AUDIO: AudioExtractor(transcriber=transcriber, analyzer=analyzer),
        FileCategory.VIDEO: VideoExtractor(),
        FileCategory.CODE: CodeExtractor(),
        FileCategory.ARCHIVE: ArchiveExtractor(),
        FileCategory.UNKNOWN: GenericExtractor(),
    }
    missing = set(FileCategory) - set(table)
    if missing:
        raise RuntimeError(f"No extractor for: {sorted(c.value for c in missing)}")
    return MappingProxyType(table)


EXTRACTORS: Mapping[FileCategory, BaseExtractor] = build_extractors()


def process_file(
    upload: UploadedFile,
    extractors: Mapping[FileCategory, BaseExtractor] = EXTRACTORS,
) -> ProcessedFile:
    """Classify *upload* and run the matching extractor. Never raises."""
    return extractors[classify(upload.name)].extract(upload)
