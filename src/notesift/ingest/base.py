"""Base extractor interface for all notesift file categories."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from notesift.ingest import banners
from notesift.models import ExtractionStatus, FileCategory, ProcessedFile, UploadedFile

logger = logging.getLogger(__name__)


@dataclass
class Extraction:
    """What a concrete extractor returns; wrapped into a ProcessedFile by the base."""

    content: str
    status: ExtractionStatus = ExtractionStatus.OK
    metadata: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    transcription: str | None = None

    @classmethod
    def failure(cls, content: str, cause: str) -> Extraction:
        return cls(content=content, status=ExtractionStatus.FAILED, error=cause)

    @classmethod
    def unsupported(cls, content: str) -> Extraction:
        return cls(content=content, status=ExtractionStatus.UNSUPPORTED, error=content)


def describe(exc: BaseException) -> str:
    """Human-readable failure cause for banners (falls back to the type name)."""
    return str(exc) or type(exc).__name__


class BaseExtractor(ABC):
    """Abstract base for all extractors.

    Subclasses implement ``_extract()``. Callers only ever use ``extract()``,
    which never raises: any exception escaping ``_extract()`` is logged and
    turned into a ``failed`` ProcessedFile carrying an error banner.

    Format-specific failures (corrupt PDF, protected workbook) should be caught
    inside ``_extract()`` and reported with their own banner via
    ``Extraction.failure()``.
    """

    category: ClassVar[FileCategory]

    def extract(self, upload: UploadedFile) -> ProcessedFile:
        """Extract *upload* into a ProcessedFile."""
        try:
            result = self._extract(upload)
        except Exception as exc:
            logger.warning("Extraction of %s failed: %s", upload.name, describe(exc))
            result = Extraction.failure(banners.processing_error(describe(exc)), describe(exc))
        else:
            if result.status is ExtractionStatus.FAILED:
                logger.warning("Extraction of %s failed: %s", upload.name, result.error)

        metadata: dict[str, Any] = {
            "original_name": upload.name,
            "size": upload.size,
            "last_modified": upload.last_modified,
            "mime_type": upload.mime_type,
        }
        metadata.update(result.metadata)

        return ProcessedFile(
            name=upload.name,
            category=self.category,
            size_bytes=upload.size,
            content=result.content,
            metadata=metadata,
            status=result.status,
            error=result.error,
            transcription=result.transcription,
        )

    @abstractmethod
    def _extract(self, upload: UploadedFile) -> Extraction:
        """Produce the normalized content for *upload*.

        Args:
            upload: The uploaded file (bytes, name, declared MIME type).

        Returns:
            An Extraction with banner-wrapped content and a status.
        """
