"""Domain models for the notesift ingestion pipeline."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping


class FileCategory(str, Enum):
    TEXT = "text"
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    CODE = "code"
    ARCHIVE = "archive"
    UNKNOWN = "unknown"


class NoteType(str, Enum):
    TEXT = "text"
    DOCUMENT = "document"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"


class ExtractionStatus(str, Enum):
    """Structured diagnostic returned next to the banner text.

    ``ok`` and ``placeholder`` are successes; the others describe why the
    banner in ``ProcessedFile.content`` is not real file content.
    """

    OK = "ok"
    PLACEHOLDER = "placeholder"
    EMPTY = "empty"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


@dataclass
class UploadedFile:
    """An uploaded file handle: name, raw bytes and declared MIME type."""

    name: str
    data: bytes
    mime_type: str = ""
    last_modified: datetime | None = None
    declared_size: int | None = None

    @property
    def size(self) -> int:
        if self.declared_size is not None:
            return max(0, self.declared_size)
        return len(self.data)

    def text(self, errors: str = "replace") -> str:
        """Decode the bytes as UTF-8 (a leading BOM is dropped)."""
        return self.data.decode("utf-8-sig", errors=errors)

    @classmethod
    def from_path(cls, path: Path | str) -> UploadedFile:
        p = Path(path)
        mime, _ = mimetypes.guess_type(p.name)
        stat = p.stat()
        return cls(
            name=p.name,
            data=p.read_bytes(),
            mime_type=mime or "",
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )


@dataclass(frozen=True)
class ProcessedFile:
    name: str
    category: FileCategory
    size_bytes: int
    content: str
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    status: ExtractionStatus = ExtractionStatus.OK
    error: str | None = None
    transcription: str | None = None

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError("size_bytes must be >= 0")
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def failed(self) -> bool:
        return self.status is ExtractionStatus.FAILED


@dataclass(frozen=True)
class SegmentedUnit:
    title: str
    content: str


@dataclass
class AudioAnalysis:
    topics: list[str]
    sentiment: str
    key_points: list[str]
    action_items: list[str]
    summary: str
    speaking_rate: float
    word_count: int
    duration: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "topics": list(self.topics),
            "sentiment": self.sentiment,
            "keyPoints": list(self.key_points),
            "actionItems": list(self.action_items),
            "summary": self.summary,
            "speakingRate": self.speaking_rate,
            "wordCount": self.word_count,
            "duration": self.duration,
        }


@dataclass
class NoteRecord:
    id: str
    title: str
    content: str
    type: NoteType
    tags: list[str]
    category: str
    created_at: datetime
    updated_at: datetime
    summary: str
    is_starred: bool = False
    transcription: str | None = None
    file_url: str | None = None
    duration: float | None = None
    source_file: str | None = None
    extracted_from: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the camelCase field names used by note stores."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "type": self.type.value,
            "tags": list(self.tags),
            "category": self.category,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "summary": self.summary,
            "isStarred": self.is_starred,
            "transcription": self.transcription,
            "fileUrl": self.file_url,
            "duration": self.duration,
            "sourceFile": self.source_file,
            "extractedFrom": self.extracted_from,
        }
