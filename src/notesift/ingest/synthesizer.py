"""Note synthesizer — turn segmented units into NoteRecords."""

from __future__ import annotations

import random
import re
import string
import time
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, Mapping, Sequence

from notesift.ingest.classifier import base_name
from notesift.ingest.segmenter import segment
from notesift.models import FileCategory, NoteRecord, NoteType, ProcessedFile, SegmentedUnit

DEFAULT_CATEGORY = "Uploads"

_TYPE_MAP: Mapping[FileCategory, NoteType] = MappingProxyType(
    {
        FileCategory.TEXT: NoteType.TEXT,
        FileCategory.DOCUMENT: NoteType.DOCUMENT,
        FileCategory.SPREADSHEET: NoteType.DOCUMENT,
        FileCategory.PRESENTATION: NoteType.DOCUMENT,
        FileCategory.CODE: NoteType.TEXT,
        FileCategory.IMAGE: NoteType.IMAGE,
        FileCategory.AUDIO: NoteType.AUDIO,
        FileCategory.VIDEO: NoteType.VIDEO,
    }
)

_LARGE_FILE_BYTES = 10 * 1024 * 1024
_SMALL_FILE_BYTES = 1024

# (tag, keywords): a tag applies when any keyword occurs in the content.
_TOPIC_TAGS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("meeting", ("meeting", "agenda")),
    ("project", ("project", "task")),
    ("research", ("research", "study")),
    ("report", ("report", "analysis")),
    ("presentation", ("presentation", "slide")),
)

_SUMMARY_FULL_MAX = 200
_SUMMARY_CHARS = 150

_WHITESPACE_RE = re.compile(r"\s+")
_ID_ALPHABET = string.digits + string.ascii_lowercase


def note_type_for(category: FileCategory) -> NoteType:
    return _TYPE_MAP.get(category, NoteType.DOCUMENT)


def slugify(name: str) -> str:
    return _WHITESPACE_RE.sub("-", name.lower())


def smart_tags(processed: ProcessedFile) -> list[str]:
    """Size and keyword tags for *processed* (scanned over its full content)."""
    tags: list[str] = []
    if processed.size_bytes > _LARGE_FILE_BYTES:
        tags.append("large-file")
    if processed.size_bytes < _SMALL_FILE_BYTES:
        tags.append("small-file")

    content = processed.content.lower()
    for tag, keywords in _TOPIC_TAGS:
        if any(keyword in content for keyword in keywords):
            tags.append(tag)
    return tags


def summarize(content: str) -> str:
    """Extractive summary: *content* itself if short, else its first 150 chars + ``...``."""
    if len(content) <= _SUMMARY_FULL_MAX:
        return content
    return content[:_SUMMARY_CHARS].strip() + "..."


def _dedupe(tags: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(tags))


def default_note_id(index: int) -> str:
    """``file_<epoch-ms>_<index>_<9 random base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"file_{int(time.time() * 1000)}_{index}_{suffix}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NoteSynthesizer:
    """Build NoteRecords for the units segmented out of one ProcessedFile.

    Args:
        category:   Note category assigned to every record.
        id_factory: ``index → id``; defaults to :func:`default_note_id`.
        clock:      Returns the creation timestamp (UTC now by default).
    """

    def __init__(
        self,
        category: str = DEFAULT_CATEGORY,
        id_factory: Callable[[int], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.category = category
        self._id_factory = id_factory or default_note_id
        self._clock = clock or _utcnow

    def notes_from_file(self, processed: ProcessedFile) -> list[NoteRecord]:
        """Segment *processed* and synthesize one note per unit."""
        return self.synthesize(processed, segment(processed.content, processed.name))

    def synthesize(
        self, processed: ProcessedFile, units: Sequence[SegmentedUnit]
    ) -> list[NoteRecord]:
        """Return exactly ``len(units)`` notes, all sharing ``source_file``."""
        if not units:
            return []

        now = self._clock()
        note_type = note_type_for(processed.category)
        base = base_name(processed.name)
        tags = _dedupe(
            [processed.category.value, "uploaded", "extracted", slugify(base)]
            + smart_tags(processed)
        )
        transcription = (
            processed.transcription
            if processed.category in (FileCategory.AUDIO, FileCategory.VIDEO)
            else None
        )
        total = len(units)

        return [
            NoteRecord(
                id=self._id_factory(index),
                title=unit.title,
                content=unit.content,
                type=note_type,
                tags=list(tags),
                category=self.category,
                created_at=now,
                updated_at=now,
                summary=summarize(unit.content),
                transcription=transcription,
                file_url=processed.metadata.get("thumbnail"),
                duration=processed.metadata.get("duration"),
                source_file=processed.name,
                extracted_from=(
                    f"{base} ({index + 1} of {total})" if total > 1 else f"{base} (single note)"
                ),
            )
            for index, unit in enumerate(units)
        ]
