"""File type classifier — extension lookup against a fixed category table."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

from notesift.models import FileCategory

# Order matters: the first category listing an extension wins.
SUPPORTED_TYPES: Mapping[FileCategory, tuple[str, ...]] = MappingProxyType(
    {
        FileCategory.TEXT: (".txt", ".md", ".rtf"),
        FileCategory.DOCUMENT: (".pdf", ".doc", ".docx", ".odt"),
        FileCategory.SPREADSHEET: (".xls", ".xlsx", ".csv", ".ods"),
        FileCategory.PRESENTATION: (".ppt", ".pptx", ".odp"),
        FileCategory.IMAGE: (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".svg"),
        FileCategory.AUDIO: (".mp3", ".wav", ".ogg", ".m4a", ".flac", ".aac"),
        FileCategory.VIDEO: (".mp4", ".avi", ".mov", ".wmv", ".flv", ".webm", ".mkv"),
        FileCategory.CODE: (
            ".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".cpp", ".c",
            ".html", ".css", ".json", ".xml", ".yaml", ".yml",
        ),
        FileCategory.ARCHIVE: (".zip", ".rar", ".7z", ".tar", ".gz"),
    }
)

_EXT_STRIP_RE = re.compile(r"\.[^/.]+$")


def validate_table(table: Mapping[FileCategory, tuple[str, ...]] = SUPPORTED_TYPES) -> None:
    """Raise ValueError if any extension is registered under two categories."""
    seen: dict[str, FileCategory] = {}
    for category, extensions in table.items():
        for ext in extensions:
            if ext in seen:
                raise ValueError(
                    f"Extension {ext!r} is registered under both "
                    f"'{seen[ext].value}' and '{category.value}'"
                )
            seen[ext] = category


validate_table()

ALL_EXTENSIONS: frozenset[str] = frozenset(
    ext for extensions in SUPPORTED_TYPES.values() for ext in extensions
)


def file_extension(name: str) -> str:
    """Lower-cased extension including the dot, or '' when *name* has none."""
    idx = name.rfind(".")
    if idx < 0:
        return ""
    return name[idx:].lower()


def base_name(name: str) -> str:
    """*name* with its final extension removed."""
    return _EXT_STRIP_RE.sub("", name)


def classify(name: str) -> FileCategory:
    """Map a file name to its FileCategory (``unknown`` if unrecognised)."""
    ext = file_extension(name)
    if not ext:
        return FileCategory.UNKNOWN
    for category, extensions in SUPPORTED_TYPES.items():
        if ext in extensions:
            return category
    return FileCategory.UNKNOWN
