"""Source code extractor — language lookup plus fenced verbatim source."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from notesift.ingest import banners
from notesift.ingest.base import BaseExtractor, Extraction
from notesift.ingest.classifier import file_extension
from notesift.models import FileCategory, UploadedFile

LANGUAGES: Mapping[str, str] = MappingProxyType(
    {
        ".js": "JavaScript",
        ".ts": "TypeScript",
        ".jsx": "React JSX",
        ".tsx": "React TSX",
        ".py": "Python",
        ".java": "Java",
        ".cpp": "C++",
        ".c": "C",
        ".html": "HTML",
        ".css": "CSS",
        ".json": "JSON",
        ".xml": "XML",
        ".yaml": "YAML",
        ".yml": "YAML",
    }
)


def language_for(name: str) -> str:
    return LANGUAGES.get(file_extension(name), "Unknown")


class CodeExtractor(BaseExtractor):
    category = FileCategory.CODE

    def _extract(self, upload: UploadedFile) -> Extraction:
        language = language_for(upload.name)
        text = upload.text()
        return Extraction(
            content=banners.code_file(upload.name, language, text, upload.size),
            metadata={"language": language, "lines": len(text.split("\n"))},
        )
