"""Presentation extractor — slide text from .pptx via python-pptx."""

from __future__ import annotations

import io

from pptx import Presentation

from notesift.ingest import banners
from notesift.ingest.base import BaseExtractor, Extraction, describe
from notesift.ingest.classifier import file_extension
from notesift.models import ExtractionStatus, FileCategory, UploadedFile


class PresentationExtractor(BaseExtractor):
    """One ``--- Slide i ---`` block per slide that carries text."""

    category = FileCategory.PRESENTATION

    def _extract(self, upload: UploadedFile) -> Extraction:
        ext = file_extension(upload.name)
        if ext != ".pptx":
            return Extraction.unsupported(banners.unsupported_presentation(upload.name, ext))

        with io.BytesIO(upload.data) as stream:
            try:
                deck = Presentation(stream)
            except Exception as exc:
                return Extraction.failure(
                    banners.presentation_error(upload.name, describe(exc)), describe(exc)
                )

            blocks: list[str] = []
            slide_count = 0
            for number, slide in enumerate(deck.slides, start=1):
                slide_count += 1
                lines: list[str] = []
                for shape in slide.shapes:
                    if not shape.has_text_frame:
                        continue
                    for para in shape.text_frame.paragraphs:
                        line = "".join(run.text for run in para.runs).strip()
                        if line:
                            lines.append(line)
                if lines:
                    blocks.append(f"--- Slide {number} ---\n" + "\n".join(lines))

        text = "\n\n".join(blocks)
        return Extraction(
            content=banners.presentation(upload.name, slide_count, upload.size, text),
            status=ExtractionStatus.OK if text else ExtractionStatus.EMPTY,
            metadata={"slides": slide_count},
        )
