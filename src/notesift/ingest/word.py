"""Word (.docx) extraction via python-docx."""

from __future__ import annotations

import io

import docx

from notesift.ingest import banners
from notesift.ingest.base import Extraction, describe
from notesift.models import ExtractionStatus, UploadedFile


def extract_docx(upload: UploadedFile) -> Extraction:
    """Extract the whole-document text of a .docx upload.

    Body paragraphs come first, then table cells row by row. Paragraphs are
    separated by blank lines so paragraph-level structure survives into
    segmentation.
    """
    with io.BytesIO(upload.data) as stream:
        try:
            document = docx.Document(stream)
        except Exception as exc:
            return Extraction.failure(banners.word_error(upload.name, describe(exc)), describe(exc))

        paragraphs = [p.text.strip() for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    paragraphs.append(" | ".join(cells))

    text = "\n\n".join(paragraphs)
    content = banners.word_document(upload.name, upload.size, text, len(paragraphs))
    status = ExtractionStatus.OK if text else ExtractionStatus.EMPTY
    return Extraction(content=content, status=status)
