"""PDF extraction — page-based text via pypdf."""

from __future__ import annotations

import io
import logging

import pypdf

from notesift.ingest import banners
from notesift.ingest.base import Extraction, describe
from notesift.models import ExtractionStatus, UploadedFile

logger = logging.getLogger(__name__)

_PAGE_FAILED = "[Page content could not be extracted]"


def extract_pdf(upload: UploadedFile) -> Extraction:
    """Extract all page text from the PDF in *upload*.

    Strategy:
    - Open the bytes with ``pypdf.PdfReader``; encrypted files are tried with
      an empty password and otherwise reported as protected.
    - Each page with text becomes a ``--- Page i ---`` block. A page that
      fails to extract is kept as a placeholder block; the rest of the
      document is still processed.
    - Pages that yield no text (scanned images, etc.) are skipped. If no page
      yields text the banner explains that the PDF looks image-only.
    - Status is OK only when some page yielded text. Otherwise it is FAILED
      when any page raised, else EMPTY.
    """
    stream = io.BytesIO(upload.data)
    try:
        try:
            reader = pypdf.PdfReader(stream)
            if reader.is_encrypted and not reader.decrypt(""):
                raise ValueError("PDF is password-protected")
            pages = list(reader.pages)
        except Exception as exc:
            return Extraction.failure(banners.pdf_error(upload.name, describe(exc)), describe(exc))

        parts: list[str] = []
        has_text = False
        has_images = False
        failed_pages = 0
        for number, page in enumerate(pages, start=1):
            try:
                page_text = page.extract_text() or ""
            except Exception as exc:
                logger.debug("Page %d of %s failed: %s", number, upload.name, exc)
                failed_pages += 1
                parts.append(f"--- Page {number} ---\n{_PAGE_FAILED}")
                continue
            if page_text.strip():
                has_text = True
                parts.append(f"--- Page {number} ---\n{page_text.strip()}")
            if not has_images and _page_has_images(page):
                has_images = True

        text = "\n\n".join(parts)
        content = banners.pdf_document(
            upload.name, len(pages), has_text, has_images, upload.size, text
        )
        metadata = {"pages": len(pages), "failed_pages": failed_pages}
        if has_text:
            return Extraction(content=content, metadata=metadata)
        if failed_pages:
            cause = f"No page text could be extracted ({failed_pages} of {len(pages)} pages failed)"
            return Extraction(
                content=content, status=ExtractionStatus.FAILED, metadata=metadata, error=cause
            )
        return Extraction(content=content, status=ExtractionStatus.EMPTY, metadata=metadata)
    finally:
        stream.close()


def _page_has_images(page: object) -> bool:
    try:
        return len(page.images) > 0  # type: ignore[attr-defined]
    except Exception:
        return False
