"""Per-file ingestion pipeline: classify → extract → segment → synthesize → store.

Files are independent: no state is shared between two files other than the
output list, so a batch may run sequentially or on a thread pool. Output
order always matches input order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

from notesift.ingest.base import BaseExtractor
from notesift.ingest.dispatch import EXTRACTORS, process_file
from notesift.ingest.segmenter import segment, select_strategy
from notesift.ingest.synthesizer import NoteSynthesizer
from notesift.models import FileCategory, NoteRecord, ProcessedFile, UploadedFile

logger = logging.getLogger(__name__)


class NoteStore(Protocol):
    """Persistence collaborator: stores a set of note records."""

    def add_notes(self, notes: Sequence[NoteRecord]) -> None: ...


@dataclass(frozen=True)
class FileResult:
    processed: ProcessedFile
    strategy: str
    notes: list[NoteRecord]


class IngestPipeline:
    """Turn uploads into notes.

    Args:
        extractors:  Category → extractor table (see ``build_extractors``).
        synthesizer: NoteSynthesizer; carries the note category.
        store:       Optional persistence collaborator. ``process()`` never
                     stores; ``process_batch()`` hands each file's notes to it
                     in input order once the whole batch has been extracted.
    """

    def __init__(
        self,
        extractors: Mapping[FileCategory, BaseExtractor] = EXTRACTORS,
        synthesizer: NoteSynthesizer | None = None,
        store: NoteStore | None = None,
    ) -> None:
        self._extractors = extractors
        self._synthesizer = synthesizer or NoteSynthesizer()
        self._store = store

    def process(self, upload: UploadedFile) -> FileResult:
        """Run one file end to end. Extraction failures end up in the notes' content."""
        processed = process_file(upload, self._extractors)
        strategy = select_strategy(processed.content)
        units = segment(processed.content, processed.name)
        notes = self._synthesizer.synthesize(processed, units)
        logger.info(
            "%s: %s (%s) → %d notes via %s",
            upload.name,
            processed.category.value,
            processed.status.value,
            len(notes),
            strategy.name,
        )
        return FileResult(processed=processed, strategy=strategy.name, notes=notes)

    def process_batch(self, uploads: Sequence[UploadedFile], workers: int = 1) -> list[FileResult]:
        """Process every upload; results are in input order.

        Storage happens on the calling thread, in input order, after
        extraction finishes.
        """
        if workers < 1:
            raise ValueError("workers must be >= 1")

        if workers == 1 or len(uploads) <= 1:
            results = [self.process(upload) for upload in uploads]
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(self.process, uploads))

        if self._store is not None:
            for result in results:
                if result.notes:
                    self._store.add_notes(result.notes)
        return results
