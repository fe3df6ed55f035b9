"""notesift ingest pipeline — classifier, extractors, segmentation, note synthesis."""

from notesift.ingest.base import BaseExtractor, Extraction
from notesift.ingest.classifier import SUPPORTED_TYPES, classify
from notesift.ingest.dispatch import EXTRACTORS, build_extractors, process_file
from notesift.ingest.pipeline import FileResult, IngestPipeline, NoteStore
from notesift.ingest.segmenter import STRATEGIES, segment
from notesift.ingest.synthesizer import NoteSynthesizer

__all__ = [
    "BaseExtractor",
    "EXTRACTORS",
    "Extraction",
    "FileResult",
    "IngestPipeline",
    "NoteStore",
    "NoteSynthesizer",
    "STRATEGIES",
    "SUPPORTED_TYPES",
    "build_extractors",
    "classify",
    "process_file",
    "segment",
]
