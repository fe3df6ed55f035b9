"""Audio and video extractors — duration estimate plus transcription.

Real transcription is delegated to a speech collaborator
(``Callable[[UploadedFile], str]``). Without one, or when it fails, the
extractor emits a simulated transcription banner describing the file.
Video is always simulated.

Security / safety for the default LiteLLM transcriber:
- File size checked BEFORE any API call: > 25 MB → refused.
- API key absence detected early with a clear error message.
"""

from __future__ import annotations

import io
import logging
from typing import Any, Callable

from notesift import llm_client
from notesift.ingest import banners
from notesift.ingest.analysis import AudioAnalyzer
from notesift.ingest.base import BaseExtractor, Extraction
from notesift.models import ExtractionStatus, FileCategory, UploadedFile

logger = logging.getLogger(__name__)

Transcriber = Callable[[UploadedFile], str]

MAX_TRANSCRIPTION_BYTES = 25 * 1024 * 1024  # 25 MB
_WHISPER_MODEL = "openai/whisper-1"

_MIN_DURATION = 1.0
_MAX_DURATION = 7200.0  # 2 hours
_DEFAULT_BITRATE = 24_000

# Checked in order against the declared MIME type.
_BITRATES: tuple[tuple[str, int], ...] = (
    ("webm", 32_000),
    ("mp3", 128_000),
    ("mpeg", 128_000),
    ("wav", 1_411_000),
    ("m4a", 256_000),
    ("mp4", 256_000),
)

_LANGUAGE_WORDS: dict[str, tuple[str, ...]] = {
    "en": ("the", "and", "for", "with", "this", "that", "have", "will"),
    "es": ("el", "la", "de", "que", "y", "en", "un", "es"),
    "fr": ("le", "la", "de", "et", "en", "un", "est", "pour"),
    "de": ("der", "die", "das", "und", "in", "den", "von", "mit"),
}

VIDEO_PLACEHOLDER_THUMBNAIL = (
    "data:image/svg+xml;base64,PHN2ZyB3aWR0aD0iMTUwIiBoZWlnaHQ9IjE1MCIgdmlld0JveD0iMCAwIDE1MCAx"
    "NTAiIGZpbGw9Im5vbmUiIHhtbG5zPSJodHRwOi8vd3d3LnczLm9yZy8yMDAwL3N2ZyI+CjxyZWN0IHdpZHRoPSIx"
    "NTAiIGhlaWdodD0iMTUwIiBmaWxsPSIjMzMzIi8+Cjx0ZXh0IHg9Ijc1IiB5PSI3NSIgZmlsbD0iI2ZmZiIgdGV4"
    "dC1hbmNob3I9Im1pZGRsZSIgZG9taW5hbnQtYmFzZWxpbmU9Im1pZGRsZSI+VmlkZW88L3RleHQ+Cjwvc3ZnPg=="
)


def bitrate_for(mime_type: str) -> int:
    mime = mime_type.lower()
    for marker, bitrate in _BITRATES:
        if marker in mime:
            return bitrate
    return _DEFAULT_BITRATE


def estimate_duration(size: int, mime_type: str) -> float:
    """Seconds of media implied by *size* bytes at the MIME type's typical bitrate.

    Clamped to ``[1, 7200]``.
    """
    seconds = (size * 8) / bitrate_for(mime_type)
    return max(_MIN_DURATION, min(seconds, _MAX_DURATION))


def detect_language(text: str) -> str:
    """Best stop-word match among en/es/fr/de; ties keep the earlier language."""
    lowered = text.lower()
    best, best_score = "en", 0
    for lang, words in _LANGUAGE_WORDS.items():
        score = sum(1 for word in words if word in lowered)
        if score > best_score:
            best, best_score = lang, score
    return best


def transcribe_with_litellm(
    upload: UploadedFile,
    model: str = _WHISPER_MODEL,
    max_bytes: int = MAX_TRANSCRIPTION_BYTES,
) -> str:
    """Default speech collaborator: Whisper via LiteLLM.

    Raises:
        ValueError: If the file exceeds *max_bytes* (the API limit by default).
        EnvironmentError: If the provider API key is not set.
    """
    if upload.size > max_bytes:
        raise ValueError(
            f"Audio file '{upload.name}' exceeds the {max_bytes / (1024 * 1024):.0f} MB limit "
            f"({upload.size / (1024 * 1024):.1f} MB). "
            "Split the file and ingest each part separately."
        )
    llm_client.validate_api_key(model)
    with io.BytesIO(upload.data) as audio:
        audio.name = upload.name
        return llm_client.transcribe(model, audio)


class AudioExtractor(BaseExtractor):
    """Transcribe an audio upload, or describe it when no transcript is available.

    Args:
        transcriber: Speech collaborator; ``None`` means simulated output only.
        analyzer:    Optional AudioAnalyzer run over real transcripts.
    """

    category = FileCategory.AUDIO

    def __init__(
        self,
        transcriber: Transcriber | None = None,
        analyzer: AudioAnalyzer | None = None,
    ) -> None:
        self.transcriber = transcriber
        self.analyzer = analyzer

    def _extract(self, upload: UploadedFile) -> Extraction:
        duration = estimate_duration(upload.size, upload.mime_type)
        transcript = self._transcribe(upload)

        if not transcript:
            placeholder = banners.audio_placeholder(
                upload.name, upload.size, duration, upload.mime_type or "Unknown"
            )
            return Extraction(
                content=placeholder,
                status=ExtractionStatus.PLACEHOLDER,
                metadata={"duration": duration},
                transcription=placeholder,
            )

        metadata: dict[str, Any] = {
            "duration": duration,
            "language": detect_language(transcript),
        }
        if self.analyzer is not None:
            analysis = self.analyzer.analyze(transcript, duration)
            if analysis is not None:
                metadata["analysis"] = analysis.to_dict()
                metadata["sentiment"] = analysis.sentiment
        return Extraction(content=transcript, metadata=metadata, transcription=transcript)

    def _transcribe(self, upload: UploadedFile) -> str:
        if self.transcriber is None:
            return ""
        try:
            return (self.transcriber(upload) or "").strip()
        except Exception as exc:
            logger.warning("Transcription of %s failed, using placeholder: %s", upload.name, exc)
            return ""


class VideoExtractor(BaseExtractor):
    """Simulated video analysis with a fixed placeholder thumbnail."""

    category = FileCategory.VIDEO

    def _extract(self, upload: UploadedFile) -> Extraction:
        duration = estimate_duration(upload.size, upload.mime_type)
        content = banners.video_placeholder(
            upload.name, upload.size, duration, upload.mime_type or "Unknown"
        )
        return Extraction(
            content=content,
            status=ExtractionStatus.PLACEHOLDER,
            metadata={"duration": duration, "thumbnail": VIDEO_PLACEHOLDER_THUMBNAIL},
            transcription=content,
        )
