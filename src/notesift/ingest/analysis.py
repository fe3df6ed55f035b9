"""Audio transcript analysis via an AI collaborator, with heuristic fallbacks.

The collaborator is any ``Callable[[str], str]``: it receives the analysis
prompt and returns free text. The response is parsed as JSON with the fields
``topics, sentiment, keyPoints, actionItems, summary, speakingRate``. If the
response is not JSON, the raw text becomes the summary and every other field
is computed heuristically from the transcript. If the collaborator itself
fails, the whole analysis is heuristic.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable

from notesift import llm_client
from notesift.models import AudioAnalysis

logger = logging.getLogger(__name__)

Completer = Callable[[str], str]

_ANALYSIS_PROMPT = """\
Analyze this audio transcription and provide insights:

Transcription: "{transcription}"

Please provide:
1. Main topics discussed (3-5 key topics)
2. Overall sentiment (positive/negative/neutral)
3. Key points made (bullet points)
4. Action items mentioned (if any)
5. A concise summary (2-3 sentences)
6. Estimated speaking rate and word count

Format as JSON with these fields: topics, sentiment, keyPoints, actionItems, summary, \
speakingRate, wordCount"""

_DEFAULT_MODEL = "openai/gpt-4o-mini"
_DEFAULT_MAX_TOKENS = 500
_MIN_TRANSCRIPT_CHARS = 10

_TOPIC_KEYWORDS = (
    "meeting", "project", "work", "business", "discussion", "planning",
    "review", "analysis", "strategy", "development", "research", "study",
    "presentation", "training", "interview", "conversation", "brainstorming",
)
_POSITIVE_WORDS = ("good", "great", "excellent", "amazing", "wonderful", "success", "achieve", "improve")
_NEGATIVE_WORDS = ("bad", "terrible", "awful", "problem", "issue", "fail", "difficult", "challenge")
_ACTION_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (r"need to\s+(\w+)", r"should\s+(\w+)", r"must\s+(\w+)", r"will\s+(\w+)", r"going to\s+(\w+)")
)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_SENTIMENTS = frozenset({"positive", "negative", "neutral"})


# ------------------------------------------------------------------
# Heuristics
# ------------------------------------------------------------------


def word_count(text: str) -> int:
    return len(text.split(" "))


def extract_topics(text: str) -> list[str]:
    lowered = text.lower()
    found = [topic for topic in _TOPIC_KEYWORDS if topic in lowered]
    return found[:3] if found else ["General discussion"]


def analyze_sentiment(text: str) -> str:
    lowered = text.lower()
    positive = sum(1 for word in _POSITIVE_WORDS if word in lowered)
    negative = sum(1 for word in _NEGATIVE_WORDS if word in lowered)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def extract_key_points(text: str) -> list[str]:
    sentences = [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if len(s.strip()) > 10]
    return sentences[:5] or ["Content analyzed for key insights"]


def extract_action_items(text: str) -> list[str]:
    items: list[str] = []
    for pattern in _ACTION_PATTERNS:
        items.extend(m.group(0) for m in list(pattern.finditer(text))[:3])
    return items or ["No specific action items identified"]


def speaking_rate(text: str, duration: float) -> float:
    """Words per minute over *duration* seconds."""
    if duration <= 0:
        return 0
    return round(word_count(text) / (duration / 60))


# ------------------------------------------------------------------
# Analyzer
# ------------------------------------------------------------------


class AudioAnalyzer:
    """Analyse an audio transcript.

    Args:
        complete:   AI collaborator; defaults to LiteLLM completion with *model*.
        model:      LiteLLM model string for the default collaborator.
        max_tokens: Maximum tokens in the collaborator's response.
    """

    def __init__(
        self,
        complete: Completer | None = None,
        model: str = _DEFAULT_MODEL,
        max_tokens: int = _DEFAULT_MAX_TOKENS,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._complete = complete or self._litellm_complete

    def analyze(self, transcription: str, duration: float) -> AudioAnalysis | None:
        """Return an AudioAnalysis, or None when the transcript is too short."""
        if len(transcription) <= _MIN_TRANSCRIPT_CHARS:
            return None

        prompt = _ANALYSIS_PROMPT.format(transcription=transcription)
        try:
            response = self._complete(prompt)
        except Exception as exc:
            logger.warning("Audio analysis call failed, using heuristics: %s", exc)
            return self._heuristic(transcription, duration)

        if not response or not response.strip():
            return self._heuristic(transcription, duration)

        parsed = _parse_json(response)
        if parsed is None:
            return self._heuristic(transcription, duration, summary=response.strip())
        return self._from_response(parsed, transcription, duration)

    # ------------------------------------------------------------------

    def _litellm_complete(self, prompt: str) -> str:
        return llm_client.complete(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self._max_tokens,
        )

    @staticmethod
    def _heuristic(transcription: str, duration: float, summary: str | None = None) -> AudioAnalysis:
        words = word_count(transcription)
        return AudioAnalysis(
            topics=extract_topics(transcription),
            sentiment=analyze_sentiment(transcription),
            key_points=extract_key_points(transcription),
            action_items=extract_action_items(transcription),
            summary=summary
            or f"Audio recording analyzed with {words} words over {round(duration)} seconds.",
            speaking_rate=speaking_rate(transcription, duration),
            word_count=words,
            duration=duration,
        )

    @staticmethod
    def _from_response(data: dict[str, Any], transcription: str, duration: float) -> AudioAnalysis:
        sentiment = str(data.get("sentiment") or "neutral").lower()
        rate = data.get("speakingRate")
        if not isinstance(rate, (int, float)) or isinstance(rate, bool):
            rate = speaking_rate(transcription, duration)
        return AudioAnalysis(
            topics=_str_list(data.get("topics")) or ["General discussion"],
            sentiment=sentiment if sentiment in _SENTIMENTS else "neutral",
            key_points=_str_list(data.get("keyPoints")) or ["Content analyzed"],
            action_items=_str_list(data.get("actionItems")),
            summary=str(data.get("summary") or "Audio content analyzed and summarized."),
            speaking_rate=rate,
            word_count=word_count(transcription),
            duration=duration,
        )


def _parse_json(response: str) -> dict[str, Any] | None:
    """Parse *response* as a JSON object, unwrapping a fenced block first."""
    fenced = _JSON_FENCE_RE.search(response)
    candidate = fenced.group(1) if fenced else response
    try:
        data = json.loads(candidate.strip())
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _str_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(v) for v in value if str(v).strip()]
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    return []
