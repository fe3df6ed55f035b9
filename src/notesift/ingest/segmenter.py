"""Segmentation engine — split extracted text into (title, content) units.

Strategies are tried in a fixed order; the first whose precondition holds is
applied exclusively:

  1. headings    ≥ 2 Markdown heading lines (``#`` … ``######``)
  2. numbered    ``1. `` style sections, more than 2 split pieces
  3. paragraphs  more than 1 blank-line-separated paragraph longer than 50 chars
  4. bullets     ``-``/``*``/``•`` items, more than 2 split pieces
  5. rows        ``Row n: <payload>`` lines from a spreadsheet preview
  6. chunks      text longer than 1000 chars → fixed 800-char slices
  7. single      everything else → one unit titled after the file

The thresholds decide which heuristic governs ambiguous input, so they are
exact: text with only two bullet pieces falls through past strategy 4.
Segmentation is pure; the same text always yields the same units.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from notesift.ingest.classifier import base_name
from notesift.models import SegmentedUnit

logger = logging.getLogger(__name__)

TITLE_MAX_CHARS = 50
CHUNK_CHARS = 800
CHUNK_THRESHOLD = 1000

_HEADING_RE = re.compile(r"^#{1,6}[ \t]+(.+)$", re.MULTILINE)
_NUMBERED_SPLIT_RE = re.compile(r"^\d+\.\s+", re.MULTILINE)
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_BULLET_SPLIT_RE = re.compile(r"^[-*•]\s+", re.MULTILINE)
_ROW_RE = re.compile(r"Row \d+: (.+)")

_MIN_HEADING_SECTION = 10
_MIN_LIST_SECTION = 20
_MIN_PARAGRAPH = 50


def truncate_title(line: str) -> str:
    """First *TITLE_MAX_CHARS* characters of *line*, with ``...`` if cut."""
    if len(line) > TITLE_MAX_CHARS:
        return line[:TITLE_MAX_CHARS] + "..."
    return line


def _first_line(text: str) -> str:
    return text.strip().split("\n")[0]


# ---------------------------------------------------------------------------
# 1. Markdown headings
# ---------------------------------------------------------------------------


def _has_headings(text: str) -> bool:
    return len(_HEADING_RE.findall(text)) > 1


def _split_headings(text: str, file_name: str) -> list[SegmentedUnit]:
    """One unit per heading; the preamble before the first heading is discarded.

    A section (heading text plus body) of 10 characters or fewer is dropped.
    A heading with no body uses the heading text as content.
    """
    matches = list(_HEADING_RE.finditer(text))
    units: list[SegmentedUnit] = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        section = text[match.start(1):end].strip()
        if len(section) <= _MIN_HEADING_SECTION:
            continue
        title = match.group(1).strip()
        body = text[match.end():end].strip()
        units.append(SegmentedUnit(title=title, content=body or title))
    return units


# ---------------------------------------------------------------------------
# 2. Numbered sections / 4. bullets
# ---------------------------------------------------------------------------


def _list_units(pieces: list[str], fallback: str) -> list[SegmentedUnit]:
    units: list[SegmentedUnit] = []
    for i, piece in enumerate(pieces[1:], start=1):
        content = piece.strip()
        if len(content) <= _MIN_LIST_SECTION:
            continue
        title = truncate_title(_first_line(content))
        units.append(SegmentedUnit(title=title or f"{fallback} {i}", content=content))
    return units


def _has_numbered(text: str) -> bool:
    return len(_NUMBERED_SPLIT_RE.split(text)) > 2


def _split_numbered(text: str, file_name: str) -> list[SegmentedUnit]:
    return _list_units(_NUMBERED_SPLIT_RE.split(text), "Section")


def _has_bullets(text: str) -> bool:
    return len(_BULLET_SPLIT_RE.split(text)) > 2


def _split_bullets(text: str, file_name: str) -> list[SegmentedUnit]:
    return _list_units(_BULLET_SPLIT_RE.split(text), "Item")


# ---------------------------------------------------------------------------
# 3. Paragraphs
# ---------------------------------------------------------------------------


def _paragraphs(text: str) -> list[str]:
    return [p.strip() for p in _PARAGRAPH_SPLIT_RE.split(text) if len(p.strip()) > _MIN_PARAGRAPH]


def _has_paragraphs(text: str) -> bool:
    return len(_paragraphs(text)) > 1


def _split_paragraphs(text: str, file_name: str) -> list[SegmentedUnit]:
    return [
        SegmentedUnit(
            title=truncate_title(_first_line(p)) or f"Note {i} from {file_name}",
            content=p,
        )
        for i, p in enumerate(_paragraphs(text), start=1)
    ]


# ---------------------------------------------------------------------------
# 5. Spreadsheet rows
# ---------------------------------------------------------------------------


def _has_rows(text: str) -> bool:
    if "Row 1:" not in text and "Columns:" not in text:
        return False
    return len(_ROW_RE.findall(text)) > 1


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _row_unit(index: int, payload: str) -> SegmentedUnit:
    fallback = SegmentedUnit(title=f"Row {index}", content=payload)
    try:
        record = json.loads(payload)
    except json.JSONDecodeError:
        return fallback

    if isinstance(record, dict):
        items = list(record.items())
    elif isinstance(record, list):
        items = [(str(i), v) for i, v in enumerate(record)]
    else:
        return fallback

    first = items[0][1] if items else None
    title = _format_value(first)[:TITLE_MAX_CHARS] if first else f"Row {index}"
    content = "\n".join(f"{key}: {_format_value(value)}" for key, value in items)
    return SegmentedUnit(title=title, content=content)


def _split_rows(text: str, file_name: str) -> list[SegmentedUnit]:
    return [
        _row_unit(i, payload) for i, payload in enumerate(_ROW_RE.findall(text), start=1)
    ]


# ---------------------------------------------------------------------------
# 6. Fixed-size chunks / 7. single unit
# ---------------------------------------------------------------------------


def _is_long(text: str) -> bool:
    return len(text) > CHUNK_THRESHOLD


def _split_chunks(text: str, file_name: str) -> list[SegmentedUnit]:
    units: list[SegmentedUnit] = []
    for i, start in enumerate(range(0, len(text), CHUNK_CHARS), start=1):
        chunk = text[start:start + CHUNK_CHARS].strip()
        title = truncate_title(_first_line(chunk))
        units.append(SegmentedUnit(title=title or f"Part {i} from {file_name}", content=chunk))
    return units


def _always(text: str) -> bool:
    return True


def _single(text: str, file_name: str) -> list[SegmentedUnit]:
    return [SegmentedUnit(title=base_name(file_name) or "Extracted Content", content=text)]


# ---------------------------------------------------------------------------
# Cascade
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Strategy:
    name: str
    applies: Callable[[str], bool]
    split: Callable[[str, str], list[SegmentedUnit]]


STRATEGIES: tuple[Strategy, ...] = (
    Strategy("headings", _has_headings, _split_headings),
    Strategy("numbered", _has_numbered, _split_numbered),
    Strategy("paragraphs", _has_paragraphs, _split_paragraphs),
    Strategy("bullets", _has_bullets, _split_bullets),
    Strategy("rows", _has_rows, _split_rows),
    Strategy("chunks", _is_long, _split_chunks),
    Strategy("single", _always, _single),
)


def select_strategy(text: str) -> Strategy:
    """Return the first strategy whose precondition holds for *text*."""
    for strategy in STRATEGIES:
        if strategy.applies(text):
            return strategy
    raise AssertionError("the single-unit strategy always applies")


def segment(text: str, file_name: str) -> list[SegmentedUnit]:
    """Split *text* from *file_name* into ordered SegmentedUnits.

    Returns an empty list only when the governing strategy keeps no unit
    (e.g. every numbered section is too short).
    """
    strategy = select_strategy(text)
    units = strategy.split(text, file_name)
    logger.debug("Segmented %s with %s strategy → %d units", file_name, strategy.name, len(units))
    return units
