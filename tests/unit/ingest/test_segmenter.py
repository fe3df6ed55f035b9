"""Tests for the segmentation engine."""

from __future__ import annotations

import pytest

from notesift.ingest.segmenter import (
    CHUNK_CHARS,
    STRATEGIES,
    TITLE_MAX_CHARS,
    segment,
    select_strategy,
    truncate_title,
)
from notesift.models import SegmentedUnit


def _pairs(units: list[SegmentedUnit]) -> list[tuple[str, str]]:
    return [(u.title, u.content) for u in units]


# ------------------------------------------------------------------
# Cascade order
# ------------------------------------------------------------------


def test_strategy_order():
    assert [s.name for s in STRATEGIES] == [
        "headings",
        "numbered",
        "paragraphs",
        "bullets",
        "rows",
        "chunks",
        "single",
    ]


def test_segment_is_deterministic():
    text = "# One\nfirst body\n\n# Two\nsecond body\n\n1. not a section here"
    assert segment(text, "a.md") == segment(text, "a.md")


# ------------------------------------------------------------------
# Headings
# ------------------------------------------------------------------


def test_headings_two_sections():
    units = segment("# Intro\nHello\n\n# Details\nWorld", "doc.md")
    assert _pairs(units) == [("Intro", "Hello"), ("Details", "World")]


def test_headings_discard_preamble():
    text = "Preamble text\n# A heading\nbody text here\n## Second\nmore body"
    units = segment(text, "doc.md")
    assert [u.title for u in units] == ["A heading", "Second"]
    assert all("Preamble" not in u.content for u in units)


def test_headings_drop_short_sections():
    units = segment("# A\nb\n# Longer heading\nwith body", "doc.md")
    assert _pairs(units) == [("Longer heading", "with body")]


def test_heading_without_body_uses_title_as_content():
    units = segment("# First heading only\n# Second heading text", "doc.md")
    assert _pairs(units) == [
        ("First heading only", "First heading only"),
        ("Second heading text", "Second heading text"),
    ]


def test_single_heading_does_not_trigger_headings():
    assert select_strategy("# Only one\nsome body text").name != "headings"


def test_seven_hashes_is_not_a_heading():
    assert select_strategy("####### a\n####### b").name != "headings"


# ------------------------------------------------------------------
# Numbered sections
# ------------------------------------------------------------------


def test_numbered_sections():
    text = (
        "Intro\n"
        "1. First item with enough text here\n"
        "2. Second item with enough text too\n"
        "3. tiny"
    )
    units = segment(text, "list.txt")
    assert select_strategy(text).name == "numbered"
    assert _pairs(units) == [
        ("First item with enough text here", "First item with enough text here"),
        ("Second item with enough text too", "Second item with enough text too"),
    ]


def test_one_numbered_item_falls_through():
    text = "Intro\n1. Only one numbered item here, long enough"
    assert select_strategy(text).name == "single"


def test_numbered_all_short_yields_no_units():
    assert segment("1. a\n2. b\n3. c", "x.txt") == []


# ------------------------------------------------------------------
# Paragraphs
# ------------------------------------------------------------------


def test_paragraphs():
    p1 = "The first paragraph talks about the quarterly roadmap in detail."
    p2 = "The second paragraph covers hiring plans and the budget for them."
    units = segment(f"{p1}\n\n{p2}", "notes.txt")
    assert select_strategy(f"{p1}\n\n{p2}").name == "paragraphs"
    assert [u.content for u in units] == [p1, p2]
    assert units[0].title == truncate_title(p1)


def test_paragraph_of_exactly_50_chars_does_not_qualify():
    short = "x" * 50
    long = "y" * 60
    assert select_strategy(f"{short}\n\n{long}").name == "single"


# ------------------------------------------------------------------
# Bullets
# ------------------------------------------------------------------


def test_bullets():
    text = (
        "Shopping list\n"
        "- first bullet item long enough\n"
        "* second bullet item long enough\n"
        "• third"
    )
    units = segment(text, "list.txt")
    assert select_strategy(text).name == "bullets"
    assert [u.title for u in units] == [
        "first bullet item long enough",
        "second bullet item long enough",
    ]


def test_one_bullet_falls_through():
    assert select_strategy("Header\n- only one bullet item").name == "single"


# ------------------------------------------------------------------
# Spreadsheet rows
# ------------------------------------------------------------------


def test_rows_parse_json_records():
    text = (
        'Row 1: {"name":"Alice","age":30}\n'
        'Row 2: {"name":"Bob","age":null}\n'
        "Row 3: not json"
    )
    assert select_strategy(text).name == "rows"
    assert _pairs(segment(text, "people.csv")) == [
        ("Alice", "name: Alice\nage: 30"),
        ("Bob", "name: Bob\nage: null"),
        ("Row 3", "not json"),
    ]


def test_rows_json_array():
    text = 'Row 1: [1.0,"x"]\nRow 2: ["second","y"]'
    units = segment(text, "sheet.xlsx")
    assert _pairs(units) == [("1", "0: 1\n1: x"), ("second", "0: second\n1: y")]


def test_rows_falsy_first_value_uses_row_title():
    text = 'Row 1: {"a":"","b":1}\nRow 2: {"a":0,"b":2}'
    assert [u.title for u in segment(text, "s.csv")] == ["Row 1", "Row 2"]


def test_rows_title_cut_without_ellipsis():
    name = "x" * 80
    text = f'Row 1: {{"name":"{name}"}}\nRow 2: {{"name":"short"}}'
    units = segment(text, "s.csv")
    assert units[0].title == "x" * TITLE_MAX_CHARS


def test_single_row_is_not_rows():
    assert select_strategy('Row 1: {"a":1}').name == "single"


# ------------------------------------------------------------------
# Chunks / single
# ------------------------------------------------------------------


def test_long_text_is_chunked():
    text = "word " * 500
    assert len(text) == 2500
    units = segment(text, "blob.txt")
    assert len(units) == 4
    assert all(len(u.content) <= CHUNK_CHARS for u in units)
    assert units[0].title == truncate_title(units[0].content)


def test_exactly_threshold_is_single():
    units = segment("a" * 1000, "blob.txt")
    assert _pairs(units) == [("blob", "a" * 1000)]


def test_just_over_threshold_is_chunked():
    units = segment("a" * 1001, "blob.txt")
    assert [len(u.content) for u in units] == [800, 201]


def test_single_unit_titled_after_file():
    units = segment("short note", "meeting.notes.txt")
    assert _pairs(units) == [("meeting.notes", "short note")]


def test_single_unit_fallback_title():
    assert segment("", ".txt") == [SegmentedUnit(title="Extracted Content", content="")]


# ------------------------------------------------------------------
# Titles
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "line, expected",
    [
        ("a" * 50, "a" * 50),
        ("a" * 51, "a" * 50 + "..."),
        ("", ""),
    ],
)
def test_truncate_title(line, expected):
    assert truncate_title(line) == expected
