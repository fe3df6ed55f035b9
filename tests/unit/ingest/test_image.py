"""Tests for the image extractor (Pillow analysis and thumbnails)."""

from __future__ import annotations

import base64
from io import BytesIO

import pytest
from PIL import Image

from notesift.ingest.image import (
    THUMBNAIL_SIZE,
    ImageExtractor,
    brightness_bucket,
    complexity_bucket,
    contrast_bucket,
    make_thumbnail,
)
from notesift.models import ExtractionStatus


def _png(size: tuple[int, int], color=(255, 255, 255)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def _decode_data_url(url: str) -> Image.Image:
    header, payload = url.split(",", 1)
    assert header == "data:image/png;base64"
    return Image.open(BytesIO(base64.b64decode(payload)))


@pytest.fixture
def extractor():
    return ImageExtractor()


def test_small_bright_image(extractor, upload):
    processed = extractor.extract(upload("logo.png", _png((100, 50)), "image/png"))

    assert processed.status is ExtractionStatus.PLACEHOLDER
    assert processed.metadata["width"] == 100
    assert processed.metadata["height"] == 50
    assert processed.metadata["brightness"] == "Very Bright"
    assert processed.metadata["contrast"] == "Low"
    assert processed.metadata["has_text"] is False
    assert "• Dimensions: 100x50px" in processed.content
    assert "• Aspect Ratio: 2.00:1" in processed.content
    assert "• Color Scheme: Light/Bright" in processed.content
    assert "• Complexity: Low" in processed.content
    assert "❌ No text content detected" in processed.content


def test_large_dark_image_likely_has_text(extractor, upload):
    processed = extractor.extract(upload("scan.png", _png((1000, 700), (0, 0, 0)), "image/png"))

    assert processed.metadata["has_text"] is True
    assert processed.metadata["brightness"] == "Dark"
    assert "• Complexity: High" in processed.content
    assert "• Color Scheme: Dark/Muted" in processed.content
    assert "✅ Text content likely (large image)" in processed.content


def test_analysis_is_deterministic(extractor, upload):
    data = _png((640, 480), (120, 30, 200))
    first = extractor.extract(upload("a.png", data, "image/png"))
    second = extractor.extract(upload("a.png", data, "image/png"))
    assert first.content == second.content
    assert first.metadata["thumbnail"] == second.metadata["thumbnail"]


def test_thumbnail_is_letterboxed_square(extractor, upload):
    processed = extractor.extract(upload("wide.png", _png((300, 100), (255, 0, 0)), "image/png"))
    thumb = _decode_data_url(processed.metadata["thumbnail"])

    assert thumb.size == (THUMBNAIL_SIZE, THUMBNAIL_SIZE)
    assert thumb.mode == "RGBA"
    # 300x100 scales to 150x50, centred vertically: top rows are transparent.
    assert thumb.getpixel((75, 0))[3] == 0
    assert thumb.getpixel((75, 75))[:3] == (255, 0, 0)


def test_make_thumbnail_tiny_image():
    with Image.new("RGB", (1, 1)) as img:
        thumb = _decode_data_url(make_thumbnail(img))
    assert thumb.size == (THUMBNAIL_SIZE, THUMBNAIL_SIZE)


def test_svg_reads_dimensions(extractor, upload):
    svg = '<svg xmlns="http://www.w3.org/2000/svg" width="120" height="80px"><rect/></svg>'
    processed = extractor.extract(upload("icon.svg", svg, "image/svg+xml"))

    assert processed.status is ExtractionStatus.PLACEHOLDER
    assert processed.metadata["width"] == 120
    assert processed.metadata["height"] == 80
    assert processed.metadata["thumbnail"].startswith("data:image/svg+xml;base64,")
    assert "• Dimensions: 120x80px" in processed.content


def test_svg_ignores_prefixed_width_attributes(extractor, upload):
    svg = '<svg width="300" height="200" stroke-width="2" data-height="9"><path/></svg>'
    processed = extractor.extract(upload("chart.svg", svg, "image/svg+xml"))

    assert processed.metadata["width"] == 300
    assert processed.metadata["height"] == 200


def test_corrupt_image_fails_without_raising(extractor, upload):
    processed = extractor.extract(upload("broken.png", b"not an image", "image/png"))
    assert processed.failed
    assert processed.content.startswith("[Image Analysis Error: broken.png]")


@pytest.mark.parametrize(
    "avg, expected",
    [(200, "Very Bright"), (171, "Very Bright"), (170, "Bright"), (100, "Medium"), (85, "Dark")],
)
def test_brightness_bucket(avg, expected):
    assert brightness_bucket(avg) == expected


def test_contrast_bucket():
    assert contrast_bucket(64) == "Medium"
    assert contrast_bucket(50) == "Low"
    assert contrast_bucket(101) == "High"


def test_complexity_bucket():
    assert complexity_bucket(1_000_001) == "High"
    assert complexity_bucket(100_001) == "Medium"
    assert complexity_bucket(100_000) == "Low"
