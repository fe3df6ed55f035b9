"""Image extractor — Pillow-based visual analysis and a letterboxed thumbnail.

No OCR is performed. Text presence is a deterministic size heuristic: an
image larger than 800x600 is reported as likely to contain text. The same
input therefore always yields the same analysis.
"""

from __future__ import annotations

import base64
import io
import re
from dataclasses import dataclass

from PIL import Image

from notesift.ingest import banners
from notesift.ingest.base import BaseExtractor, Extraction, describe
from notesift.ingest.classifier import file_extension
from notesift.models import ExtractionStatus, FileCategory, UploadedFile

THUMBNAIL_SIZE = 150
# Pixel statistics are computed on a copy downsampled to fit this box.
_SAMPLE_BOX = (256, 256)
_TEXT_MIN_WIDTH = 800
_TEXT_MIN_HEIGHT = 600

_SVG_TAG_RE = re.compile(r"<svg\b[^>]*>", re.I)
_SVG_DIM_RE = re.compile(r'(?<![\w:-])(width|height)="(\d+(?:\.\d+)?)(?:px)?"', re.I)


@dataclass(frozen=True)
class ImageStats:
    width: int
    height: int
    brightness: str
    contrast: str
    color_scheme: str
    complexity: str

    @property
    def likely_has_text(self) -> bool:
        return self.width > _TEXT_MIN_WIDTH and self.height > _TEXT_MIN_HEIGHT


def brightness_bucket(avg: float) -> str:
    if avg > 170:
        return "Very Bright"
    if avg > 128:
        return "Bright"
    if avg > 85:
        return "Medium"
    return "Dark"


def contrast_bucket(color_variety: int) -> str:
    if color_variety > 100:
        return "High"
    if color_variety > 50:
        return "Medium"
    return "Low"


def complexity_bucket(pixel_bytes: int) -> str:
    if pixel_bytes > 1_000_000:
        return "High"
    if pixel_bytes > 100_000:
        return "Medium"
    return "Low"


def analyze_image(img: Image.Image) -> ImageStats:
    """Brightness, colour variety and complexity from a bounded pixel sample."""
    width, height = img.size
    with img.convert("RGB") as rgb:
        rgb.thumbnail(_SAMPLE_BOX)
        pixels = list(rgb.getdata())

    total = 0
    buckets: set[tuple[int, int, int]] = set()
    for r, g, b in pixels:
        total += (r + g + b) / 3
        buckets.add((r // 64, g // 64, b // 64))
    avg = total / len(pixels) if pixels else 0.0

    return ImageStats(
        width=width,
        height=height,
        brightness=brightness_bucket(avg),
        contrast=contrast_bucket(len(buckets)),
        color_scheme="Light/Bright" if avg > 128 else "Dark/Muted",
        # RGBA byte count of the full-size image
        complexity=complexity_bucket(width * height * 4),
    )


def make_thumbnail(img: Image.Image, size: int = THUMBNAIL_SIZE) -> str:
    """Return a ``size``x``size`` PNG data URL with *img* centred and letterboxed."""
    width, height = img.size
    scale = min(size / width, size / height)
    new_w = max(1, round(width * scale))
    new_h = max(1, round(height * scale))

    with img.convert("RGBA") as rgba, rgba.resize(
        (new_w, new_h), Image.Resampling.LANCZOS
    ) as resized, Image.new("RGBA", (size, size), (0, 0, 0, 0)) as canvas:
        canvas.paste(resized, ((size - new_w) // 2, (size - new_h) // 2))
        buf = io.BytesIO()
        canvas.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


class ImageExtractor(BaseExtractor):
    category = FileCategory.IMAGE

    def _extract(self, upload: UploadedFile) -> Extraction:
        mime = upload.mime_type or "Unknown"
        if file_extension(upload.name) == ".svg":
            return self._extract_svg(upload, mime)

        try:
            with Image.open(io.BytesIO(upload.data)) as img:
                img.load()
                stats = analyze_image(img)
                thumbnail = make_thumbnail(img)
        except Exception as exc:
            return Extraction.failure(banners.image_error(upload.name, describe(exc)), describe(exc))

        content = banners.image_analysis(
            upload.name,
            upload.size,
            mime,
            stats.width,
            stats.height,
            stats.color_scheme,
            stats.complexity,
            stats.brightness,
            stats.contrast,
            stats.likely_has_text,
        )
        return Extraction(
            content=content,
            status=ExtractionStatus.PLACEHOLDER,
            metadata={
                "thumbnail": thumbnail,
                "width": stats.width,
                "height": stats.height,
                "brightness": stats.brightness,
                "contrast": stats.contrast,
                "has_text": stats.likely_has_text,
            },
        )

    @staticmethod
    def _extract_svg(upload: UploadedFile, mime: str) -> Extraction:
        """Vector images are not rasterised; the SVG itself serves as thumbnail."""
        tag = _SVG_TAG_RE.search(upload.text())
        attrs = _SVG_DIM_RE.findall(tag.group(0)) if tag else []
        dims = {key.lower(): float(value) for key, value in attrs}
        width = int(dims.get("width", 0))
        height = int(dims.get("height", 0))
        content = banners.image_analysis(
            upload.name,
            upload.size,
            mime,
            width,
            height,
            "Unknown",
            "Unknown",
            "Unknown",
            "Unknown",
            False,
        )
        thumbnail = "data:image/svg+xml;base64," + base64.b64encode(upload.data).decode("ascii")
        return Extraction(
            content=content,
            status=ExtractionStatus.PLACEHOLDER,
            metadata={"thumbnail": thumbnail, "width": width, "height": height},
        )
