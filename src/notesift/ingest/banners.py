"""Content envelopes — the human-readable banners wrapped around extracted text.

Every extractor returns its text inside one of these envelopes so that the
segmentation engine always sees well-formed text. Failure banners always
contain:
  1. What went wrong (clear cause)
  2. What the user can do about it

Usage:
    from notesift.ingest.banners import pdf_error
    content = pdf_error(upload.name, str(exc))
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

LEGACY_DOC = "Legacy .doc files are not supported. Please convert to .docx format."

PREVIEW_ROWS = 10


def kb(size: int) -> str:
    """Format a byte count as ``12.3 KB``."""
    return f"{size / 1024:.1f} KB"


def _timestamp(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else "Unknown"


def _bullets(lines: Sequence[str]) -> str:
    return "".join(f"• {line}\n" for line in lines)


# ---------------------------------------------------------------------------
# Generic failures
# ---------------------------------------------------------------------------


def processing_error(cause: str) -> str:
    """Last-resort banner for an unexpected extractor failure."""
    return f"Error processing file: {cause}"


def document_error(name: str, cause: str) -> str:
    return f"Error extracting content from {name}: {cause}"


def unsupported_document(ext: str) -> str:
    return f"Document content extraction not yet implemented for {ext} files."


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def pdf_document(
    name: str,
    pages: int,
    has_text: bool,
    has_images: bool,
    size: int,
    text: str,
) -> str:
    out = f"[PDF Document: {name}]\n\n"
    out += "📄 **Document Analysis:**\n"
    out += _bullets(
        [
            f"Total Pages: {pages}",
            f"Text Content: {'Yes' if has_text else 'No'}",
            f"Images: {'Yes' if has_images else 'No'}",
            f"File Size: {kb(size)}",
        ]
    )
    out += "\n"
    if text.strip():
        out += f"📝 **Extracted Content:**\n{text.strip()}"
    else:
        out += (
            "⚠️ **Content Analysis:**\n"
            "This PDF appears to contain only images or scanned content. "
            "For better text extraction, consider:\n"
            + _bullets(
                [
                    "Using OCR services",
                    "Converting to searchable PDF",
                    "Manual transcription for important content",
                ]
            ).rstrip("\n")
        )
    return out


def pdf_error(name: str, cause: str) -> str:
    return (
        f"[PDF File: {name}]\n\n"
        f"❌ **Extraction Error:**\n{cause}\n\n"
        "💡 **Troubleshooting:**\n"
        + _bullets(
            [
                "Ensure the PDF is not password-protected",
                "Check if the file is corrupted",
                "Try with a different PDF file",
            ]
        ).rstrip("\n")
    )


def word_document(name: str, size: int, text: str, paragraphs: int) -> str:
    out = f"[Word Document: {name}]\n\n"
    out += "📄 **Document Analysis:**\n"
    out += _bullets(
        [
            f"File Size: {kb(size)}",
            f"Content Length: {len(text)} characters",
            f"Paragraphs: {paragraphs}",
        ]
    )
    out += "\n"
    if text.strip():
        out += f"📝 **Extracted Content:**\n{text.strip()}"
    else:
        out += (
            "⚠️ **Content Analysis:**\n"
            "This Word document appears to be empty or contains only formatting.\n\n"
            "💡 **Suggestions:**\n"
            + _bullets(
                [
                    "Check if content is in text boxes or shapes",
                    "Verify the document has actual text content",
                    "Consider copying content manually if important",
                ]
            ).rstrip("\n")
        )
    return out


def word_error(name: str, cause: str) -> str:
    return (
        f"[Word Document: {name}]\n\n"
        f"❌ **Extraction Error:**\n{cause}\n\n"
        "💡 **Troubleshooting:**\n"
        + _bullets(
            [
                "Ensure the file is a valid Word document",
                "Check if the file is corrupted",
                "Try saving as .docx format",
            ]
        ).rstrip("\n")
    )


# ---------------------------------------------------------------------------
# Spreadsheets
# ---------------------------------------------------------------------------


def _row_preview(rows: Sequence[str], total: int) -> str:
    out = ""
    for index, row in enumerate(rows[:PREVIEW_ROWS], start=1):
        out += f"Row {index}: {row}\n"
    if total > PREVIEW_ROWS:
        out += f"\n... ({total - PREVIEW_ROWS} additional rows truncated)"
    return out


def csv_file(name: str, columns: Sequence[str], rows: Sequence[str], size: int) -> str:
    """*rows* are JSON-serialised records; only the first 10 are shown."""
    out = f"[CSV File: {name}]\n\n"
    out += "📊 **Data Analysis:**\n"
    out += _bullets(
        [
            f"Total Rows: {len(rows)}",
            f"Columns: {', '.join(columns)}",
            f"File Size: {kb(size)}",
        ]
    )
    out += "\n"
    if rows:
        out += f"📋 **Preview (First {PREVIEW_ROWS} Rows):**\n"
        out += _row_preview(rows, len(rows))
    return out


def csv_error(name: str, cause: str) -> str:
    return (
        f"[CSV File: {name}]\n\n"
        f"❌ **Parsing Error:**\n{cause}\n\n"
        "💡 **Troubleshooting:**\n"
        + _bullets(
            [
                "Check CSV format and delimiters",
                "Ensure proper encoding (UTF-8 recommended)",
                "Verify file is not corrupted",
            ]
        ).rstrip("\n")
    )


def excel_file(
    name: str,
    sheet_names: Sequence[str],
    sheet: str,
    rows: Sequence[str],
    column_count: int,
    size: int,
) -> str:
    out = f"[Excel File: {name}]\n\n"
    out += "📊 **Workbook Analysis:**\n"
    out += _bullets([f"Worksheets: {', '.join(sheet_names)}", f"File Size: {kb(size)}"])
    out += "\n"
    out += f'📋 **Data from "{sheet}" Worksheet:**\n'
    out += _bullets([f"Total Rows: {len(rows)}", f"Total Columns: {column_count}"])
    out += "\n"
    out += _row_preview(rows, len(rows))
    return out


def excel_error(name: str, cause: str) -> str:
    return (
        f"[Excel File: {name}]\n\n"
        f"❌ **Processing Error:**\n{cause}\n\n"
        "💡 **Troubleshooting:**\n"
        + _bullets(
            [
                "Ensure the file is a valid Excel document",
                "Check if the file is password-protected",
                "Verify file is not corrupted",
            ]
        ).rstrip("\n")
    )


def unsupported_spreadsheet(name: str, ext: str) -> str:
    return f"[Spreadsheet File: {name}]\n\nUnsupported spreadsheet format: {ext}"


# ---------------------------------------------------------------------------
# Presentations
# ---------------------------------------------------------------------------


def presentation(name: str, slides: int, size: int, text: str) -> str:
    out = f"[Presentation: {name}]\n\n"
    out += "📽️ **Presentation Analysis:**\n"
    out += _bullets([f"Slides: {slides}", f"File Size: {kb(size)}"])
    out += "\n"
    if text.strip():
        out += f"📝 **Extracted Content:**\n{text.strip()}"
    else:
        out += "⚠️ **Content Analysis:**\nNo text was found on any slide."
    return out


def presentation_error(name: str, cause: str) -> str:
    return (
        f"[Presentation: {name}]\n\n"
        f"❌ **Extraction Error:**\n{cause}\n\n"
        "💡 **Troubleshooting:**\n"
        + _bullets(
            [
                "Ensure the file is a valid PowerPoint document",
                "Check if the file is corrupted",
                "Try saving as .pptx format",
            ]
        ).rstrip("\n")
    )


def unsupported_presentation(name: str, ext: str) -> str:
    return (
        f"[Presentation: {name}]\n\n"
        f"Unsupported presentation format: {ext}. Please convert to .pptx format."
    )


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


def image_analysis(
    name: str,
    size: int,
    mime_type: str,
    width: int,
    height: int,
    color_scheme: str,
    complexity: str,
    brightness: str,
    contrast: str,
    has_text: bool,
) -> str:
    ratio = f"{width / height:.2f}" if height else "0.00"
    out = f"[Image Analysis: {name}]\n\n"
    out += "📸 **Image Details:**\n"
    out += _bullets(
        [
            f"File Size: {kb(size)}",
            f"Format: {mime_type}",
            f"Dimensions: {width}x{height}px",
            f"Aspect Ratio: {ratio}:1",
        ]
    )
    out += "\n🔍 **Visual Analysis:**\n"
    out += _bullets(
        [
            f"Color Scheme: {color_scheme}",
            f"Complexity: {complexity}",
            f"Brightness: {brightness}",
            f"Contrast: {contrast}",
        ]
    )
    out += "\n📝 **Content Detection:**\n"
    if has_text:
        out += _bullets(
            [
                "✅ Text content likely (large image)",
                "💡 This image likely contains readable text",
                "🔍 Consider using OCR services for full text extraction",
            ]
        )
        actions = [
            "Use OCR tools for text extraction",
            "Apply AI vision models for detailed analysis",
            "Consider image optimization for web use",
        ]
    else:
        out += _bullets(
            [
                "❌ No text content detected",
                "🎨 This appears to be a visual/image-only file",
            ]
        )
        actions = [
            "Use AI vision for object/scene recognition",
            "Apply image analysis for content understanding",
            "Consider adding descriptive tags",
        ]
    out += "\n💡 **Suggested Actions:**\n"
    out += _bullets(actions)
    out += (
        "\n*Note: This is an enhanced analysis. "
        "For detailed text extraction, consider using OCR services.*"
    )
    return out


def image_error(name: str, cause: str) -> str:
    return (
        f"[Image Analysis Error: {name}]\n\n"
        f"❌ **Analysis Error:**\n{cause}\n\n"
        "💡 **Troubleshooting:**\n"
        + _bullets(
            [
                "Ensure the file is a valid image",
                "Check if the file is corrupted",
                "Try with a different image format",
            ]
        ).rstrip("\n")
    )


# ---------------------------------------------------------------------------
# Audio / video
# ---------------------------------------------------------------------------


def audio_placeholder(name: str, size: int, duration: float, mime_type: str) -> str:
    return (
        f"[Audio Transcription from {name}]\n\n"
        "🎵 **Audio Analysis:**\n"
        + _bullets(
            [
                f"File Size: {kb(size)}",
                f"Estimated Duration: {round(duration)} seconds",
                f"Format: {mime_type}",
            ]
        )
        + "\n💡 **Transcription Note:**\n"
        "This is simulated audio transcription. In a real implementation, you would use:\n"
        + _bullets(
            [
                "Web Speech API for browser-based transcription",
                "Google Speech-to-Text API",
                "OpenAI Whisper API",
                "Azure Speech Services",
            ]
        )
        + "\n🔍 **Content Analysis:**\n"
        + _bullets(
            [
                "Audio appears to contain speech content",
                "Consider using professional transcription services for accuracy",
                "Multiple speakers may require speaker identification",
            ]
        ).rstrip("\n")
    )


def video_placeholder(name: str, size: int, duration: float, mime_type: str) -> str:
    return (
        f"[Video Analysis from {name}]\n\n"
        "🎬 **Video Analysis:**\n"
        + _bullets(
            [
                f"File Size: {kb(size)}",
                f"Estimated Duration: {round(duration)} seconds",
                f"Format: {mime_type}",
            ]
        )
        + "\n💡 **Processing Note:**\n"
        "This is simulated video analysis. In a real implementation, you would:\n"
        + _bullets(
            [
                "Extract audio track for transcription",
                "Generate video thumbnails at key moments",
                "Use AI vision for scene analysis",
                "Apply object and face recognition",
            ]
        )
        + "\n🔍 **Content Analysis:**\n"
        + _bullets(
            [
                "Video appears to contain both visual and audio content",
                "Consider using video analysis services for detailed insights",
                "Multiple scenes may require segmentation analysis",
            ]
        ).rstrip("\n")
    )


# ---------------------------------------------------------------------------
# Code, archives, generic files
# ---------------------------------------------------------------------------


def code_file(name: str, language: str, text: str, size: int) -> str:
    line_count = len(text.split("\n"))
    return (
        f"[Code File: {name}]\n\n"
        "💻 **Code Analysis:**\n"
        + _bullets(
            [
                f"Language: {language}",
                f"Lines: {line_count}",
                f"Size: {size} bytes",
                f"Characters: {len(text)}",
            ]
        )
        + f"\n📝 **Source Code:**\n```{language.lower()}\n{text}\n```\n\n"
        "🔍 **Code Insights:**\n"
        + _bullets(
            [
                f"This appears to be a {language} source file",
                "Consider using syntax highlighting for better readability",
                "Code analysis tools can provide additional insights",
            ]
        ).rstrip("\n")
    )


def archive(name: str, size: int, mime_type: str, ext: str) -> str:
    return (
        f"[Archive File: {name}]\n\n"
        "📦 **Archive Analysis:**\n"
        + _bullets([f"File Size: {kb(size)}", f"Type: {mime_type}", f"Format: {ext}"])
        + "\n💡 **Processing Note:**\n"
        "This is simulated archive analysis. In a real implementation, you would:\n"
        + _bullets(
            [
                "Use an archive library for extraction",
                "Analyze archive contents and structure",
                "Extract individual files for processing",
                "Provide content previews",
            ]
        )
        + "\n🔍 **Content Analysis:**\n"
        + _bullets(
            [
                "Archive appears to contain multiple files",
                "Consider extracting and processing individual components",
                "Archive size suggests substantial content",
            ]
        ).rstrip("\n")
    )


def generic_file(
    name: str, mime_type: str, size: int, last_modified: datetime | None, text: str
) -> str:
    preview = text[:500] + "..." if len(text) > 500 else text
    return (
        f"[Generic File: {name}]\n\n"
        "📄 **File Analysis:**\n"
        + _bullets(
            [
                f"Type: {mime_type}",
                f"Size: {kb(size)}",
                f"Last Modified: {_timestamp(last_modified)}",
            ]
        )
        + f"\n📝 **Content Preview:**\n{preview}\n\n"
        "💡 **Note:** This file was processed as generic text. "
        "Consider using specialized tools for better analysis."
    )


def binary_file(name: str, mime_type: str, size: int, last_modified: datetime | None) -> str:
    return (
        f"[Binary File: {name}]\n\n"
        "🔒 **Binary File Analysis:**\n"
        + _bullets(
            [
                f"Type: {mime_type}",
                f"Size: {kb(size)}",
                f"Last Modified: {_timestamp(last_modified)}",
            ]
        )
        + "\n⚠️ **Content Note:**\n"
        "This appears to be a binary file that cannot be processed as text.\n\n"
        "💡 **Suggestions:**\n"
        + _bullets(
            [
                "Use specialized binary analysis tools",
                "Check if file has a text-based format",
                "Consider file conversion if possible",
            ]
        ).rstrip("\n")
    )
