"""Uploaded document to plain text.

Handles PDF (via pypdf) and plain-text uploads, cleans extraction artifacts,
and truncates to the LLM character budget, preferring a paragraph boundary.
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, field

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from research_portal.config.logging_config import get_logger
from research_portal.config.settings import get_settings
from research_portal.errors import (
    DocumentParseError,
    FileTooLargeError,
    InsufficientTextError,
    UnsupportedFormatError,
)

logger = get_logger("tools.document_parser")

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}
TEXT_CONTENT_TYPES = {"text/plain"}

# A paragraph break is only used as the cut point if it keeps this much of the budget
BOUNDARY_FLOOR = 0.8

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


@dataclass
class ParsedDocument:
    """Text pulled out of an uploaded document."""

    text: str
    page_count: int
    truncated: bool
    original_length: int
    info: dict[str, str] = field(default_factory=dict)

    def truncation_note(self) -> str:
        """Prefix added to extraction notes when the text was cut."""
        if not self.truncated:
            return ""
        return (
            f"[Document truncated: only first {round(len(self.text) / 1000)}K of "
            f"{round(self.original_length / 1000)}K characters analyzed] "
        )


def format_size(num_bytes: int) -> str:
    """Human-readable size: bytes, KB or MB."""
    if num_bytes >= 1024 * 1024:
        return f"{num_bytes / (1024 * 1024):.1f} MB"
    if num_bytes >= 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes} bytes"


def truncate_text(text: str, max_chars: int) -> tuple[str, bool]:
    """Cut ``text`` to ``max_chars``, at the last blank line when it is late enough."""
    if len(text) <= max_chars:
        return text, False
    head = text[:max_chars]
    boundary = head.rfind("\n\n")
    if boundary > max_chars * BOUNDARY_FLOOR:
        head = head[:boundary]
    return head, True


def clean_text(text: str) -> str:
    """Normalize whitespace and strip page artifacts."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"\n{4,}", "\n\n\n", text)
    text = _CONTROL_CHARS.sub(" ", text)
    text = re.sub(r" {3,}", "  ", text)
    return text.strip()


def detect_format(filename: str, content_type: str | None = None) -> str:
    """Return ``"pdf"`` or ``"txt"``; raise for anything else."""
    name = (filename or "").lower()
    ctype = (content_type or "").split(";")[0].strip().lower()
    if ctype in PDF_CONTENT_TYPES or name.endswith(".pdf"):
        return "pdf"
    if ctype in TEXT_CONTENT_TYPES or name.endswith(".txt"):
        return "txt"
    raise UnsupportedFormatError(
        "Unsupported file format. Please upload a PDF (.pdf) or text (.txt) file.",
        details=f"filename={filename!r} content_type={content_type!r}",
    )


def parse_pdf(data: bytes, max_chars: int, max_pages: int = 100) -> ParsedDocument:
    """Extract text from the first ``max_pages`` pages of a PDF."""
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            raise DocumentParseError(
                "The PDF is encrypted. Please upload an unlocked copy.",
            )
        pages = [page.extract_text() or "" for page in reader.pages[:max_pages]]
        page_count = len(reader.pages)
        metadata = reader.metadata or {}
    except (PdfReadError, ValueError) as exc:
        raise DocumentParseError(
            "Failed to extract text from the document. The file may be corrupted, "
            "encrypted, or image-only (scanned PDF).",
            details=str(exc),
        ) from exc

    full_text = "\n\n".join(pages)
    text, truncated = truncate_text(full_text, max_chars)
    info = {str(k).lstrip("/"): str(v) for k, v in metadata.items()}
    return ParsedDocument(
        text=clean_text(text),
        page_count=page_count,
        truncated=truncated,
        original_length=len(full_text),
        info=info,
    )


def parse_text(data: bytes, max_chars: int) -> ParsedDocument:
    """Decode a UTF-8 text upload; undecodable bytes are replaced."""
    full_text = data.decode("utf-8", errors="replace")
    text, truncated = truncate_text(full_text, max_chars)
    return ParsedDocument(
        text=clean_text(text),
        page_count=1,
        truncated=truncated,
        original_length=len(full_text),
    )


def parse_document(
    data: bytes,
    filename: str,
    content_type: str | None = None,
    max_chars: int | None = None,
) -> ParsedDocument:
    """Validate an upload and extract its text.

    Args:
        data: Raw uploaded bytes.
        filename: Client-supplied filename, used for format detection.
        content_type: Optional MIME type from the upload.
        max_chars: Character budget (defaults to settings).

    Returns:
        ParsedDocument with cleaned, possibly truncated text.

    Raises:
        FileTooLargeError, UnsupportedFormatError, DocumentParseError,
        InsufficientTextError.
    """
    settings = get_settings()
    if max_chars is None:
        max_chars = settings.max_document_chars

    if len(data) > settings.max_upload_bytes:
        raise FileTooLargeError(
            f"File too large. Maximum size is {format_size(settings.max_upload_bytes)}. "
            f"Your file is {format_size(len(data))}.",
        )

    fmt = detect_format(filename, content_type)
    if fmt == "pdf":
        doc = parse_pdf(data, max_chars, max_pages=settings.max_pdf_pages)
    else:
        doc = parse_text(data, max_chars)

    if len(doc.text.strip()) < settings.min_text_chars:
        raise InsufficientTextError(
            "Could not extract readable text from this document. "
            "If it is a scanned PDF, OCR is not supported.",
        )

    logger.info(
        "document_parsed",
        filename=filename,
        format=fmt,
        pages=doc.page_count,
        chars=len(doc.text),
        truncated=doc.truncated,
    )
    return doc
