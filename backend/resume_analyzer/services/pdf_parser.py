"""
PDF text extraction and normalization.
"""
import re
from dataclasses import dataclass

import fitz  # PyMuPDF

from ..exceptions import DocumentParsingError, EmptyDocumentError

MIN_TEXT_LENGTH = 50

_CID_RE = re.compile(r"\(cid:\d+\)")
_HSPACE_RE = re.compile(r"[^\S\n]+")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class NormalizedText:
    """Two views of the same document text."""
    lines: str    # one stripped line per text line, blank lines removed
    content: str  # fully flattened to single spaces


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """
    Extract raw text from every page of a PDF using PyMuPDF.

    Args:
        pdf_bytes: Raw PDF file bytes

    Returns:
        Page texts joined by newlines, with (cid:N) glyph artifacts removed
    """
    if not pdf_bytes:
        raise EmptyDocumentError("Empty PDF buffer provided")

    try:
        pdf_document = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise DocumentParsingError(f"Failed to open PDF: {e}") from e

    try:
        if pdf_document.page_count == 0:
            raise DocumentParsingError("PDF has no pages")
        pages = [page.get_text() or "" for page in pdf_document]
    finally:
        pdf_document.close()

    return _CID_RE.sub("", "\n".join(pages))


def normalize_text(raw_text: str, min_length: int = MIN_TEXT_LENGTH) -> NormalizedText:
    """Clean extracted text; raise EmptyDocumentError when nothing usable remains."""
    if not raw_text:
        raise EmptyDocumentError("PDF appears to be empty or contains no extractable text")

    lines = []
    for line in raw_text.splitlines():
        line = _HSPACE_RE.sub(" ", line).strip()
        if line:
            lines.append(line)
    line_text = "\n".join(lines)
    content = _WHITESPACE_RE.sub(" ", line_text).strip()

    if len(content) < min_length:
        raise EmptyDocumentError(
            f"PDF contains very little text ({len(content)} characters)"
        )

    return NormalizedText(lines=line_text, content=content)


def parse_pdf(pdf_bytes: bytes, min_length: int = MIN_TEXT_LENGTH) -> NormalizedText:
    """Extract and normalize in one step."""
    return normalize_text(extract_pdf_text(pdf_bytes), min_length=min_length)
