"""
pdf/extractor.py — flat text layer of a survey-export PDF.

Architecture:
  bytes | path → fitz.open() → pages 1..N → text spans (PyMuPDF dict,
  block → line → span order) → spans joined with " " → page + "\n"

The unit segmenter needs the whole document to find unit boundaries, so
any failure to open or decode the file is fatal: DocumentParseError, no
partial text.

Public API:
  extract_text(source) -> str
"""

from __future__ import annotations

import logging
import unicodedata
from pathlib import Path

import fitz  # PyMuPDF

log = logging.getLogger(__name__)


class DocumentParseError(Exception):
    """The PDF cannot be opened or decoded (corrupt, encrypted, not a PDF)."""


def extract_text(source: bytes | str | Path) -> str:
    """
    Returns the concatenated text of every page, in page order.

    Args:
        source: PDF content (bytes) or a path to a PDF file.

    Raises:
        DocumentParseError: unreadable, empty, non-PDF or password-protected input.
    """
    doc = _open(source)
    try:
        if doc.needs_pass:
            raise DocumentParseError("PDF is password-protected")
        if not doc.is_pdf:
            raise DocumentParseError("File is not a PDF document")
        if doc.page_count == 0:
            raise DocumentParseError("PDF has no pages")
        pages = extract_pages(doc)
    finally:
        doc.close()

    text = "".join(page + "\n" for page in pages)
    log.debug("Extracted %d pages, %d chars", len(pages), len(text))
    return unicodedata.normalize("NFC", text)


def extract_pages(doc: fitz.Document) -> list[str]:
    """One string per page: the page's text spans joined by a single space."""
    pages: list[str] = []
    for page in doc:
        try:
            page_dict = page.get_text("dict", flags=fitz.TEXT_PRESERVE_WHITESPACE)
        except RuntimeError as exc:
            raise DocumentParseError(f"Cannot decode page {page.number + 1}: {exc}") from exc
        pages.append(" ".join(_page_fragments(page_dict)))
    return pages


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _open(source: bytes | str | Path) -> fitz.Document:
    try:
        if isinstance(source, (bytes, bytearray)):
            return fitz.open(stream=bytes(source), filetype="pdf")
        return fitz.open(str(source), filetype="pdf")
    except (RuntimeError, ValueError, OSError) as exc:
        # fitz.FileDataError / EmptyFileError subclass RuntimeError
        raise DocumentParseError(f"Cannot open PDF: {exc}") from exc


def _page_fragments(page_dict: dict) -> list[str]:
    """Text of every span of the page, in layout order."""
    fragments: list[str] = []
    for block in page_dict.get("blocks", []):
        if block.get("type") != 0:
            continue
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                fragments.append(span.get("text", ""))
    return fragments
