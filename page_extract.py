from __future__ import annotations

import logging
from typing import List, Protocol

import fitz  # PyMuPDF

from core.errors import InvalidPageRange, PageExtractionFailed, ParseFailed

log = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


class PagedDocument(Protocol):
    page_count: int

    def page_fragments(self, page_number: int) -> List[str]:
        ...


class PdfDocument:
    """Read-only view over a PDF opened from bytes. Page numbers are 1-based."""

    def __init__(self, doc: fitz.Document):
        self._doc = doc

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def page_fragments(self, page_number: int) -> List[str]:
        page = self._doc.load_page(page_number - 1)
        fragments: List[str] = []
        d = page.get_text("dict")
        for blk in d.get("blocks", []):
            if blk.get("type") != 0:
                continue
            for line in blk.get("lines", []):
                for span in line.get("spans", []):
                    t = span.get("text", "")
                    if t:
                        fragments.append(t)
        return fragments

    def close(self) -> None:
        self._doc.close()

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


def open_pdf(data: bytes) -> PdfDocument:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as exc:
        log.warning("PDF could not be opened: %s", exc)
        raise ParseFailed(f"Invalid PDF: {exc}") from exc
    if doc.page_count < 1:
        doc.close()
        raise ParseFailed("PDF has no pages")
    return PdfDocument(doc)


def validate_page_range(start_page: int, end_page: int, total_pages: int) -> None:
    if start_page < 1 or start_page > end_page or end_page > total_pages:
        raise InvalidPageRange(
            f"Invalid page range {start_page}-{end_page} for {total_pages} page(s)"
        )


def extract_page_range(document: PagedDocument, start_page: int, end_page: int) -> str:
    """
    Join each page's text fragments with spaces and the pages with a blank line,
    in ascending page order.
    """
    validate_page_range(start_page, end_page, document.page_count)

    pages: List[str] = []
    for page_number in range(start_page, end_page + 1):
        try:
            fragments = document.page_fragments(page_number)
        except Exception as exc:
            log.error("Page %d extraction failed: %s", page_number, exc)
            raise PageExtractionFailed(page_number, str(exc)) from exc
        pages.append(" ".join(fragments))

    text = PAGE_SEPARATOR.join(pages)
    log.info(
        "Extracted pages %d-%d (%d chars)", start_page, end_page, len(text)
    )
    if not text.strip():
        # Likely a scanned PDF (no digital text)
        log.warning("No extractable text in pages %d-%d", start_page, end_page)
    return text
