from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ...errors import PDF_STAGE, collaborator_stage


@dataclass(frozen=True)
class PdfConfig:
    """PDF settings fixed when the web environment is built; 0 = every page."""

    max_pages: int = 0


def _page_text(page) -> str:
    # words come back as (x0, y0, x1, y1, word, block, line, word_no)
    words = page.get_text("words", sort=True) or []
    return " ".join(w[4] for w in words)


def extract_pdf(content: bytes, *, config: PdfConfig) -> str:
    """
    Page-by-page text: a page's words joined by single spaces, pages
    concatenated in order.
    """
    with collaborator_stage(PDF_STAGE):
        import fitz  # PyMuPDF

        doc = fitz.open(stream=content, filetype="pdf")
        try:
            n = len(doc)
            if config.max_pages > 0:
                n = min(n, config.max_pages)

            parts: List[str] = []
            for i in range(n):
                parts.append(_page_text(doc[i]))
            return "".join(parts)
        finally:
            doc.close()
