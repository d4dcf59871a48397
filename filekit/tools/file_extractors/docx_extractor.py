from __future__ import annotations

from typing import Iterator, Optional
import io

from docx import Document
from docx.table import Table

from ...errors import WORD_STAGE, LegacyFormatUnsupported, collaborator_stage, staged
from ...integrations.archive import ArchiveReader
from .office_probe import detect_office_format
from .signatures import DOC_OLD, ZIP, has_signature


def _table_lines(table: Table) -> Iterator[str]:
    for row in table.rows:
        seen = set()
        for cell in row.cells:
            # merged cells repeat across row.cells
            if cell._tc in seen:
                continue
            seen.add(cell._tc)
            for block in cell.iter_inner_content():
                if isinstance(block, Table):
                    yield from _table_lines(block)
                else:
                    yield block.text


def _docx_text(content: bytes) -> str:
    """Body paragraphs and table cell text, in document order."""
    doc = Document(io.BytesIO(content))
    lines = []
    for block in doc.iter_inner_content():
        if isinstance(block, Table):
            lines.extend(_table_lines(block))
        else:
            lines.append(block.text)
    return "\n".join(lines)


def extract_docx(content: bytes, *, reader: Optional[ArchiveReader] = None) -> str:
    """
    Word strategy for doc/docx verdicts.

    - ZIP with word/document.xml: python-docx.
    - OLE container (real .doc): LegacyFormatUnsupported.
    - Anything else: best-effort python-docx; its failure is reported as-is.
    """
    with collaborator_stage(WORD_STAGE):
        if has_signature(content, ZIP) and detect_office_format(content, reader=reader) == "docx":
            return _docx_text(content)

        if has_signature(content, DOC_OLD):
            raise LegacyFormatUnsupported(
                staged(WORD_STAGE, "Legacy DOC format detected. Please convert to DOCX.")
            )

        return _docx_text(content)
