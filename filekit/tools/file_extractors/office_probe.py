from __future__ import annotations

from typing import Literal, Optional, Tuple

from ...integrations.archive import ArchiveReader, ZipArchiveReader


OfficeFormat = Literal["docx", "xlsx", "pptx"]

# Checked in order; first present member wins
OFFICE_MARKERS: Tuple[Tuple[str, OfficeFormat], ...] = (
    ("word/document.xml", "docx"),
    ("xl/workbook.xml", "xlsx"),
    ("ppt/presentation.xml", "pptx"),
)

_DEFAULT_READER = ZipArchiveReader()


def detect_office_format(content: bytes, *, reader: Optional[ArchiveReader] = None) -> Optional[OfficeFormat]:
    """
    Tell DOCX / XLSX / PPTX apart by their marker member.

    Returns None for a bare ZIP and for anything that is not an archive at all;
    "not an Office file" is an expected answer here, not an error.
    """
    reader = reader or _DEFAULT_READER
    try:
        archive = reader.load(content)
    except Exception:
        return None

    for member, fmt in OFFICE_MARKERS:
        if archive.has_member(member):
            return fmt
    return None
