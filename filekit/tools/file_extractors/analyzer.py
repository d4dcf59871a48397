from __future__ import annotations

from typing import Optional
import logging

from ...integrations.archive import ArchiveReader
from ...pipeline.state import TypeVerdict
from .mime_map import (
    DOC_MIME,
    LEGACY_OLE_MIME,
    OCTET_STREAM,
    OOXML_MIME,
    PDF_MIME,
    ZIP_MIME,
    extension_to_mime,
    get_file_extension,
    norm_mime,
    url_suffix,
)
from .office_probe import detect_office_format
from .signatures import DOC_OLD, PDF, ZIP, has_signature

logger = logging.getLogger(__name__)


def _detected(verdict: TypeVerdict, how: str = "") -> TypeVerdict:
    suffix = f" ({how})" if how else ""
    logger.debug("Detected file type%s: %s", suffix, verdict.extension)
    return verdict


def analyze_file_type(
    content: bytes,
    *,
    url_hint: Optional[str] = None,
    declared_mime: str = "",
    include_pdf: bool = True,
    reader: Optional[ArchiveReader] = None,
) -> TypeVerdict:
    """
    Resolve a single (extension, mime) verdict. First applicable rule wins:

    1. PDF signature (only when `include_pdf`).
    2. ZIP signature -> Office marker probe, else plain zip.
    3. Legacy OLE signature -> doc/xls/ppt by URL suffix, default doc.
    4. URL suffix through the static extension table.
    5. Declared MIME reverse-mapped, else "unknown".

    Never raises.
    """
    if include_pdf and has_signature(content, PDF):
        return _detected(TypeVerdict("pdf", PDF_MIME))

    if has_signature(content, ZIP):
        fmt = detect_office_format(content, reader=reader)
        if fmt:
            return _detected(TypeVerdict(fmt, OOXML_MIME[fmt]))
        return _detected(TypeVerdict("zip", ZIP_MIME))

    suffix = url_suffix(url_hint)

    if has_signature(content, DOC_OLD):
        # The OLE container alone cannot tell doc/xls/ppt apart
        if suffix in LEGACY_OLE_MIME:
            return _detected(TypeVerdict(suffix, LEGACY_OLE_MIME[suffix]))
        return _detected(TypeVerdict("doc", DOC_MIME), "legacy")

    if suffix:
        table = extension_to_mime(include_pdf=include_pdf)
        if suffix in table:
            return _detected(TypeVerdict(suffix, table[suffix]), "by extension")

    m = norm_mime(declared_mime)
    return _detected(
        TypeVerdict(get_file_extension(m) or "unknown", m or OCTET_STREAM),
        "fallback",
    )
