from __future__ import annotations

from typing import Dict, Optional
import re


DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
DOC_MIME = "application/msword"
XLS_MIME = "application/vnd.ms-excel"
PPT_MIME = "application/vnd.ms-powerpoint"
PDF_MIME = "application/pdf"
ZIP_MIME = "application/zip"
OCTET_STREAM = "application/octet-stream"

OOXML_MIME: Dict[str, str] = {
    "docx": DOCX_MIME,
    "xlsx": XLSX_MIME,
    "pptx": PPTX_MIME,
}

LEGACY_OLE_MIME: Dict[str, str] = {
    "doc": DOC_MIME,
    "xls": XLS_MIME,
    "ppt": PPT_MIME,
}

MIME_TO_EXTENSION: Dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
    PDF_MIME: "pdf",
    "text/plain": "txt",
    "application/json": "json",
    "text/csv": "csv",
    DOC_MIME: "doc",
    DOCX_MIME: "docx",
    XLS_MIME: "xls",
    XLSX_MIME: "xlsx",
    PPT_MIME: "ppt",
    PPTX_MIME: "pptx",
    ZIP_MIME: "zip",
}

# URL-suffix table; pdf is added only where PDF extraction exists
_EXTENSION_TO_MIME: Dict[str, str] = {
    "docx": DOCX_MIME,
    "xlsx": XLSX_MIME,
    "doc": DOC_MIME,
    "xls": XLS_MIME,
    "pptx": PPTX_MIME,
    "ppt": PPT_MIME,
    "txt": "text/plain",
    "json": "application/json",
    "csv": "text/csv",
}

_SUFFIX_RE = re.compile(r"\.([a-zA-Z0-9]+)$")


def norm_mime(m: Optional[str]) -> str:
    return (m or "").split(";")[0].strip().lower()


def extension_to_mime(*, include_pdf: bool) -> Dict[str, str]:
    table = dict(_EXTENSION_TO_MIME)
    if include_pdf:
        table["pdf"] = PDF_MIME
    return table


def get_file_extension(mime_type: Optional[str]) -> Optional[str]:
    """Reverse-map a MIME type to an extension; None when unknown."""
    return MIME_TO_EXTENSION.get(norm_mime(mime_type))


def url_suffix(url: Optional[str]) -> Optional[str]:
    """
    Trailing filename extension of a URL, lower-cased.
    Query string and fragment are ignored: "a/b.DOCX?x=1" -> "docx".
    """
    if not url:
        return None
    path = url.split("#", 1)[0].split("?", 1)[0]
    m = _SUFFIX_RE.search(path)
    if not m:
        return None
    return m.group(1).lower()
