from __future__ import annotations

from typing import Dict
import io
import zipfile

from filekit.pipeline.state import TypeVerdict
from filekit.tools.file_extractors.analyzer import analyze_file_type
from filekit.tools.file_extractors.mime_map import (
    DOC_MIME,
    DOCX_MIME,
    PPT_MIME,
    XLS_MIME,
    get_file_extension,
    url_suffix,
)

OLE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64


def _zip(members: Dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, body in members.items():
            zf.writestr(name, body)
    return buf.getvalue()


def test_pdf_signature_only_when_enabled() -> None:
    pdf = b"%PDF-1.4\n%..."
    assert analyze_file_type(pdf, include_pdf=True) == TypeVerdict("pdf", "application/pdf")
    assert analyze_file_type(pdf, include_pdf=False).extension == "unknown"


def test_minimal_docx_ignores_url_hint() -> None:
    content = _zip({"word/document.xml": "<w:document/>"})
    for hint in (None, "https://x/report.xlsx", "https://x/a.pdf", "file.txt"):
        assert analyze_file_type(content, url_hint=hint) == TypeVerdict("docx", DOCX_MIME)


def test_bare_zip_beats_url_hint() -> None:
    content = _zip({"data/readme.txt": "hello"})
    assert analyze_file_type(content, url_hint="https://x/report.docx") == TypeVerdict("zip", "application/zip")


def test_legacy_ole_uses_url_hint() -> None:
    assert analyze_file_type(OLE, url_hint="https://x/budget.XLS") == TypeVerdict("xls", XLS_MIME)
    assert analyze_file_type(OLE, url_hint="https://x/deck.ppt?dl=1") == TypeVerdict("ppt", PPT_MIME)
    assert analyze_file_type(OLE, url_hint="https://x/memo.doc") == TypeVerdict("doc", DOC_MIME)


def test_legacy_ole_defaults_to_doc() -> None:
    assert analyze_file_type(OLE) == TypeVerdict("doc", DOC_MIME)
    assert analyze_file_type(OLE, url_hint="https://x/download") == TypeVerdict("doc", DOC_MIME)
    assert analyze_file_type(OLE, url_hint="https://x/thing.txt") == TypeVerdict("doc", DOC_MIME)


def test_url_suffix_table() -> None:
    assert analyze_file_type(b"a,b\n1,2\n", url_hint="https://x/data.CSV") == TypeVerdict("csv", "text/csv")
    assert analyze_file_type(b"hello", url_hint="notes.txt") == TypeVerdict("txt", "text/plain")


def test_pdf_suffix_only_in_pdf_environment() -> None:
    assert analyze_file_type(b"????", url_hint="a.pdf", include_pdf=True).extension == "pdf"
    assert analyze_file_type(b"????", url_hint="a.pdf", include_pdf=False) == TypeVerdict(
        "unknown", "application/octet-stream"
    )


def test_unknown_suffix_falls_back_to_declared_mime() -> None:
    v = analyze_file_type(b"{}", url_hint="https://x/blob.xyz", declared_mime="application/json; charset=utf-8")
    assert v == TypeVerdict("json", "application/json")


def test_unknown_everything() -> None:
    assert analyze_file_type(b"") == TypeVerdict("unknown", "application/octet-stream")
    assert analyze_file_type(b"MZ", declared_mime="application/x-foo") == TypeVerdict("unknown", "application/x-foo")


def test_mime_and_suffix_helpers() -> None:
    assert get_file_extension("application/pdf") == "pdf"
    assert get_file_extension("application/vnd.ms-excel") == "xls"
    assert get_file_extension("text/plain") == "txt"
    assert get_file_extension("application/unknown") is None
    assert url_suffix("https://host/path/File.Docx#frag") == "docx"
    assert url_suffix("https://host/path/") is None
    assert url_suffix(None) is None
