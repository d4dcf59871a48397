from __future__ import annotations

from typing import List, Optional
import asyncio
import io

import pytest
import requests

from filekit.errors import EmptyResult, ExtractionFailed, FetchFailed, InvalidInput, UnsupportedFormat, UnsupportedType
from filekit.integrations.fetch_client import FetchClient, FetchResult
from filekit.pipeline.converter import FileConverter
from filekit.pipeline.envelope import envelope_to_dict, file_from_bytes
from filekit.pipeline.environments import generic_environment, web_environment
from filekit.pipeline.state import SerializedFormData, SerializedJson, TypeVerdict
from filekit.tools.file_extractors.pdf_extractor import PdfConfig


class _StubFetcher(FetchClient):
    def __init__(self, results: List[object]):
        super().__init__(timeout_sec=1, max_mb=1)
        self._results = list(results)
        self.urls: List[str] = []

    def fetch(self, url: str) -> Optional[FetchResult]:
        self.urls.append(url)
        r = self._results.pop(0)
        if isinstance(r, Exception):
            raise r
        return r  # type: ignore[return-value]


def _run(coro):
    return asyncio.run(coro)


def _docx_bytes(*paras: str) -> bytes:
    from docx import Document

    doc = Document()
    for p in paras:
        doc.add_paragraph(p)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def _xlsx_bytes() -> bytes:
    from openpyxl import Workbook

    wb = Workbook()
    ws = wb.active
    ws.title = "Parts"
    ws.append(["name", "qty"])
    ws.append(["bolt", 4])
    other = wb.create_sheet("Notes")
    other.append(["ok"])
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def test_form_data_and_json_rejected_before_decoding() -> None:
    conv = FileConverter(generic_environment())
    # not valid base64 either; the variant check must come first
    for bad in (SerializedJson(value="!!!"), SerializedFormData(), None):
        with pytest.raises(InvalidInput) as ei:
            _run(conv.to_text(bad))
        assert str(ei.value) == "Invalid file data"


def test_docx_end_to_end() -> None:
    conv = FileConverter(generic_environment())
    data = file_from_bytes(_docx_bytes("Hello", "World"), name="memo.bin")

    assert _run(conv.analyze_file_type(data)).extension == "docx"
    assert "Hello\nWorld" in _run(conv.to_text(data))


def test_xlsx_end_to_end() -> None:
    conv = FileConverter(generic_environment())
    text = _run(conv.to_text(file_from_bytes(_xlsx_bytes())))
    assert text == "Sheet: Parts\nname,qty\nbolt,4\n\nSheet: Notes\nok\n\n"


def test_wire_dict_is_accepted() -> None:
    conv = FileConverter(generic_environment())
    wire = envelope_to_dict(file_from_bytes(b"plain words", name="a.txt"))
    assert _run(conv.to_text(wire, url_hint="https://x/a.txt")) == "plain words"


def test_unknown_type_is_unsupported() -> None:
    conv = FileConverter(generic_environment())
    data = file_from_bytes(b"MZ\x90\x00", name="setup.exe", mime_type="application/x-msdownload")
    with pytest.raises(UnsupportedType) as ei:
        _run(conv.to_text(data, url_hint="https://x/setup.exe"))
    assert "unknown" in str(ei.value)


def test_pdf_needs_web_environment() -> None:
    import fitz

    doc = fitz.open()
    doc.new_page().insert_text((72, 72), "Quarterly report")
    pdf = doc.tobytes()
    doc.close()

    data = file_from_bytes(pdf, name="r.pdf", mime_type="application/pdf")
    web = FileConverter(web_environment(PdfConfig()))
    assert _run(web.analyze_file_type(data)) == TypeVerdict("pdf", "application/pdf")
    assert _run(web.to_text(data)) == "Quarterly report"

    generic = FileConverter(generic_environment())
    with pytest.raises(UnsupportedFormat) as ei:
        _run(generic.to_text(data))
    assert "PDF extraction is not supported" in str(ei.value)


def test_pptx_json_mode_and_empty_deck() -> None:
    from pptx import Presentation

    prs = Presentation()
    prs.slides.add_slide(prs.slide_layouts[5]).shapes.title.text = "Agenda"
    buf = io.BytesIO()
    prs.save(buf)

    conv = FileConverter(generic_environment())
    data = file_from_bytes(buf.getvalue())
    assert _run(conv.extract_pptx(data, fmt="json")) == {"slides": [{"slideIndex": 1, "textRuns": ["Agenda"]}]}
    assert _run(conv.to_text(data)) == "Agenda"

    empty = Presentation()
    buf = io.BytesIO()
    empty.save(buf)
    with pytest.raises(ExtractionFailed) as ei:
        _run(conv.to_text(file_from_bytes(buf.getvalue())))
    assert isinstance(ei.value.cause, EmptyResult)


def test_url_to_text_uses_url_as_hint() -> None:
    fetcher = _StubFetcher(
        [FetchResult(url="https://x/notes.txt", status_code=200, content_type="", filename="notes.txt", content=b"hi")]
    )
    conv = FileConverter(generic_environment(fetcher=fetcher))
    assert _run(conv.url_to_text("https://x/notes.txt")) == "hi"
    assert fetcher.urls == ["https://x/notes.txt"]


def test_url_to_serialized_fields() -> None:
    fetcher = _StubFetcher(
        [FetchResult(url="u", status_code=200, content_type="text/csv", filename="d.csv", content=b"a,b")]
    )
    conv = FileConverter(generic_environment(fetcher=fetcher))
    data = _run(conv.url_to_serialized("https://x/d.csv", filename="override.csv"))
    assert data.name == "override.csv"
    assert data.type == "text/csv"
    assert data.cls == "Blob"


def test_http_error_status() -> None:
    fetcher = _StubFetcher([FetchResult(url="u", status_code=404, content_type="", filename="x", content=b"")])
    conv = FileConverter(generic_environment(fetcher=fetcher))
    with pytest.raises(FetchFailed) as ei:
        _run(conv.url_to_text("https://x/missing.docx"))
    assert str(ei.value) == "Failed to fetch URL: HTTP error! status: 404"


def test_transport_error_and_oversize() -> None:
    fetcher = _StubFetcher(
        [
            requests.ConnectionError("connection refused"),
            FetchResult(url="u", status_code=413, content_type="", filename="x", content=b""),
        ]
    )
    conv = FileConverter(generic_environment(fetcher=fetcher))
    with pytest.raises(FetchFailed) as ei:
        _run(conv.url_to_text("https://x/a.txt"))
    assert "connection refused" in str(ei.value)

    with pytest.raises(FetchFailed) as ei:
        _run(conv.url_to_text("https://x/big.txt"))
    assert "exceeds" in str(ei.value)


def test_concurrent_conversions_are_independent() -> None:
    conv = FileConverter(generic_environment())

    async def many():
        items = [file_from_bytes(f"doc {i}".encode(), name=f"{i}.txt") for i in range(8)]
        return await asyncio.gather(*(conv.to_text(d, url_hint=d.name) for d in items))

    assert _run(many()) == [f"doc {i}" for i in range(8)]


def test_detect_office_format_soft_fails() -> None:
    conv = FileConverter(generic_environment())
    assert _run(conv.detect_office_format(_docx_bytes("x"))) == "docx"
    assert _run(conv.detect_office_format(_xlsx_bytes())) == "xlsx"
    assert _run(conv.detect_office_format(b"\x00" * 16)) is None


def test_url_to_text_does_not_read_local_files(tmp_path) -> None:
    p = tmp_path / "secret.txt"
    p.write_text("TOP-SECRET", encoding="utf-8")
    conv = FileConverter(generic_environment())

    for url in (str(p), p.as_uri()):
        with pytest.raises(FetchFailed):
            _run(conv.url_to_text(url))


def test_conversion_start_and_finish_logged(caplog) -> None:
    conv = FileConverter(generic_environment())
    with caplog.at_level("INFO", logger="filekit.pipeline.converter"):
        _run(conv.to_text(file_from_bytes(b"hello", name="a.txt"), url_hint="a.txt"))

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("Converting a.txt as txt") for m in messages)
    assert "Converted a.txt: 5 chars" in messages
