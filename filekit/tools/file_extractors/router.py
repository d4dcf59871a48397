# filekit/tools/file_extractors/router.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, cast

from ...errors import ExtractionFailed, UnsupportedFormat, UnsupportedType
from ...pipeline.environments import Environment
from ...pipeline.state import TypeVerdict
from .docx_extractor import extract_docx
from .pdf_extractor import extract_pdf
from .pptx_extractor import extract_pptx
from .text_extractor import extract_raw_text
from .xlsx_extractor import extract_xlsx


@dataclass(frozen=True)
class Extracted:
    text: str
    extension: str
    mime: str


Strategy = Callable[[bytes, Environment], str]


def _pdf(content: bytes, env: Environment) -> str:
    if env.pdf is None:
        raise UnsupportedFormat(f"PDF extraction is not supported in the {env.name} environment.")
    return extract_pdf(content, config=env.pdf)


def _word(content: bytes, env: Environment) -> str:
    return extract_docx(content, reader=env.archive_reader)


def _excel(content: bytes, env: Environment) -> str:
    return extract_xlsx(content)


def _pptx(content: bytes, env: Environment) -> str:
    text = extract_pptx(content, fmt="text", reader=env.archive_reader, xml_parser=env.xml_parser)
    return cast(str, text)


def _raw(content: bytes, env: Environment) -> str:
    return extract_raw_text(content)


STRATEGIES: Dict[str, Strategy] = {
    "pdf": _pdf,
    "doc": _word,
    "docx": _word,
    "xls": _excel,
    "xlsx": _excel,
    "pptx": _pptx,
    "txt": _raw,
    "json": _raw,
    "csv": _raw,
}

_DECLINED_REASONS: Dict[str, str] = {
    "pdf": "PDF extraction is not supported in the {env} environment.",
    "ppt": "Legacy PPT format is not supported. Please convert to PPTX.",
}


def check_supported(verdict: TypeVerdict, env: Environment) -> Strategy:
    ext = verdict.extension
    if env.declines(ext):
        reason = _DECLINED_REASONS.get(ext, "Format '{ext}' is not supported in the {env} environment.")
        raise UnsupportedFormat(reason.format(env=env.name, ext=ext))
    if not env.supports(ext) or ext not in STRATEGIES:
        raise UnsupportedType(ext, env.supported_extensions)
    return STRATEGIES[ext]


def route_extract(*, verdict: TypeVerdict, content: bytes, env: Environment) -> Extracted:
    """
    Run the one strategy bound to the verdict. Any strategy failure comes back
    as ExtractionFailed; nothing partial is returned.
    """
    strategy = check_supported(verdict, env)
    try:
        text = strategy(content, env)
    except Exception as e:
        raise ExtractionFailed(e) from e
    return Extracted(text=text, extension=verdict.extension, mime=verdict.mime_type)
