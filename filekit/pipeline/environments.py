"""
Host environment profiles.

Detection and dispatch are shared; an Environment only decides which
extensions are convertible and which collaborators are used to do it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..config import Settings
from ..integrations.archive import ArchiveReader, ZipArchiveReader
from ..integrations.fetch_client import FetchClient
from ..integrations.xml_parser import XmlParser, parse_xml
from ..tools.file_extractors.pdf_extractor import PdfConfig


BASE_EXTENSIONS: Tuple[str, ...] = ("doc", "docx", "xls", "xlsx", "txt", "json", "csv", "pptx")
WEB_EXTENSIONS: Tuple[str, ...] = ("pdf",) + BASE_EXTENSIONS


@dataclass(frozen=True)
class Environment:
    name: str
    supported_extensions: Tuple[str, ...]
    declined_extensions: Tuple[str, ...] = ()
    pdf: Optional[PdfConfig] = None
    archive_reader: ArchiveReader = field(default_factory=ZipArchiveReader)
    xml_parser: XmlParser = parse_xml
    fetcher: Optional[FetchClient] = None

    @property
    def pdf_enabled(self) -> bool:
        return self.pdf is not None

    def supports(self, extension: str) -> bool:
        return extension in self.supported_extensions

    def declines(self, extension: str) -> bool:
        return extension in self.declined_extensions


def web_environment(pdf: PdfConfig, *, fetcher: Optional[FetchClient] = None) -> Environment:
    """Full profile, PDF included. `pdf` must be supplied up front."""
    return Environment(
        name="web",
        supported_extensions=WEB_EXTENSIONS,
        declined_extensions=("ppt",),
        pdf=pdf,
        fetcher=fetcher,
    )


def native_environment(*, fetcher: Optional[FetchClient] = None) -> Environment:
    return Environment(
        name="native",
        supported_extensions=BASE_EXTENSIONS,
        declined_extensions=("pdf", "ppt"),
        fetcher=fetcher,
    )


def generic_environment(*, fetcher: Optional[FetchClient] = None) -> Environment:
    return Environment(
        name="generic",
        supported_extensions=BASE_EXTENSIONS,
        declined_extensions=("pdf", "ppt"),
        fetcher=fetcher,
    )


def environment_from_settings(settings: Settings, *, allow_local: bool = False) -> Environment:
    fetcher = FetchClient(
        timeout_sec=settings.http_timeout_sec,
        max_mb=settings.fetch_max_mb,
        allow_local=allow_local,
    )
    if settings.environment == "web":
        return web_environment(PdfConfig(max_pages=settings.pdf_max_pages), fetcher=fetcher)
    if settings.environment == "native":
        return native_environment(fetcher=fetcher)
    if settings.environment == "generic":
        return generic_environment(fetcher=fetcher)
    raise ValueError(f"Unknown environment: {settings.environment!r}")
