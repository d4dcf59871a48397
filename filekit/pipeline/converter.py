# filekit/pipeline/converter.py
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union
import asyncio
import logging

import requests

from ..errors import ExtractionFailed, FetchFailed, FileKitError, InvalidInput
from ..integrations.fetch_client import FetchClient
from ..tools.file_extractors.analyzer import analyze_file_type
from ..tools.file_extractors.office_probe import OfficeFormat, detect_office_format
from ..tools.file_extractors.pptx_extractor import extract_pptx
from ..tools.file_extractors.router import route_extract
from .envelope import decode_payload, envelope_from_dict, file_from_bytes, serialize_file
from .environments import Environment
from .state import PptxFormat, SerializedData, SerializedFile, TypeVerdict

logger = logging.getLogger(__name__)

EnvelopeInput = Union[SerializedData, Mapping[str, Any], None]


def require_file(data: EnvelopeInput) -> SerializedFile:
    """Only File/Blob envelopes carry a payload; everything else is rejected."""
    if isinstance(data, Mapping):
        data = envelope_from_dict(data)
    if not isinstance(data, SerializedFile):
        raise InvalidInput("Invalid file data")
    return data


class FileConverter:
    """
    One-shot, stateless conversion of a file envelope (or URL) to text.

    Every public method is a coroutine; blocking collaborator work runs in a
    worker thread. No state is shared between calls, so any number of
    conversions may run concurrently on one instance.
    """

    def __init__(self, env: Environment):
        self.env = env
        self._fetcher = env.fetcher or FetchClient()

    # ---- detection ----

    async def detect_office_format(self, content: bytes) -> Optional[OfficeFormat]:
        return await asyncio.to_thread(detect_office_format, content, reader=self.env.archive_reader)

    async def analyze_file_type(self, data: EnvelopeInput, url_hint: Optional[str] = None) -> TypeVerdict:
        f = require_file(data)
        content = decode_payload(f.value)
        return await self._analyze(content, f, url_hint)

    async def _analyze(self, content: bytes, f: SerializedFile, url_hint: Optional[str]) -> TypeVerdict:
        return await asyncio.to_thread(
            analyze_file_type,
            content,
            url_hint=url_hint,
            declared_mime=f.type,
            include_pdf=self.env.pdf_enabled,
            reader=self.env.archive_reader,
        )

    # ---- conversion ----

    async def to_text(self, data: EnvelopeInput, url_hint: Optional[str] = None) -> str:
        f = require_file(data)
        content = decode_payload(f.value)
        verdict = await self._analyze(content, f, url_hint)

        logger.info("Converting %s as %s (%d bytes, env=%s)", f.name, verdict.extension, len(content), self.env.name)
        try:
            extracted = await asyncio.to_thread(route_extract, verdict=verdict, content=content, env=self.env)
        except FileKitError as e:
            logger.warning("Conversion failed for %s: %s", f.name, e)
            raise
        logger.info("Converted %s: %d chars", f.name, len(extracted.text))
        return extracted.text

    async def extract_pptx(self, data: EnvelopeInput, fmt: PptxFormat = "text") -> Union[str, Dict[str, Any]]:
        f = require_file(data)
        content = decode_payload(f.value)
        try:
            return await asyncio.to_thread(
                extract_pptx,
                content,
                fmt=fmt,
                reader=self.env.archive_reader,
                xml_parser=self.env.xml_parser,
            )
        except FileKitError as e:
            raise ExtractionFailed(e) from e

    # ---- adapters ----

    async def serialize(self, src: Any, filename: Optional[str] = None) -> Optional[SerializedData]:
        return await asyncio.to_thread(serialize_file, src, filename)

    async def url_to_serialized(self, url: str, filename: Optional[str] = None) -> SerializedFile:
        try:
            fr = await asyncio.to_thread(self._fetcher.fetch, url)
        except (requests.RequestException, OSError) as e:
            raise FetchFailed(e) from e

        if fr is None:
            raise InvalidInput("URL is empty")
        if fr.status_code == 413:
            raise FetchFailed(f"file exceeds {self._fetcher.max_bytes} bytes")
        if fr.status_code >= 400:
            raise FetchFailed(f"HTTP error! status: {fr.status_code}")

        return file_from_bytes(
            fr.content,
            name=filename or fr.filename,
            mime_type=fr.content_type,
            last_modified=fr.last_modified,
        )

    async def url_to_text(self, url: str) -> str:
        data = await self.url_to_serialized(url)
        return await self.to_text(data, url_hint=url)
