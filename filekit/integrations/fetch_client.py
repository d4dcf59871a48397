# filekit/integrations/fetch_client.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse
import logging
import mimetypes

import requests

from ..errors import FetchFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    url: str
    status_code: int
    content_type: str
    filename: str
    content: bytes
    last_modified: Optional[int] = None  # epoch ms, local files only


def _filename_from_url(url: str) -> str:
    return unquote(url.split("?")[0].split("#")[0].rstrip("/").split("/")[-1]) or "download"


def _local_path(url: str) -> Optional[Path]:
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    if parsed.scheme in ("http", "https"):
        return None
    # bare filesystem path (a Windows drive letter parses as a scheme)
    if not parsed.scheme or len(parsed.scheme) == 1:
        return Path(url)
    return None


class FetchClient:
    """
    Downloads http(s) URLs with a size cap.

    file:// URLs and bare paths are read from disk only when allow_local is
    set; otherwise anything that is not http(s) is refused with FetchFailed.
    """

    def __init__(self, timeout_sec: int = 60, max_mb: int = 40, allow_local: bool = False):
        self.timeout_sec = timeout_sec
        self.max_bytes = max_mb * 1024 * 1024
        self.allow_local = allow_local
        self._session = requests.Session()

    def fetch(self, url: str) -> Optional[FetchResult]:
        url = (url or "").strip()
        if not url:
            return None

        local = _local_path(url)
        if local is not None:
            if not self.allow_local:
                logger.warning("Refusing local read: %s", url)
                raise FetchFailed(f"local paths are not allowed: {url}")
            return self._read_local(url, local)

        scheme = urlparse(url).scheme
        if scheme not in ("http", "https"):
            raise FetchFailed(f"unsupported URL scheme: {scheme}")

        r = self._session.get(url, timeout=self.timeout_sec, stream=True, allow_redirects=True)
        try:
            ct = (r.headers.get("content-type") or "").split(";")[0].strip().lower()

            # best-effort filename
            filename = ""
            cd = r.headers.get("content-disposition") or ""
            if "filename=" in cd:
                filename = cd.split("filename=")[-1].split(";")[0].strip().strip('"')
            if not filename:
                filename = _filename_from_url(url)

            if r.status_code >= 400:
                return FetchResult(url=url, status_code=r.status_code, content_type=ct, filename=filename, content=b"")

            chunks = []
            total = 0
            for part in r.iter_content(chunk_size=1024 * 64):
                if not part:
                    continue
                chunks.append(part)
                total += len(part)
                if total > self.max_bytes:
                    # refuse huge downloads
                    logger.warning("Refusing download over %d bytes: %s", self.max_bytes, url)
                    return FetchResult(url=url, status_code=413, content_type=ct, filename=filename, content=b"")

            return FetchResult(url=url, status_code=r.status_code, content_type=ct, filename=filename, content=b"".join(chunks))
        finally:
            r.close()

    def _read_local(self, url: str, path: Path) -> FetchResult:
        ct = (mimetypes.guess_type(path.name)[0] or "").lower()
        if not path.is_file():
            return FetchResult(url=url, status_code=404, content_type=ct, filename=path.name, content=b"")

        stat = path.stat()
        if stat.st_size > self.max_bytes:
            logger.warning("Refusing file over %d bytes: %s", self.max_bytes, path)
            return FetchResult(url=url, status_code=413, content_type=ct, filename=path.name, content=b"")

        return FetchResult(
            url=url,
            status_code=200,
            content_type=ct,
            filename=path.name,
            content=path.read_bytes(),
            last_modified=int(stat.st_mtime * 1000),
        )
