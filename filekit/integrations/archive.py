# filekit/integrations/archive.py
from __future__ import annotations

from typing import List, Protocol
import io
import zipfile


class ArchiveHandle(Protocol):
    def list_members(self) -> List[str]: ...

    def has_member(self, name: str) -> bool: ...

    def read_member(self, name: str) -> bytes: ...


class ArchiveReader(Protocol):
    def load(self, content: bytes) -> ArchiveHandle: ...


class ZipArchive:
    def __init__(self, zf: zipfile.ZipFile):
        self._zf = zf
        self._names = zf.namelist()

    def list_members(self) -> List[str]:
        return list(self._names)

    def has_member(self, name: str) -> bool:
        return name in self._names

    def read_member(self, name: str) -> bytes:
        return self._zf.read(name)


class ZipArchiveReader:
    """
    In-memory ZIP reader. `load` raises zipfile.BadZipFile (or OSError) on
    non-archive input; callers decide whether that is fatal.
    """

    def load(self, content: bytes) -> ZipArchive:
        return ZipArchive(zipfile.ZipFile(io.BytesIO(content)))
