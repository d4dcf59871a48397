"""
Serialization adapters: host-native objects <-> transport-safe envelopes.

Wire shape (dict form), one per variant:
  {"cls": "File"|"Blob", "name", "type", "lastModified", "value": <base64>}
  {"cls": "FormData", "value": [[field, [<envelope>, ...]], ...]}
  {"cls": "json", "value": <json text>}
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
import base64
import binascii
import json
import mimetypes
import os
import time

from ..errors import InvalidInput
from .state import SerializedData, SerializedFile, SerializedFormData, SerializedJson


def encode_payload(content: bytes) -> str:
    return base64.b64encode(content).decode("ascii")


def decode_payload(value: str) -> bytes:
    try:
        return base64.b64decode(value or "", validate=False)
    except (binascii.Error, ValueError) as e:
        raise InvalidInput(f"Invalid base64 payload: {e}") from e


def _now_ms() -> int:
    return int(time.time() * 1000)


def _guess_mime(name: str) -> str:
    return (mimetypes.guess_type(name)[0] or "").lower()


def _is_file_like(src: Any) -> bool:
    return isinstance(src, (bytes, bytearray, memoryview, Path)) or callable(getattr(src, "read", None))


def file_from_bytes(
    content: bytes,
    *,
    name: Optional[str] = None,
    mime_type: Optional[str] = None,
    last_modified: Optional[int] = None,
    cls: str = "Blob",
) -> SerializedFile:
    name = name or "untitled"
    return SerializedFile(
        name=name,
        type=mime_type if mime_type is not None else _guess_mime(name),
        last_modified=last_modified or _now_ms(),
        value=encode_payload(bytes(content)),
        cls="File" if cls == "File" else "Blob",
    )


def serialize_file(src: Any, filename: Optional[str] = None) -> Optional[SerializedData]:
    """
    Wrap a host object into an envelope.

    - None -> None
    - bytes-like -> Blob
    - Path or readable binary object -> File
    - mapping whose values are all file-likes (or lists of them) -> FormData
    - anything else -> json
    """
    if src is None:
        return None

    if isinstance(src, (bytes, bytearray, memoryview)):
        return file_from_bytes(bytes(src), name=filename)

    if isinstance(src, Path):
        stat = src.stat()
        return file_from_bytes(
            src.read_bytes(),
            name=src.name or filename,
            last_modified=int(stat.st_mtime * 1000),
            cls="File",
        )

    if callable(getattr(src, "read", None)):
        data = src.read()
        if isinstance(data, str):
            data = data.encode("utf-8")
        raw_name = getattr(src, "name", None)
        name = os.path.basename(raw_name) if isinstance(raw_name, str) else None
        return file_from_bytes(
            data,
            name=name or filename,
            mime_type=getattr(src, "content_type", None),
            cls="File",
        )

    if isinstance(src, Mapping) and src and all(_is_form_value(v) for v in src.values()):
        fields = []
        for key, v in src.items():
            items = v if isinstance(v, (list, tuple)) else [v]
            fields.append((str(key), tuple(serialize_file(item) for item in items)))
        return SerializedFormData(value=tuple(fields))

    try:
        return SerializedJson(value=json.dumps(src))
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Cannot serialize {type(src).__name__}: {e}") from e


def _is_form_value(v: Any) -> bool:
    if isinstance(v, (list, tuple)):
        return bool(v) and all(_is_file_like(x) for x in v)
    return _is_file_like(v)


def envelope_to_dict(data: Optional[SerializedData]) -> Optional[Dict[str, Any]]:
    if data is None:
        return None
    if isinstance(data, SerializedFile):
        return {
            "cls": data.cls,
            "name": data.name,
            "type": data.type,
            "lastModified": data.last_modified,
            "value": data.value,
        }
    if isinstance(data, SerializedFormData):
        return {
            "cls": "FormData",
            "value": [[k, [envelope_to_dict(x) for x in items]] for k, items in data.value],
        }
    return {"cls": "json", "value": data.value}


def envelope_from_dict(raw: Optional[Mapping[str, Any]]) -> Optional[SerializedData]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise InvalidInput("Invalid file data")

    cls = raw.get("cls")
    if cls in ("File", "Blob"):
        return SerializedFile(
            name=str(raw.get("name") or "untitled"),
            type=str(raw.get("type") or ""),
            last_modified=int(raw.get("lastModified") or 0),
            value=str(raw.get("value") or ""),
            cls=cls,
        )
    if cls == "FormData":
        fields: List[Any] = []
        for k, items in raw.get("value") or []:
            fields.append((str(k), tuple(envelope_from_dict(x) for x in items)))
        return SerializedFormData(value=tuple(fields))
    if cls == "json":
        return SerializedJson(value=str(raw.get("value") or ""))
    raise InvalidInput(f"Invalid file data: unknown envelope class {cls!r}")
