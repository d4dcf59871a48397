from __future__ import annotations

from typing import Dict


# Magic numbers; closed set
PDF = b"\x25\x50\x44\x46"  # %PDF
ZIP = b"\x50\x4b\x03\x04"  # PK.. local file header
DOC_OLD = b"\xd0\xcf\x11\xe0"  # OLE compound file (doc/xls/ppt)

FILE_SIGNATURES: Dict[str, bytes] = {
    "PDF": PDF,
    "ZIP": ZIP,
    "DOC_OLD": DOC_OLD,
}


def has_signature(content: bytes, signature: bytes) -> bool:
    """True if `content` starts with `signature`. Short buffers never match."""
    if len(content) < len(signature):
        return False
    return bytes(content[: len(signature)]) == signature
