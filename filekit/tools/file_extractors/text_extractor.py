from __future__ import annotations


def extract_raw_text(content: bytes) -> str:
    """txt/json/csv: payload bytes as UTF-8, no parsing."""
    return content.decode("utf-8", errors="ignore")
