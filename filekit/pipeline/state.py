from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple, Union


FileCls = Literal["File", "Blob"]
PptxFormat = Literal["text", "json"]


@dataclass(frozen=True)
class SerializedFile:
    """Transport-safe file: the payload travels base64-encoded in `value`."""

    name: str
    type: str
    last_modified: int
    value: str
    cls: FileCls = "Blob"


@dataclass(frozen=True)
class SerializedFormData:
    # field name -> nested envelopes, in insertion order
    value: Tuple[Tuple[str, Tuple[Optional["SerializedData"], ...]], ...] = ()
    cls: Literal["FormData"] = "FormData"


@dataclass(frozen=True)
class SerializedJson:
    value: str
    cls: Literal["json"] = "json"


SerializedData = Union[SerializedFile, SerializedFormData, SerializedJson]


@dataclass(frozen=True)
class TypeVerdict:
    extension: str
    mime_type: str


@dataclass
class PptxSlide:
    slide_index: int
    text_runs: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"slideIndex": self.slide_index, "textRuns": list(self.text_runs)}
