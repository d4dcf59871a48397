# filekit/tools/file_extractors/pptx_extractor.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union
import re

from ...errors import PPTX_STAGE, EmptyResult, collaborator_stage, staged
from ...integrations.archive import ArchiveReader, ZipArchiveReader
from ...integrations.xml_parser import DRAWINGML_NS, XmlParser, iter_text, parse_xml, qname
from ...pipeline.state import PptxFormat, PptxSlide


_SLIDE_RE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")
_TEXT_RUN = qname(DRAWINGML_NS, "t")


def slide_members(names: List[str]) -> List[str]:
    """Slide XML members sorted by slide number: slide2 before slide10."""
    numbered = []
    for name in names:
        m = _SLIDE_RE.match(name)
        if m:
            numbered.append((int(m.group(1)), name))
    numbered.sort()
    return [name for _, name in numbered]


def read_slides(
    content: bytes,
    *,
    reader: Optional[ArchiveReader] = None,
    xml_parser: Optional[XmlParser] = None,
) -> List[PptxSlide]:
    reader = reader or ZipArchiveReader()
    xml_parser = xml_parser or parse_xml

    archive = reader.load(content)
    slides: List[PptxSlide] = []
    for si, name in enumerate(slide_members(archive.list_members()), start=1):
        root = xml_parser(archive.read_member(name))
        slides.append(PptxSlide(slide_index=si, text_runs=list(iter_text(root, _TEXT_RUN))))
    return slides


def slides_to_text(slides: List[PptxSlide]) -> str:
    return "\n\n".join(" ".join(s.text_runs) for s in slides)


def extract_pptx(
    content: bytes,
    *,
    fmt: PptxFormat = "text",
    reader: Optional[ArchiveReader] = None,
    xml_parser: Optional[XmlParser] = None,
) -> Union[str, Dict[str, Any]]:
    """
    Walk slide XML in slide order and collect the DrawingML text runs.

    fmt="text": runs joined by a space, slides by a blank line.
    fmt="json": {"slides": [{"slideIndex": 1, "textRuns": [...]}, ...]}

    Text mode raises EmptyResult when there is no text at all; JSON mode
    returns the slide list as-is, even when it is empty.
    """
    with collaborator_stage(PPTX_STAGE):
        slides = read_slides(content, reader=reader, xml_parser=xml_parser)

    if fmt == "json":
        return {"slides": [s.to_dict() for s in slides]}

    text = slides_to_text(slides)
    if not text.strip():
        raise EmptyResult(staged(PPTX_STAGE, "presentation contains no slide text"))
    return text
