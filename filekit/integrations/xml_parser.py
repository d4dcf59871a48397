# filekit/integrations/xml_parser.py
from __future__ import annotations

from typing import Callable, Iterator, Union
import xml.etree.ElementTree as ET


# DrawingML main namespace: the "a:" prefix in slide XML
DRAWINGML_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"

XmlParser = Callable[[Union[bytes, str]], ET.Element]


def parse_xml(content: Union[bytes, str]) -> ET.Element:
    return ET.fromstring(content)


def qname(ns: str, local: str) -> str:
    return f"{{{ns}}}{local}"


def iter_text(root: ET.Element, tag: str) -> Iterator[str]:
    """Text content of every `tag` element under `root`, document order."""
    for el in root.iter(tag):
        yield "".join(el.itertext())
