"""
document.py

Read-only view over decoded mxGraphModel markup.

Every <mxCell> becomes a Cell. Shapes carrying custom properties are stored by
draw.io as <object>/<UserObject label=...><mxCell .../></object>; those wrappers
are folded into a single Cell whose id and value come from the wrapper.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from .errors import DocumentParseError

_WRAPPER_TAGS = {"object", "UserObject"}


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]

def style_value(style: str, key: str) -> Optional[str]:
    """Value of one style entry; a bare flag such as ``container`` reads as "1"."""
    for part in style.split(";"):
        name, sep, value = part.partition("=")
        if name.strip() == key:
            return value.strip() if sep else "1"
    return None


@dataclass(frozen=True, slots=True)
class Cell:
    attrs: dict[str, str] = field(default_factory=dict)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrs.get(name, default)

    @property
    def id(self) -> Optional[str]:
        return self.attrs.get("id") or None

    @property
    def value(self) -> Optional[str]:
        return self.attrs.get("value")

    @property
    def parent(self) -> Optional[str]:
        return self.attrs.get("parent") or None

    @property
    def is_container(self) -> bool:
        return style_value(self.attrs.get("style", ""), "container") == "1"

    @property
    def is_edge(self) -> bool:
        return self.attrs.get("edge") == "1"


def _cell_from_wrapper(wrapper: ET.Element) -> Optional[Cell]:
    inner = next((c for c in wrapper if _local_name(c.tag) == "mxCell"), None)
    if inner is None:
        return None
    attrs = dict(inner.attrib)
    if wrapper.get("id"):
        attrs["id"] = wrapper.get("id", "")
    if "label" in wrapper.attrib:
        attrs["value"] = wrapper.get("label", "")
    return Cell(attrs=attrs)

def _iter_cells(root: ET.Element) -> Iterator[Cell]:
    wrapped: set[int] = set()
    for elem in root.iter():
        name = _local_name(elem.tag)
        if name in _WRAPPER_TAGS:
            cell = _cell_from_wrapper(elem)
            if cell is None:
                continue
            wrapped.update(id(c) for c in elem if _local_name(c.tag) == "mxCell")
            yield cell
        elif name == "mxCell" and id(elem) not in wrapped:
            yield Cell(attrs=dict(elem.attrib))


class DiagramDocument:
    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self.cells: list[Cell] = list(_iter_cells(root))

    @classmethod
    def from_markup(cls, markup: str) -> "DiagramDocument":
        try:
            root = ET.fromstring(markup)
        except ET.ParseError as e:
            raise DocumentParseError(f"Diagram markup is not well-formed XML: {e}") from e
        return cls(root)

    def select(self, predicate: Callable[[Cell], bool]) -> list[Cell]:
        return [c for c in self.cells if predicate(c)]

    def containers(self) -> list[Cell]:
        return self.select(lambda c: c.is_container and c.id is not None)

    def edges(self) -> list[Cell]:
        return self.select(lambda c: c.is_edge)

    def valued(self) -> list[Cell]:
        return self.select(lambda c: c.value is not None and c.id is not None)

    def __len__(self) -> int:
        return len(self.cells)
