import sys
from pathlib import Path
from xml.sax.saxutils import quoteattr

import pytest

# Make the flat-layout package importable without installing it
ROOT_PATH = Path(__file__).resolve().parent.parent
if ROOT_PATH.as_posix() not in sys.path:
    sys.path.insert(0, ROOT_PATH.as_posix())

from drawio_qa import codec  # noqa: E402
from drawio_qa.document import DiagramDocument  # noqa: E402


class ModelBuilder:
    """Collects mxCell snippets and renders them as an mxGraphModel document."""

    def __init__(self):
        self.cells = []

    def vertex(self, id, value, parent="1", style="rounded=0;whiteSpace=wrap;html=1;"):
        self.cells.append(
            f'<mxCell id="{id}" value={quoteattr(value)} style="{style}" parent="{parent}" vertex="1">'
            f'<mxGeometry x="0" y="0" width="120" height="60" as="geometry"/></mxCell>'
        )
        return self

    def container(self, id, value, parent="1"):
        return self.vertex(id, value, parent=parent, style="swimlane;container=1;html=1;")

    def edge(self, id, source=None, target=None):
        ends = ""
        if source is not None:
            ends += f' source="{source}"'
        if target is not None:
            ends += f' target="{target}"'
        self.cells.append(
            f'<mxCell id="{id}" style="edgeStyle=orthogonalEdgeStyle;" parent="1"{ends} edge="1">'
            f'<mxGeometry relative="1" as="geometry"/></mxCell>'
        )
        return self

    def raw(self, snippet):
        self.cells.append(snippet)
        return self

    def xml(self):
        body = "".join(self.cells)
        return f'<mxGraphModel><root><mxCell id="0"/><mxCell id="1" parent="0"/>{body}</root></mxGraphModel>'

    def document(self):
        return DiagramDocument.from_markup(self.xml())

    def mxfile(self, name="Page-1"):
        payload = codec.encode(self.xml())
        return f'<mxfile host="app.diagrams.net"><diagram name="{name}" id="d1">{payload}</diagram></mxfile>'


@pytest.fixture
def model():
    return ModelBuilder()


@pytest.fixture
def example_model(model):
    """One container holding one assumption, with a two-part question wired to it."""
    return (
        model
        .container("c1", "Group")
        .vertex("a1", "A: Widget works", parent="c1")
        .vertex("q1", "Q: Header<br>- Does it scale?<br>- Is it fast?")
        .edge("e1", source="q1", target="a1")
    )
