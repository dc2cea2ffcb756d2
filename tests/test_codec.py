"""
Tests for drawio_qa.codec

Test Coverage:
- encode()/decode(): default round trip, toggled stages, empty input
- unwrap: <mxfile>, named diagrams, inline models, plain models, SVG exports
- Failures: every broken stage returns None and logs the cause
"""
import base64
import logging
import urllib.parse
import zlib
from xml.sax.saxutils import quoteattr

import pytest

from drawio_qa.codec import decode, encode, unwrap_payload
from drawio_qa.config import CodecOptions
from drawio_qa.document import DiagramDocument


MARKUPS = [
    '<mxGraphModel><root><mxCell id="0"/></root></mxGraphModel>',
    '<mxCell id="a" value="A: Zürich &amp; 東京 – 100% sure?"/>',
    "plain text with spaces, +plus+ and ~tilde~ (parens) 'quotes' *stars*",
    "line one\nline two\ttabbed",
]


@pytest.mark.parametrize("markup", MARKUPS)
def test_round_trip_default_options(markup):
    """decode(encode(x)) returns x unchanged."""
    encoded = encode(markup)

    assert encoded is not None
    assert decode(encoded) == markup


def test_encode_pipeline_is_urlencode_deflate_base64():
    """Encoded payload unpacks with plain base64 + raw inflate + unquote."""
    markup = '<mxGraphModel a="1 2"/>'

    encoded = encode(markup)

    raw = zlib.decompress(base64.b64decode(encoded), wbits=-15)
    assert urllib.parse.unquote(raw.decode("ascii")) == markup
    assert "%20" in raw.decode("ascii")


def test_encode_keeps_uri_component_safe_characters():
    """Only characters escaped by encodeURIComponent are percent-encoded."""
    encoded = encode("a-b_c.d!e~f*g'h(i)j k", CodecOptions(base64=False, deflate=False))

    assert encoded == "a-b_c.d!e~f*g'h(i)j%20k"


@pytest.mark.parametrize("options", [
    CodecOptions(url_encode=False),
    CodecOptions(deflate=False),
    CodecOptions(base64=False),
    CodecOptions(base64=False, deflate=False),
    CodecOptions(base64=False, deflate=False, url_encode=False),
])
def test_round_trip_with_toggled_stages(options):
    markup = '<mxGraphModel><root><mxCell value="Größe: 5 %"/></root></mxGraphModel>'

    assert decode(encode(markup, options), options) == markup


def test_all_stages_off_is_identity():
    options = CodecOptions(base64=False, deflate=False, url_encode=False)

    assert encode("abc %zz", options) == "abc %zz"
    assert decode("abc %zz", options) == "abc %zz"


def test_empty_input_round_trips():
    """Empty data skips the deflate stage instead of failing."""
    assert encode("") == ""
    assert decode("") == ""


def test_decode_unwraps_first_diagram_of_mxfile(model):
    model.vertex("a1", "A: first")

    decoded = decode(model.mxfile())

    assert decoded == model.xml()


def test_decode_selects_diagram_by_name(model):
    first = encode("<mxGraphModel><root/></mxGraphModel>")
    second = encode('<mxGraphModel><root><mxCell id="x"/></root></mxGraphModel>')
    mxfile = (
        f'<mxfile><diagram name="One">{first}</diagram>'
        f'<diagram name="Two">{second}</diagram></mxfile>'
    )

    assert decode(mxfile, diagram_name="Two") == '<mxGraphModel><root><mxCell id="x"/></root></mxGraphModel>'


def test_decode_unknown_diagram_name_fails(caplog):
    mxfile = f'<mxfile><diagram name="One">{encode("<x/>")}</diagram></mxfile>'

    with caplog.at_level(logging.ERROR):
        assert decode(mxfile, diagram_name="Missing") is None

    assert "Missing" in caplog.text


def test_decode_inline_model_skips_binary_stages():
    """Uncompressed files keep the model as a child element of <diagram>."""
    mxfile = (
        '<mxfile><diagram name="Page-1">'
        '<mxGraphModel><root><mxCell id="0"/><mxCell id="a1" value="A: x" parent="0"/></root></mxGraphModel>'
        '</diagram></mxfile>'
    )

    decoded = decode(mxfile)

    assert decoded is not None
    doc = DiagramDocument.from_markup(decoded)
    assert [c.id for c in doc.cells] == ["0", "a1"]


def test_decode_plain_model_is_returned_as_is():
    markup = '<mxGraphModel><root><mxCell id="0"/></root></mxGraphModel>'

    assert decode("  " + markup + "\n") == markup


def test_decode_svg_export(model):
    model.vertex("a1", "A: in svg")
    svg = f'<svg xmlns="http://www.w3.org/2000/svg" content={quoteattr(model.mxfile())}><g/></svg>'

    assert decode(svg) == model.xml()


def test_unwrap_leaves_non_markup_untouched():
    assert unwrap_payload("  abc=  ") == ("  abc=  ", False)


@pytest.mark.parametrize("payload, stage", [
    ("!!!not base64!!!", "base64"),
    (base64.b64encode(b"\xff\xff\xff\xff").decode("ascii"), "inflate"),
    ("<mxfile><diagram>", "unwrap"),
    ("<svg xmlns='http://www.w3.org/2000/svg'/>", "unwrap"),
    ("<html/>", "unwrap"),
])
def test_decode_failure_returns_none_and_logs(payload, stage, caplog):
    with caplog.at_level(logging.ERROR):
        assert decode(payload) is None

    assert stage in caplog.text


def test_decode_malformed_percent_escape_fails(caplog):
    options = CodecOptions(base64=False, deflate=False)

    with caplog.at_level(logging.ERROR):
        assert decode("100%zz", options) is None

    assert "percent-decode" in caplog.text


def test_decode_uses_supplied_logger(caplog):
    log = logging.getLogger("tests.codec.custom")

    with caplog.at_level(logging.ERROR, logger="tests.codec.custom"):
        decode("***", logger=log)

    assert [r.name for r in caplog.records] == ["tests.codec.custom"]
