"""
codec.py

Reversible transform between the payload stored in a draw.io file and the raw
mxGraphModel markup.

  decode:  unwrap <mxfile>/<svg> -> base64 -> raw inflate -> percent-decode
  encode:  percent-encode -> raw deflate -> base64

Every stage can be switched off through CodecOptions. A failing stage makes the
whole call return None after logging the cause; nothing partial is returned.

Between stages, binary data without base64 is carried as a Latin-1 string
(one char per byte), the same convention as the browser's atob/btoa.
"""
from __future__ import annotations

import base64
import binascii
import logging
import re
import urllib.parse
import xml.etree.ElementTree as ET
import zlib
from typing import Optional, Union

from .config import DEFAULT_CODEC_OPTIONS, CodecOptions
from .errors import CodecStageError

_log = logging.getLogger(__name__)

# characters encodeURIComponent leaves alone (besides alphanumerics)
_URI_SAFE = "-_.!~*'()"
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_WS_RE = re.compile(r"\s+")

_Data = Union[str, bytes]

# ---------------- unwrap ----------------

def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]

def _parse(text: str, what: str) -> ET.Element:
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        raise CodecStageError("unwrap", f"{what} is not well-formed XML ({e})") from e

def select_diagram(mxfile: ET.Element, diagram_name: Optional[str] = None) -> ET.Element:
    diagrams = [el for el in mxfile if _local_name(el.tag) == "diagram"]
    if not diagrams:
        raise CodecStageError("unwrap", "no <diagram> found in <mxfile>")
    if diagram_name is None:
        return diagrams[0]
    chosen = next((d for d in diagrams if d.get("name") == diagram_name), None)
    if chosen is None:
        avail = [d.get("name") for d in diagrams]
        raise CodecStageError("unwrap", f'no diagram name="{diagram_name}". Available: {avail}')
    return chosen

def unwrap_payload(payload: str, diagram_name: Optional[str] = None) -> tuple[str, bool]:
    """Return ``(data, is_markup)``.

    ``is_markup`` is True when the payload already is plain mxGraphModel markup,
    in which case the binary stages must not run.
    """
    text = payload.strip()
    if not text.startswith("<"):
        return payload, False

    root = _parse(text, "payload")
    if _local_name(root.tag) == "svg":
        content = root.get("content")
        if not content:
            raise CodecStageError("unwrap", 'no content="...mxfile..." attribute found in SVG')
        text = content.strip()
        root = _parse(text, "SVG content attribute")

    name = _local_name(root.tag)
    if name == "mxGraphModel":
        return text, True
    if name != "mxfile":
        raise CodecStageError("unwrap", f"expected <mxfile>, got <{name}>")

    chosen = select_diagram(root, diagram_name)
    inline = next((el for el in chosen if _local_name(el.tag) == "mxGraphModel"), None)
    if inline is not None:
        return ET.tostring(inline, encoding="unicode"), True
    return chosen.text or "", False

# ---------------- stages ----------------

def _binary(data: _Data) -> bytes:
    if isinstance(data, bytes):
        return data
    try:
        return data.encode("latin-1")
    except UnicodeEncodeError as e:
        raise CodecStageError("binary string", e) from e

def _text(data: _Data) -> str:
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CodecStageError("utf-8 decode", e) from e

def _utf8(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise CodecStageError("utf-8 encode", e) from e

def _base64_decode(data: _Data) -> bytes:
    try:
        return base64.b64decode(_WS_RE.sub("", _text(data)), validate=True)
    except (binascii.Error, ValueError) as e:
        raise CodecStageError("base64 decode", e) from e

def _base64_encode(data: _Data) -> str:
    raw = data if isinstance(data, bytes) else _utf8(data)
    return base64.b64encode(raw).decode("ascii")

def _inflate_raw(data: bytes) -> bytes:
    try:
        return zlib.decompress(data, wbits=-zlib.MAX_WBITS)
    except zlib.error as e:
        raise CodecStageError("raw inflate", e) from e

def _deflate_raw(data: bytes) -> bytes:
    try:
        co = zlib.compressobj(level=zlib.Z_BEST_COMPRESSION, wbits=-zlib.MAX_WBITS)
        return co.compress(data) + co.flush()
    except zlib.error as e:
        raise CodecStageError("raw deflate", e) from e

def _percent_decode(text: str) -> str:
    bad = _BAD_ESCAPE_RE.search(text)
    if bad is not None:
        raise CodecStageError("percent-decode", f"malformed escape at offset {bad.start()}")
    try:
        return urllib.parse.unquote(text, errors="strict")
    except UnicodeDecodeError as e:
        raise CodecStageError("percent-decode", e) from e

def _percent_encode(text: str) -> str:
    try:
        return urllib.parse.quote(text, safe=_URI_SAFE)
    except UnicodeEncodeError as e:
        raise CodecStageError("percent-encode", e) from e

# ---------------- public API ----------------

def decode(
    payload: str,
    options: Optional[CodecOptions] = None,
    *,
    diagram_name: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    opts = options or DEFAULT_CODEC_OPTIONS
    log = logger or _log
    try:
        unwrapped, is_markup = unwrap_payload(payload, diagram_name)
        if is_markup:
            return unwrapped
        data: _Data = unwrapped
        if opts.base64:
            data = _base64_decode(data)
        if opts.deflate and len(data) > 0:
            data = _inflate_raw(_binary(data))
        text = _text(data)
        if opts.url_encode:
            text = _percent_decode(text)
        return text
    except CodecStageError as e:
        log.error("Failed to decode diagram payload: %s", e)
        return None

def encode(
    markup: str,
    options: Optional[CodecOptions] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    opts = options or DEFAULT_CODEC_OPTIONS
    log = logger or _log
    try:
        data: _Data = markup
        if opts.url_encode:
            data = _percent_encode(markup)
        if opts.deflate and len(data) > 0:
            data = _deflate_raw(_utf8(data) if isinstance(data, str) else data)
        if opts.base64:
            return _base64_encode(data)
        return data.decode("latin-1") if isinstance(data, bytes) else data
    except CodecStageError as e:
        log.error("Failed to encode diagram markup: %s", e)
        return None
