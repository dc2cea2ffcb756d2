"""
cli.py

Usage:
  python -m drawio_qa decode input.drawio out.xml [--no-base64] [--no-deflate] [--no-url-encode]
  python -m drawio_qa encode model.xml out.txt
  python -m drawio_qa parse input.drawio csv out.csv [--diagram NAME]
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from . import codec
from .config import CodecOptions
from .errors import DrawioQaError, DecodeFailedError
from .pipeline import export_table
from .writers import WRITERS, get_writer

logger = logging.getLogger("drawio_qa")


def _codec_flags(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--no-base64", action="store_true", help="Skip the base64 stage")
    ap.add_argument("--no-deflate", action="store_true", help="Skip the raw deflate stage")
    ap.add_argument("--no-url-encode", action="store_true", help="Skip the percent-encoding stage")

def _codec_options(args: argparse.Namespace) -> CodecOptions:
    return CodecOptions(
        base64=not args.no_base64,
        deflate=not args.no_deflate,
        url_encode=not args.no_url_encode,
    )

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="drawio-qa", description="Export assumptions and questions from draw.io diagrams")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    dec = sub.add_parser("decode", help="Decode a .drawio payload into mxGraphModel XML")
    dec.add_argument("source")
    dec.add_argument("dest")
    dec.add_argument("--diagram", default=None, help="Diagram name (if multiple)")
    _codec_flags(dec)

    enc = sub.add_parser("encode", help="Encode mxGraphModel XML into a <diagram> payload")
    enc.add_argument("source")
    enc.add_argument("dest")
    _codec_flags(enc)

    par = sub.add_parser("parse", help="Export assumptions/questions as a table")
    par.add_argument("source")
    par.add_argument("export_type", choices=sorted(WRITERS))
    par.add_argument("dest")
    par.add_argument("--diagram", default=None, help="Diagram name (if multiple)")
    _codec_flags(par)
    return ap

def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")

def cmd_decode(args: argparse.Namespace) -> None:
    text = Path(args.source).read_text(encoding="utf-8")
    decoded = codec.decode(text, _codec_options(args), diagram_name=args.diagram, logger=logger)
    if decoded is None:
        raise DecodeFailedError(f"Failed to decode data from {args.source}")
    _write_text(Path(args.dest), decoded)

def cmd_encode(args: argparse.Namespace) -> None:
    text = Path(args.source).read_text(encoding="utf-8")
    encoded = codec.encode(text, _codec_options(args), logger=logger)
    if encoded is None:
        raise DrawioQaError(f"Failed to encode data from {args.source}")
    _write_text(Path(args.dest), encoded)

def cmd_parse(args: argparse.Namespace) -> None:
    writer = get_writer(args.export_type)
    text = Path(args.source).read_text(encoding="utf-8")
    rows = export_table(text, _codec_options(args), diagram_name=args.diagram, log=logger)
    writer.write(rows, Path(args.dest))

COMMANDS = {
    "decode": cmd_decode,
    "encode": cmd_encode,
    "parse": cmd_parse,
}

def main(argv: Sequence[str]) -> int:
    args = build_parser().parse_args(list(argv))
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        COMMANDS[args.command](args)
    except DrawioQaError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("I/O error: %s", e)
        return 1
    return 0


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
