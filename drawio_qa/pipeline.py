"""
pipeline.py

payload -> markup -> DiagramDocument -> DiagramGraph (linked) -> table rows

Any failure aborts the run: decode failures surface as DecodeFailedError,
duplicate explicit ids as DuplicateIdError.
"""
from __future__ import annotations

import logging
from typing import Optional

from . import codec
from .config import CodecOptions, ExportConfig
from .containers import extract_containers
from .document import DiagramDocument
from .errors import DecodeFailedError
from .flatten import TableValue, build_table
from .linking import DiagramGraph, link
from .prefixed import extract_assumptions, extract_questions

logger = logging.getLogger(__name__)


def load_document(
    payload: str,
    options: Optional[CodecOptions] = None,
    *,
    diagram_name: Optional[str] = None,
    log: Optional[logging.Logger] = None,
) -> DiagramDocument:
    markup = codec.decode(payload, options, diagram_name=diagram_name, logger=log or logger)
    if markup is None:
        raise DecodeFailedError("Failed to decode data from source payload")
    return DiagramDocument.from_markup(markup)

def extract_graph(document: DiagramDocument, config: Optional[ExportConfig] = None) -> DiagramGraph:
    graph = DiagramGraph(
        containers=extract_containers(document),
        assumptions=extract_assumptions(document, config),
        questions=extract_questions(document, config),
    )
    logger.info(
        "Extracted %d containers, %d assumptions, %d questions",
        len(graph.containers.all), len(graph.assumptions), len(graph.questions),
    )
    return link(graph)

def export_table(
    payload: str,
    options: Optional[CodecOptions] = None,
    config: Optional[ExportConfig] = None,
    *,
    diagram_name: Optional[str] = None,
    log: Optional[logging.Logger] = None,
) -> list[list[TableValue]]:
    document = load_document(payload, options, diagram_name=diagram_name, log=log)
    return build_table(extract_graph(document, config), config)
