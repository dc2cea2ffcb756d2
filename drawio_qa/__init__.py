"""
drawio_qa

Extract assumptions (``A:``), questions (``Q:``) and the containers holding
them from draw.io diagrams, and flatten them into table rows.
"""
from __future__ import annotations

from .codec import decode, encode
from .config import CodecOptions, ExportConfig
from .containers import ContainerForest, ContainerNode, extract_containers
from .document import Cell, DiagramDocument
from .errors import (
    CodecStageError,
    DecodeFailedError,
    DocumentParseError,
    DrawioQaError,
    DuplicateIdError,
    UnknownFormatError,
)
from .flatten import Row, build_table, flatten
from .linking import DiagramGraph, connect_containers, connect_questions, link
from .pipeline import export_table, extract_graph, load_document
from .prefixed import (
    Assumption,
    PrefixedEntity,
    Question,
    extract_assumptions,
    extract_questions,
    find_prefixed_nodes,
    match_prefix,
)
from .writers import CsvTableWriter, TableWriter, XlsxTableWriter, get_writer

__version__ = "0.1.0"
