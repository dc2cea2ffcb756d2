"""
prefixed.py

Find cells whose text starts with a tag such as ``A:`` or ``Q(login_2):`` and
turn them into assumptions and questions.

A tag is ``<prefix>[(<id>)]:`` at the very start of the label or right after a
``>`` (labels are usually draw.io rich text). Matching is case-insensitive; a
label whose markup splits the tag is matched on its text content instead.
Cells without a tag are skipped. The cleaned value is the label's text content
with the tag removed; the raw label is kept for the sub-question split.

Identity: an explicit ``(<id>)`` is used as-is and must be unique for its
prefix within one extraction call. Cells without one get ``auto_<n>`` tokens,
counting from 1 and skipping anything already taken by an explicit id.
"""
from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Iterator, Optional

from .config import DEFAULT_EXPORT_CONFIG, ExportConfig
from .document import Cell, DiagramDocument
from .errors import DuplicateIdError

if TYPE_CHECKING:
    from .containers import ContainerNode

logger = logging.getLogger(__name__)

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_SUBQUESTION_SPLIT_RE = re.compile(r"<br\b[^>]*>\s*-\s*", re.IGNORECASE)


def prefix_pattern(prefix: str) -> re.Pattern[str]:
    return re.compile(rf"(?:^|(?<=>)){re.escape(prefix)}(?:\((?P<id>\w+)\))?:\s*", re.IGNORECASE)

# ---------------- pure matching ----------------

@dataclass(frozen=True, slots=True)
class PrefixMatch:
    value: str
    explicit_id: Optional[str]


def html_text(markup: str) -> str:
    s = _BR_RE.sub("\n", markup)
    s = _TAG_RE.sub("", s)
    return html.unescape(s).strip()

def clean_value(value: str, prefix: str) -> str:
    return html_text(prefix_pattern(prefix).sub("", value, count=1))

def match_prefix(label: str, prefix: str) -> Optional[PrefixMatch]:
    """Match the tag in label markup, or failing that in its text content."""
    pattern = prefix_pattern(prefix)
    m = pattern.search(label)
    if m is None:
        label = html_text(label)
        m = pattern.search(label)
        if m is None:
            return None
    return PrefixMatch(value=clean_value(label, prefix), explicit_id=m.group("id"))

def split_subquestions(raw_value: str) -> list[str]:
    parts = _SUBQUESTION_SPLIT_RE.split(raw_value)[1:]
    return [p.strip() for p in parts if p.strip()]

# ---------------- entities ----------------

@dataclass(eq=False)
class PrefixedEntity:
    node_id: str
    prefix: str
    prefix_id: str
    value: str
    raw_value: str
    cell: Cell = field(repr=False)

    def base_fields(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(PrefixedEntity)}


@dataclass(eq=False)
class Assumption(PrefixedEntity):
    parent_id: Optional[str] = None
    questions: list["Question"] = field(default_factory=list, repr=False)
    container: Optional["ContainerNode"] = field(default=None, repr=False)


@dataclass(eq=False)
class Question(PrefixedEntity):
    questions: list[str] = field(default_factory=list)
    target_ids: list[str] = field(default_factory=list)
    assumptions: list[Assumption] = field(default_factory=list, repr=False)


@dataclass(frozen=True, slots=True)
class Edge:
    source_id: Optional[str]
    target_id: Optional[str]

# ---------------- extraction ----------------

def _auto_ids(config: ExportConfig, reserved: set[str]) -> Iterator[str]:
    n = 1
    while True:
        candidate = config.auto_id(n)
        n += 1
        if candidate in reserved:
            continue
        reserved.add(candidate)
        yield candidate

def find_prefixed_nodes(
    document: DiagramDocument,
    prefix: str,
    config: Optional[ExportConfig] = None,
) -> list[PrefixedEntity]:
    cfg = config or DEFAULT_EXPORT_CONFIG
    reserved: set[str] = set()
    matched: list[tuple[Cell, PrefixMatch]] = []

    for cell in document.valued():
        m = match_prefix(cell.value or "", prefix)
        if m is None:
            continue
        if m.explicit_id is not None:
            if m.explicit_id in reserved:
                raise DuplicateIdError(prefix, m.explicit_id)
            reserved.add(m.explicit_id)
        matched.append((cell, m))

    auto_ids = _auto_ids(cfg, reserved)
    out: list[PrefixedEntity] = []
    for cell, m in matched:
        out.append(PrefixedEntity(
            node_id=cell.id or "",
            prefix=prefix,
            prefix_id=m.explicit_id if m.explicit_id is not None else next(auto_ids),
            value=m.value,
            raw_value=cell.value or "",
            cell=cell,
        ))
    logger.debug("Found %d nodes with prefix %r", len(out), prefix)
    return out

def extract_assumptions(document: DiagramDocument, config: Optional[ExportConfig] = None) -> list[Assumption]:
    cfg = config or DEFAULT_EXPORT_CONFIG
    return [
        Assumption(**e.base_fields(), parent_id=e.cell.parent)
        for e in find_prefixed_nodes(document, cfg.assumption_prefix, cfg)
    ]

def iter_edges(document: DiagramDocument) -> Iterator[Edge]:
    for cell in document.edges():
        yield Edge(source_id=cell.get("source"), target_id=cell.get("target"))

def extract_questions(document: DiagramDocument, config: Optional[ExportConfig] = None) -> list[Question]:
    cfg = config or DEFAULT_EXPORT_CONFIG
    questions = [
        Question(**e.base_fields(), questions=split_subquestions(e.raw_value))
        for e in find_prefixed_nodes(document, cfg.question_prefix, cfg)
    ]
    by_node_id = {q.node_id: q for q in questions}

    for edge in iter_edges(document):
        if edge.source_id == edge.target_id:
            continue
        for here, there in ((edge.source_id, edge.target_id), (edge.target_id, edge.source_id)):
            q = by_node_id.get(here) if here else None
            if q is not None and there:
                q.target_ids.append(there)
    return questions
