"""
flatten.py

Turn a linked DiagramGraph into table rows.

Per assumption: one row for the assumption alone, then one row per
(question, sub-question) pair in link order. Every row carries the
assumption's container chain, outermost first, padded with "" to the deepest
container of the diagram.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import DEFAULT_EXPORT_CONFIG, DEPTH_COLUMN_PREFIX, HEADER_COLUMNS, ExportConfig
from .linking import DiagramGraph
from .prefixed import Assumption, Question

TableValue = Optional[str]


@dataclass(frozen=True, slots=True)
class Row:
    assumption_id: str
    question_id: Optional[str]
    subquestion_id: Optional[str]
    assumption: str
    question: Optional[str]
    container: str
    container_depths: tuple[str, ...]

    def as_list(self) -> list[TableValue]:
        return [
            self.assumption_id,
            self.question_id,
            self.subquestion_id,
            self.assumption,
            self.question,
            self.container,
            *self.container_depths,
        ]


def header_row(max_depth: int) -> list[str]:
    return [*HEADER_COLUMNS, *(f"{DEPTH_COLUMN_PREFIX}{i}" for i in range(1, max_depth + 1))]

def container_chain(assumption: Assumption, max_depth: int) -> list[str]:
    chain = [c.value or "" for c in assumption.container.chain()] if assumption.container else []
    return chain + [""] * (max_depth - len(chain))

def subquestion_id(assumption: Assumption, question: Question, index: int) -> str:
    return f"{assumption.prefix}({assumption.prefix_id}):{question.prefix}({question.prefix_id}):{index + 1}"

def _rows_for(assumption: Assumption, max_depth: int, separator: str) -> list[Row]:
    depths = tuple(container_chain(assumption, max_depth))
    summary = separator.join(v for v in depths if v)

    rows = [Row(assumption.prefix_id, None, None, assumption.value, None, summary, depths)]
    for q in assumption.questions:
        for i, text in enumerate(q.questions):
            rows.append(Row(
                assumption_id=assumption.prefix_id,
                question_id=q.prefix_id,
                subquestion_id=subquestion_id(assumption, q, i),
                assumption=assumption.value,
                question=text,
                container=summary,
                container_depths=depths,
            ))
    return rows

def flatten(graph: DiagramGraph, config: Optional[ExportConfig] = None) -> list[Row]:
    cfg = config or DEFAULT_EXPORT_CONFIG
    max_depth = graph.containers.max_depth
    rows: list[Row] = []
    for a in graph.assumptions:
        rows.extend(_rows_for(a, max_depth, cfg.container_separator))
    return rows

def build_table(graph: DiagramGraph, config: Optional[ExportConfig] = None) -> list[list[TableValue]]:
    """Header row followed by one list per Row; this is what the writers consume."""
    header: list[TableValue] = list(header_row(graph.containers.max_depth))
    return [header, *(r.as_list() for r in flatten(graph, config))]
