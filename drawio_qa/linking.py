"""
linking.py

Cross-wire extracted entities. Both passes annotate the entities in place and
are independent of each other.

- questions <-> assumptions: via the question's edge targets
- assumptions -> containers: via the assumption's parent id

References that resolve to nothing are dropped; the entity keeps an empty
relation.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .containers import ContainerForest, ContainerNode
from .prefixed import Assumption, Question

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class DiagramGraph:
    containers: ContainerForest
    assumptions: list[Assumption] = field(default_factory=list)
    questions: list[Question] = field(default_factory=list)


def connect_questions(graph: DiagramGraph) -> DiagramGraph:
    by_node_id: dict[str, Assumption] = {a.node_id: a for a in graph.assumptions}
    for q in graph.questions:
        for target_id in q.target_ids:
            a = by_node_id.get(target_id)
            if a is None:
                logger.debug("Question %s: edge target %r is not an assumption", q.prefix_id, target_id)
                continue
            a.questions.append(q)
            q.assumptions.append(a)
    return graph

def connect_containers(graph: DiagramGraph) -> DiagramGraph:
    by_id: dict[str, ContainerNode] = graph.containers.by_id
    for a in graph.assumptions:
        container = by_id.get(a.parent_id) if a.parent_id else None
        if container is None:
            continue
        a.container = container
        container.assumptions.append(a)
    return graph

def link(graph: DiagramGraph) -> DiagramGraph:
    connect_questions(graph)
    connect_containers(graph)
    return graph
