"""
containers.py

Rebuild the container forest from the parent pointers of container cells.

Each container ends up under exactly one parent: its parent container when the
parent id names another container, else the synthetic root. Parent pointers are
not trusted to be acyclic; a container whose parent chain loops back to itself
is attached to the root instead.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .document import DiagramDocument

if TYPE_CHECKING:
    from .prefixed import Assumption

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ContainerNode:
    id: Optional[str] = None
    value: Optional[str] = None
    parent: Optional["ContainerNode"] = field(default=None, repr=False)
    children: list["ContainerNode"] = field(default_factory=list, repr=False)
    assumptions: list["Assumption"] = field(default_factory=list, repr=False)

    @property
    def is_root(self) -> bool:
        return self.id is None

    def add_child(self, child: "ContainerNode") -> None:
        self.children.append(child)
        child.parent = self

    def chain(self) -> list["ContainerNode"]:
        """Containers from the outermost one down to this one; the root is left out."""
        out: list[ContainerNode] = []
        cur: Optional[ContainerNode] = self
        while cur is not None and not cur.is_root:
            out.append(cur)
            cur = cur.parent
        out.reverse()
        return out

    @property
    def depth(self) -> int:
        return len(self.chain())

    def walk(self):
        for child in self.children:
            yield child
            yield from child.walk()


@dataclass(eq=False)
class ContainerForest:
    root: ContainerNode
    all: list[ContainerNode]

    @property
    def by_id(self) -> dict[str, ContainerNode]:
        return {c.id: c for c in self.all if c.id is not None}

    @property
    def max_depth(self) -> int:
        return max((c.depth for c in self.root.walk()), default=0)


def _reaches(start: str, target: str, parent_of: dict[str, Optional[str]]) -> bool:
    seen: set[str] = set()
    cur: Optional[str] = start
    while cur is not None and cur not in seen:
        if cur == target:
            return True
        seen.add(cur)
        cur = parent_of.get(cur)
    return False

def extract_containers(document: DiagramDocument) -> ContainerForest:
    cells = document.containers()
    root = ContainerNode()
    by_id: dict[str, ContainerNode] = {}
    parent_of: dict[str, Optional[str]] = {}

    for cell in cells:
        cid = cell.id or ""
        if cid in by_id:
            logger.warning("Container id %r appears more than once; keeping the first", cid)
            continue
        by_id[cid] = ContainerNode(id=cid, value=cell.value or "")
        parent_of[cid] = cell.parent

    for cid, node in by_id.items():
        pid = parent_of[cid]
        if pid is None or pid not in by_id:
            root.add_child(node)
            continue
        if _reaches(pid, cid, parent_of):
            logger.warning("Container %r sits on a parent cycle; attaching it to the root", cid)
            parent_of[cid] = None
            root.add_child(node)
            continue
        by_id[pid].add_child(node)

    logger.debug("Extracted %d containers", len(by_id))
    return ContainerForest(root=root, all=list(by_id.values()))
