"""Replacement tree built while directives are tracked.

Each node stands for one document scope: the root document or one include
that the reader resolved. Nodes live in an arena (a list indexed by node id)
and refer to their parent by id, so a node is always created after its
parent (``parent_id < id``) and the tree can never contain a cycle.

The tree is append-only while tracking runs. Replay (see ``replay.py``) is
the only step that mutates node lines.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Union


@dataclass(frozen=True)
class Delete:
    """Remove the line at ``index``."""

    index: int


@dataclass(frozen=True)
class Overwrite:
    """Replace the line at ``index`` with literal ``text``."""

    index: int
    text: str


DropInstruction = Union[Delete, Overwrite]


@dataclass
class ReplacementNode:
    """One scope of the composite document.

    Attributes:
        id: Creation-order id; replay visits nodes in descending id order.
        parent_id: Id of the enclosing scope, ``None`` for the root.
        position: Index in the parent's lines of the directive that created this node.
        directive_text: Literal directive line captured before resolution.
        lines: Lines of this scope. Replay replaces elements with nested lists.
        drop_list: Deletes and overwrites local to this scope.
        line_offset: Correction applied when mapping a reader line number to an index.
    """

    id: int
    parent_id: Optional[int] = None
    position: Optional[int] = None
    directive_text: Optional[str] = None
    lines: List[Any] = field(default_factory=list)
    drop_list: List[DropInstruction] = field(default_factory=list)
    line_offset: int = 0

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def index_of(self, lineno: int) -> int:
        """Map a 1-based line number reported for this scope to an index of ``lines``."""
        return lineno - 1 - self.line_offset


class ReplacementTree:
    """Arena of :class:`ReplacementNode` objects indexed by id."""

    def __init__(self) -> None:
        self._nodes: List[ReplacementNode] = [ReplacementNode(id=0)]

    @property
    def root(self) -> ReplacementNode:
        return self._nodes[0]

    def attach(
        self,
        parent_id: int,
        position: int,
        directive_text: str,
        lines: Optional[List[Any]] = None,
        *,
        line_offset: int = 0,
    ) -> ReplacementNode:
        """Create a node under ``parent_id`` and return it."""
        if not 0 <= parent_id < len(self._nodes):
            raise IndexError(f"Unknown parent node: {parent_id}")
        node = ReplacementNode(
            id=len(self._nodes),
            parent_id=parent_id,
            position=position,
            directive_text=directive_text,
            lines=list(lines or []),
            line_offset=line_offset,
        )
        self._nodes.append(node)
        return node

    def parent_of(self, node: ReplacementNode) -> Optional[ReplacementNode]:
        if node.parent_id is None:
            return None
        return self._nodes[node.parent_id]

    def is_trivial(self) -> bool:
        """True when nothing was tracked: only the root, with no drops."""
        return len(self._nodes) == 1 and not self.root.drop_list

    def __getitem__(self, node_id: int) -> ReplacementNode:
        return self._nodes[node_id]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[ReplacementNode]:
        return iter(self._nodes)

    def __reversed__(self) -> Iterator[ReplacementNode]:
        return reversed(self._nodes)


__all__ = [
    "Delete",
    "Overwrite",
    "DropInstruction",
    "ReplacementNode",
    "ReplacementTree",
]
