"""Turn include directive events into replacement tree nodes."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from adoc_reducer.core.document.events import IncludeDirective, IncludeOutcome

from .tree import ReplacementNode, ReplacementTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _PendingInclude:
    parent_id: int
    position: int
    directive_text: str


@dataclass(frozen=True)
class _TrackedScope:
    node_id: int
    # Reader include depth right after the scope was entered.
    depth: int


class IncludeDirectiveTracker:
    """Build one node per include and follow the reader into nested scopes.

    New events are attributed to the *active* node. It starts as the root,
    becomes each pushed include while the reader is inside it, and returns
    to the parent when the reader leaves a scope this tracker entered.
    """

    def __init__(self, tree: ReplacementTree) -> None:
        self.tree = tree
        self._active_id = tree.root.id
        self._scopes: List[_TrackedScope] = []
        self._pending: Optional[_PendingInclude] = None

    @property
    def active_node(self) -> ReplacementNode:
        return self.tree[self._active_id]

    def on_include_directive(self, event: IncludeDirective) -> None:
        node = self.active_node
        self._pending = _PendingInclude(node.id, node.index_of(event.lineno), event.directive)

    def on_include_resolved(self, outcome: IncludeOutcome) -> Optional[ReplacementNode]:
        pending, self._pending = self._pending, None
        if pending is None:
            logger.debug("Include resolved without a recorded directive; ignoring")
            return None

        if outcome.pushed:
            # Children of this scope report line numbers relative to its first
            # content line, which sits after any synthetic lines the reader added.
            line_offset = (outcome.lineno - 1) - outcome.synthetic_lines
            node = self.tree.attach(
                pending.parent_id,
                pending.position,
                pending.directive_text,
                outcome.lines,
                line_offset=line_offset,
            )
            self._scopes.append(_TrackedScope(node.id, outcome.depth))
            self._active_id = node.id
            return node

        lines = [] if outcome.placeholder is None else [outcome.placeholder]
        return self.tree.attach(pending.parent_id, pending.position, pending.directive_text, lines)

    def on_scope_end(self, depth_before: int, depth_after: int) -> Optional[ReplacementNode]:
        """Return the node that was left, or ``None`` when the scope was not ours."""
        if not self._scopes or depth_after >= self._scopes[-1].depth:
            return None
        scope = self._scopes.pop()
        node = self.tree[scope.node_id]
        self._active_id = node.parent_id if node.parent_id is not None else self.tree.root.id
        return node


__all__ = ["IncludeDirectiveTracker"]
