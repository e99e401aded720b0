"""Turn conditional directive events into drop instructions.

The reader decides whether a conditional skips content. This tracker only
records which lines must vanish from the scope that is active when the
directive is seen:

- a directive seen while a skip stays active changes nothing yet;
- closing a skip deletes the whole skipped region, both directive lines included;
- any other opening or closing directive deletes its own line;
- a single-line form whose text was kept overwrites the line with that text;
- a skip still open when the document ends deletes everything up to the end.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List

from adoc_reducer.core.document.events import ConditionalDirective

from .tree import Delete, Overwrite, ReplacementNode, ReplacementTree

logger = logging.getLogger(__name__)


@dataclass
class _OpenSkip:
    """A skipped region whose closing ``endif`` has not been seen yet."""

    node_id: int
    start: int
    depth: int


class ConditionalDirectiveTracker:
    """Attach conditional drops to the active node of a :class:`ReplacementTree`."""

    def __init__(self, tree: ReplacementTree, active_node: Callable[[], ReplacementNode]) -> None:
        self.tree = tree
        self._active_node = active_node
        self._open_skips: List[_OpenSkip] = []

    @property
    def open_skips(self) -> int:
        return len(self._open_skips)

    def record(self, event: ConditionalDirective) -> None:
        if event.skipping_before and event.skipping_after:
            return

        node = self._active_node()
        index = node.index_of(event.lineno)

        if event.depth_after < event.depth_before:
            if event.skipping_before:
                self._close_skip(node, index, event.depth_before)
            else:
                node.drop_list.append(Delete(index))
        elif event.depth_after > event.depth_before:
            if event.skipping_after:
                self._open_skips.append(_OpenSkip(node.id, index, event.depth_after))
            else:
                node.drop_list.append(Delete(index))
        elif event.retained and event.text is not None:
            node.drop_list.append(Overwrite(index, event.text))
        else:
            node.drop_list.append(Delete(index))

    def carry_open_skips(self, child: ReplacementNode, parent: ReplacementNode) -> None:
        """Move skips left open by a finished scope into its parent.

        The skipped region of ``child`` ends with its last line. The region
        continues in ``parent`` right after the include directive that
        created ``child``.
        """
        for skip in self._open_skips:
            if skip.node_id != child.id:
                continue
            child.drop_list.extend(Delete(i) for i in range(skip.start, len(child.lines)))
            skip.node_id = parent.id
            skip.start = (child.position or 0) + 1

    def finish(self, root_line_count: int) -> None:
        """Delete regions that are still skipped when the document ends.

        Each region runs to the end of the scope that opened it and on through
        every enclosing scope, up to the last line of the root document.
        """
        while self._open_skips:
            skip = self._open_skips.pop()
            node = self.tree[skip.node_id]
            start = skip.start
            while True:
                end = root_line_count if node.is_root else len(node.lines)
                node.drop_list.extend(Delete(i) for i in range(start, end))
                parent = self.tree.parent_of(node)
                if parent is None:
                    break
                start = (node.position or 0) + 1
                node = parent

    def _close_skip(self, node: ReplacementNode, index: int, depth: int) -> None:
        while self._open_skips and self._open_skips[-1].depth > depth:
            # Opened by a directive the reader did not match to this close.
            self._open_skips.pop()
        if not self._open_skips:
            logger.debug("No open skip region to close at index %d", index)
            node.drop_list.append(Delete(index))
            return

        skip = self._open_skips.pop()
        if skip.node_id == node.id:
            node.drop_list.extend(Delete(i) for i in range(skip.start, index + 1))
            return

        opener = self.tree[skip.node_id]
        opener.drop_list.extend(Delete(i) for i in range(skip.start, len(opener.lines)))
        node.drop_list.extend(Delete(i) for i in range(0, index + 1))


__all__ = ["ConditionalDirectiveTracker"]
