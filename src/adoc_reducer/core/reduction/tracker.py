"""Directive tracker handed to the reader for one reduction call."""
from __future__ import annotations

from typing import List

from adoc_reducer.core.document.events import (
    ConditionalDirective,
    IncludeDirective,
    IncludeOutcome,
)

from .conditional_tracker import ConditionalDirectiveTracker
from .include_tracker import IncludeDirectiveTracker
from .tree import ReplacementTree


class PreprocessorDirectiveTracker:
    """Record include and conditional directives into a fresh :class:`ReplacementTree`.

    Args:
        preserve_conditionals: Leave conditional directive lines in place
            instead of recording drops for them.
    """

    def __init__(self, *, preserve_conditionals: bool = False) -> None:
        self.preserve_conditionals = preserve_conditionals
        self.tree = ReplacementTree()
        self.includes = IncludeDirectiveTracker(self.tree)
        self.conditionals = ConditionalDirectiveTracker(self.tree, lambda: self.includes.active_node)

    def on_conditional_directive(self, event: ConditionalDirective) -> None:
        if self.preserve_conditionals:
            return
        self.conditionals.record(event)

    def on_include_directive(self, event: IncludeDirective) -> None:
        self.includes.on_include_directive(event)

    def on_include_resolved(self, outcome: IncludeOutcome) -> None:
        self.includes.on_include_resolved(outcome)

    def on_scope_end(self, depth_before: int, depth_after: int) -> None:
        left = self.includes.on_scope_end(depth_before, depth_after)
        if left is not None and not self.preserve_conditionals:
            parent = self.tree.parent_of(left)
            if parent is not None:
                self.conditionals.carry_open_skips(left, parent)

    def finish(self, source_lines: List[str]) -> None:
        """Close out tracking once the reader has consumed the whole document."""
        if self.preserve_conditionals:
            return
        self.conditionals.finish(len(source_lines))


__all__ = ["PreprocessorDirectiveTracker"]
