"""Directive events reported by the preprocessor reader.

The reader calls an optional :class:`DirectiveTracker` supplied when it is
constructed. Events describe what the reader already decided; a tracker only
observes them and never changes how the reader resolves a directive.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class ConditionalDirective:
    """An ``ifdef``, ``ifndef``, ``ifeval`` or ``endif`` line after evaluation."""

    keyword: str
    target: str
    delimiter: Optional[str]
    text: Optional[str]
    lineno: int
    skipping_before: bool
    skipping_after: bool
    depth_before: int
    depth_after: int
    # True when the single-line form replaced the directive with its text.
    retained: bool = False


@dataclass(frozen=True)
class IncludeDirective:
    """An ``include::`` line, reported before the reader resolves it."""

    target: str
    attrlist: str
    lineno: int

    @property
    def directive(self) -> str:
        """The literal directive line as it appears in the scope."""
        return f"include::{self.target}[{self.attrlist}]"


@dataclass(frozen=True)
class IncludeOutcome:
    """How the reader resolved an include directive.

    Exactly one of three shapes:

    - ``pushed``: a new scope was entered; ``lines`` holds its content,
      ``lineno`` the number of its first content line and ``synthetic_lines``
      how many lines the reader added in front of that content.
    - ``placeholder``: the directive line was replaced by this one line.
    - neither: the directive vanished without leaving content.
    """

    pushed: bool = False
    lines: List[str] = field(default_factory=list)
    placeholder: Optional[str] = None
    lineno: int = 1
    synthetic_lines: int = 0
    depth: int = 0


class DirectiveTracker(Protocol):
    """Callbacks the reader invokes while it processes directives."""

    def on_conditional_directive(self, event: ConditionalDirective) -> None: ...

    def on_include_directive(self, event: IncludeDirective) -> None: ...

    def on_include_resolved(self, outcome: IncludeOutcome) -> None: ...

    def on_scope_end(self, depth_before: int, depth_after: int) -> None: ...


__all__ = [
    "ConditionalDirective",
    "IncludeDirective",
    "IncludeOutcome",
    "DirectiveTracker",
]
