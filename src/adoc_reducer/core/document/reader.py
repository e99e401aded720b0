"""Line reader that resolves preprocessor directives while lines are peeked.

The reader holds the lines of the current scope in reverse order, so the
next line is always at the end of the list. ``lineno`` is the number of
that next line within its scope. Directives at the head of the buffer are
processed by :meth:`PreprocessorReader.peek_line`:

- ``ifdef``/``ifndef``/``ifeval``/``endif`` update the conditional stack and
  are consumed; lines inside a false conditional are consumed silently
- ``include::`` either enters a new scope (the directive line is consumed),
  replaces the directive line with a one-line placeholder, or drops it

Each decision is reported to the optional tracker given at construction.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Union

from .attributes import parse_attrlist, substitute_attributes
from .conditions import ConditionEvaluator
from .events import (
    ConditionalDirective,
    DirectiveTracker,
    IncludeDirective,
    IncludeOutcome,
)
from .includes import is_uri, select_lines
from .safe_mode import SafeMode

if TYPE_CHECKING:
    from .document import Document

logger = logging.getLogger(__name__)

CONDITIONAL_DIRECTIVE_PATTERN = re.compile(r"^(\\)?(ifdef|ifndef|ifeval|endif)::(\S*?(?:([,+])\S*?)?)\[(.+)?\]$")
INCLUDE_DIRECTIVE_PATTERN = re.compile(r"^(\\)?include::([^\s\[](?:[^\[]*[^\s\[])?)\[(.+)?\]$")

DEFAULT_MAX_INCLUDE_DEPTH = 64


@dataclass(frozen=True)
class Cursor:
    """Position of a line: file, directory, display path and line number."""

    file: Optional[str]
    dir: Optional[str]
    path: str
    lineno: int

    def __str__(self) -> str:
        return f"{self.path}: line {self.lineno}"


@dataclass
class _Conditional:
    target: str
    skip: bool
    skipping: bool


@dataclass
class _Scope:
    lines: List[str]
    file: Optional[str]
    dir: str
    path: str
    lineno: int


def prepare_lines(data: Union[str, Iterable[str]]) -> List[str]:
    """Split ``data`` into lines without line endings or trailing whitespace."""
    if isinstance(data, str):
        if data.startswith("\ufeff"):
            data = data[1:]
        return [line.rstrip() for line in data.splitlines()]
    return [line.rstrip("\r\n").rstrip() for line in data]


class PreprocessorReader:
    """Read document lines, resolving includes and conditionals on the way.

    Args:
        document: Owning document; supplies attributes, options and catalog.
        data: Source text or lines of the root document.
        file: Absolute path of the root document, if it came from a file.
        dir: Directory include targets of the root document resolve against.
        path: Display name of the root document used in messages.
        tracker: Receives directive events, see :mod:`.events`.
    """

    def __init__(
        self,
        document: "Document",
        data: Union[str, Iterable[str]],
        *,
        file: Optional[str] = None,
        dir: Optional[str] = None,
        path: Optional[str] = None,
        tracker: Optional[DirectiveTracker] = None,
    ) -> None:
        self.document = document
        self.tracker = tracker
        self.file = file
        self.dir = dir or (os.path.dirname(file) if file else os.getcwd())
        self.path = path or (os.path.basename(file) if file else "<stdin>")
        self.lineno = 1
        self.source_lines = prepare_lines(data)
        self._lines = list(reversed(self.source_lines))
        self._look_ahead = 0
        self._unescape_next_line = False
        self._include_stack: List[_Scope] = []
        self._conditional_stack: List[_Conditional] = []
        self._evaluator = ConditionEvaluator(document.attributes)
        self._placeholder: Optional[str] = None
        self._synthetic_lines = 0
        self.skipping = False

    # ========== Line access ==========

    @property
    def lines(self) -> List[str]:
        """Remaining lines of the current scope, in reading order."""
        return list(reversed(self._lines))

    @property
    def include_depth(self) -> int:
        return len(self._include_stack)

    @property
    def conditional_depth(self) -> int:
        return len(self._conditional_stack)

    @property
    def cursor(self) -> Cursor:
        return Cursor(self.file, self.dir, self.path, self.lineno)

    def peek_line(self, direct: bool = False) -> Optional[str]:
        """Return the next content line without consuming it.

        Args:
            direct: Return the raw head line of the current scope without
                processing directives or leaving the scope.
        """
        while True:
            if direct or self._look_ahead > 0:
                if not self._lines:
                    return None
                line = self._lines[-1]
                return line[1:] if self._unescape_next_line else line
            if self._lines:
                line = self._process_line(self._lines[-1])
                if line is not None:
                    return line
                continue
            self._look_ahead = 0
            if not self._include_stack:
                return None
            self.pop_include()

    def read_line(self) -> Optional[str]:
        if self._look_ahead > 0 or self.peek_line() is not None:
            return self.shift()
        return None

    def shift(self) -> str:
        self.lineno += 1
        if self._look_ahead > 0:
            self._look_ahead -= 1
        line = self._lines.pop()
        if self._unescape_next_line:
            self._unescape_next_line = False
            return line[1:]
        return line

    def unshift(self, line: str) -> None:
        self.lineno -= 1
        self._look_ahead += 1
        self._lines.append(line)

    def replace_next_line(self, line: str) -> bool:
        """Replace the head line with ``line`` and mark it as processed."""
        self.shift()
        self.unshift(line)
        return True

    # ========== Scopes ==========

    def push_include(
        self,
        data: Union[str, Iterable[str]],
        file: Optional[str] = None,
        path: Optional[str] = None,
        lineno: int = 1,
        attributes: Optional[Dict[str, str]] = None,
    ) -> "PreprocessorReader":
        """Enter a new scope holding ``data``.

        An empty ``data`` leaves the scope again right away. With a
        ``leveloffset`` attribute the content is framed by attribute entries
        that apply the offset and then restore the previous value.
        """
        attributes = attributes or {}
        self._include_stack.append(_Scope(self._lines, self.file, self.dir, self.path, self.lineno))
        if file:
            self.file = file
            self.dir = os.path.dirname(file)
            self.path = path or os.path.basename(file)
        else:
            self.path = path or self.path
        self.lineno = lineno

        self._synthetic_lines = 0

        lines = prepare_lines(data)
        if not lines:
            self.pop_include()
            return self

        if "leveloffset" in attributes:
            previous = self.document.attributes.get("leveloffset")
            restore = f":leveloffset: {previous}" if previous is not None else ":leveloffset!:"
            lines = [f":leveloffset: {attributes['leveloffset']}", "", *lines, "", restore]
            self._synthetic_lines = 2
            self.lineno -= self._synthetic_lines
        self._lines = list(reversed(lines))
        self._look_ahead = 0
        return self

    def pop_include(self) -> None:
        if not self._include_stack:
            return
        depth_before = len(self._include_stack)
        scope = self._include_stack.pop()
        self._lines = scope.lines
        self.file = scope.file
        self.dir = scope.dir
        self.path = scope.path
        self.lineno = scope.lineno
        self._look_ahead = 0
        if self.tracker is not None:
            self.tracker.on_scope_end(depth_before, len(self._include_stack))

    # ========== Directive processing ==========

    def _process_line(self, line: str) -> Optional[str]:
        """Process the head line; ``None`` means the buffer changed, peek again."""
        if not line:
            self._look_ahead += 1
            return line

        if line.endswith("]") and not line.startswith("[") and "::" in line:
            if "if" in line:
                match = CONDITIONAL_DIRECTIVE_PATTERN.match(line)
                if match:
                    if match.group(1):
                        self._unescape_next_line = True
                        self._look_ahead += 1
                        return line[1:]
                    if self._preprocess_conditional_directive(
                        match.group(2), match.group(3), match.group(4), match.group(5)
                    ):
                        self.shift()
                    return None
            if self.skipping:
                self.shift()
                return None
            if line.startswith(("inc", "\\inc")):
                match = INCLUDE_DIRECTIVE_PATTERN.match(line)
                if match:
                    if match.group(1):
                        self._unescape_next_line = True
                        self._look_ahead += 1
                        return line[1:]
                    if self._preprocess_include_directive(match.group(2), match.group(3) or ""):
                        return None
            self._look_ahead += 1
            return line

        if self.skipping:
            self.shift()
            return None
        self._look_ahead += 1
        return line

    def _preprocess_conditional_directive(
        self,
        keyword: str,
        target: str,
        delimiter: Optional[str],
        text: Optional[str],
    ) -> bool:
        """Evaluate a conditional directive; return True when its line must be consumed."""
        lineno = self.lineno
        skipping_before = self.skipping
        depth_before = len(self._conditional_stack)

        consumed = self._evaluate_conditional(keyword, target, delimiter, text)

        if self.tracker is not None:
            self.tracker.on_conditional_directive(
                ConditionalDirective(
                    keyword=keyword,
                    target=target,
                    delimiter=delimiter,
                    text=text,
                    lineno=lineno,
                    skipping_before=skipping_before,
                    skipping_after=self.skipping,
                    depth_before=depth_before,
                    depth_after=len(self._conditional_stack),
                    retained=not consumed,
                )
            )
        return consumed

    def _evaluate_conditional(
        self,
        keyword: str,
        target: str,
        delimiter: Optional[str],
        text: Optional[str],
    ) -> bool:
        stack = self._conditional_stack
        target = target.lower()

        if keyword == "endif":
            if text:
                logger.error(
                    "%s: malformed preprocessor directive - text not permitted: endif::%s[%s]",
                    self.cursor, target, text,
                )
            elif not stack:
                logger.error("%s: unmatched preprocessor directive: endif::%s[]", self.cursor, target)
            elif not target or target == stack[-1].target:
                stack.pop()
                self.skipping = stack[-1].skipping if stack else False
            else:
                logger.error(
                    "%s: mismatched preprocessor directive: endif::%s[], expected endif::%s[]",
                    self.cursor, target, stack[-1].target,
                )
            return True

        block_form = keyword == "ifeval" or not text
        if self.skipping:
            if block_form:
                stack.append(_Conditional(target, True, True))
            return True

        try:
            skip = self._evaluator.should_skip(keyword, target, delimiter, text)
        except ValueError as exc:
            logger.error("%s: %s", self.cursor, exc)
            return True

        if block_form:
            if skip:
                self.skipping = True
            stack.append(_Conditional(target, skip, self.skipping))
            return True
        if skip:
            return True

        # Single-line form: the directive line becomes its text.
        self._lines[-1] = text.rstrip()
        if not text.startswith("include::"):
            self._look_ahead += 1
        return False

    def _preprocess_include_directive(self, target: str, attrlist: str) -> bool:
        """Resolve an include directive; return False when its line is kept as content."""
        event = IncludeDirective(target=target, attrlist=attrlist, lineno=self.lineno)
        if self.tracker is not None:
            self.tracker.on_include_directive(event)

        depth_before = len(self._include_stack)
        self._placeholder = None
        handled = self._resolve_include(target, attrlist, event.directive)

        if self.tracker is not None:
            if not handled:
                # The directive line stays where it is.
                outcome = IncludeOutcome(placeholder=event.directive, depth=depth_before)
            elif len(self._include_stack) > depth_before:
                outcome = IncludeOutcome(
                    pushed=True,
                    lines=self.lines,
                    lineno=self.lineno + self._synthetic_lines,
                    synthetic_lines=self._synthetic_lines,
                    depth=len(self._include_stack),
                )
            else:
                outcome = IncludeOutcome(placeholder=self._placeholder, depth=depth_before)
            self.tracker.on_include_resolved(outcome)
        self._placeholder = None
        return handled

    def _replace_with_placeholder(self, line: str) -> bool:
        self._placeholder = line
        return self.replace_next_line(line)

    def _unresolved(self, target: str, attrlist: str) -> str:
        return f"Unresolved directive in {self.path} - include::{target}[{attrlist}]"

    def _resolve_include(self, target: str, attrlist: str, directive: str) -> bool:
        doc = self.document
        attribute_missing = str(doc.attributes.get("attribute-missing") or "skip")

        expanded = target
        if "{" in target:
            mode = "drop-line" if attribute_missing == "warn" else attribute_missing
            expanded = substitute_attributes(target, doc.attributes, attribute_missing=mode) or ""
            if not expanded:
                line_dropped = substitute_attributes(
                    target + " ", doc.attributes, attribute_missing="drop-line", quiet=True
                ) is None
                if attribute_missing == "drop-line" and line_dropped:
                    logger.info("%s: include dropped due to missing attribute: %s", self.cursor, directive)
                    self.shift()
                    return True
                reason = "due to missing attribute" if attribute_missing == "warn" and line_dropped else "because resolved target is blank"
                if "optional-option" in self._parse_attributes(attrlist):
                    logger.info("%s: optional include dropped %s: %s", self.cursor, reason, directive)
                    self.shift()
                    return True
                logger.warning("%s: include dropped %s: %s", self.cursor, reason, directive)
                return self._replace_with_placeholder(self._unresolved(target, attrlist))

        attributes = self._parse_attributes(attrlist)

        for processor in doc.include_processors:
            if processor.handles(expanded):
                self.shift()
                processor.process(doc, self, expanded, attributes)
                return True

        if doc.safe >= SafeMode.SECURE:
            return self._replace_with_placeholder(f"link:{expanded}[role=include]")

        max_depth = self._max_include_depth()
        if len(self._include_stack) >= max_depth:
            logger.error("%s: maximum include depth of %d exceeded", self.cursor, max_depth)
            return False

        if is_uri(expanded):
            if "allow-uri-read" not in doc.attributes:
                return self._replace_with_placeholder(f"link:{expanded}[role=include]")
            logger.error("%s: include uri not readable: %s", self.cursor, expanded)
            return self._replace_with_placeholder(self._unresolved(target, attrlist))

        include_path = Path(self.dir, expanded) if not os.path.isabs(expanded) else Path(expanded)
        include_path = Path(os.path.normpath(include_path))
        if not include_path.is_file():
            if "optional-option" in attributes:
                logger.info("%s: optional include dropped because include file not found: %s", self.cursor, include_path)
                self.shift()
                return True
            logger.error("%s: include file not found: %s", self.cursor, include_path)
            return self._replace_with_placeholder(self._unresolved(target, attrlist))

        try:
            content = include_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("%s: include file not readable: %s (%s)", self.cursor, include_path, exc)
            return self._replace_with_placeholder(self._unresolved(target, attrlist))

        relpath = doc.relative_path(include_path)
        selection = select_lines(prepare_lines(content), attributes, relpath)
        doc.register_include(relpath, partial=selection.partial)

        self.shift()
        self.push_include(selection.lines, str(include_path), relpath, selection.lineno, attributes)
        return True

    def _parse_attributes(self, attrlist: str) -> Dict[str, str]:
        if not attrlist:
            return {}
        expanded = substitute_attributes(attrlist, self.document.attributes, attribute_missing="drop", quiet=True)
        return parse_attrlist(expanded or "")

    def _max_include_depth(self) -> int:
        raw = self.document.attributes.get("max-include-depth", DEFAULT_MAX_INCLUDE_DEPTH)
        try:
            return int(raw)
        except (TypeError, ValueError):
            return DEFAULT_MAX_INCLUDE_DEPTH


__all__ = [
    "CONDITIONAL_DIRECTIVE_PATTERN",
    "INCLUDE_DIRECTIVE_PATTERN",
    "Cursor",
    "PreprocessorReader",
    "prepare_lines",
]
