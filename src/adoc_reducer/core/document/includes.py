"""Include processors and line selection for include directives.

Selection attributes:
- ``lines=2..5;8`` keeps the listed line numbers (``-1`` means the last line)
- ``tag=name`` / ``tags=a;!b;*;**`` keeps lines between ``tag::name[]`` and
  ``end::name[]`` markers, without the marker lines themselves
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from .document import Document
    from .reader import PreprocessorReader

logger = logging.getLogger(__name__)

URI_PATTERN = re.compile(r"^[A-Za-z][A-Za-z\d.+-]+:/{0,2}")
TAG_DIRECTIVE_PATTERN = re.compile(r"\b(?:tag|(e)nd)::(\S+?)\[\](?=$|[ \r])")


class IncludeProcessor(ABC):
    """Resolve include directives that the reader should not read from disk.

    A processor is consulted before the reader resolves a target itself.
    It may push content with :meth:`PreprocessorReader.push_include`, or push
    nothing to make the directive disappear.

    Usage:
        class Snippets(IncludeProcessor):
            def handles(self, target: str) -> bool:
                return target.startswith("snippet:")

            def process(self, document, reader, target, attributes) -> None:
                reader.push_include(["snippet text"], path=target, attributes=attributes)
    """

    def handles(self, target: str) -> bool:
        return True

    @abstractmethod
    def process(
        self,
        document: "Document",
        reader: "PreprocessorReader",
        target: str,
        attributes: Dict[str, str],
    ) -> None:
        """Resolve ``target`` by pushing lines onto ``reader`` (or not)."""


@dataclass(frozen=True)
class IncludeSelection:
    """Lines kept from an include file."""

    lines: List[str]
    # Line number of the first kept line in the include file.
    lineno: int
    partial: bool


def is_uri(target: str) -> bool:
    return bool(URI_PATTERN.match(target))


def select_lines(lines: List[str], attributes: Mapping[str, Any], path: str) -> IncludeSelection:
    """Apply ``lines`` or ``tag``/``tags`` attributes to an include file.

    Args:
        lines: All lines of the include file.
        attributes: Parsed attribute list of the include directive.
        path: Include path, used in log messages.

    Returns:
        The selection. When no selection attribute is present, all lines
        starting at line 1 and ``partial=False``.
    """
    if attributes.get("lines"):
        linenos = _parse_linenos(str(attributes["lines"]))
        if linenos:
            return _select_by_linenos(lines, linenos)
    if attributes.get("tag") or attributes.get("tags"):
        spec = str(attributes.get("tag") or attributes.get("tags"))
        tags = _parse_tags(spec)
        if tags:
            return _select_by_tags(lines, tags, path)
    return IncludeSelection(list(lines), 1, False)


def _parse_linenos(spec: str) -> List[Tuple[int, Optional[int]]]:
    ranges: List[Tuple[int, Optional[int]]] = []
    for part in re.split(r"[;,]", spec):
        part = part.strip()
        if not part:
            continue
        try:
            if ".." in part:
                start, _, end = part.partition("..")
                end_no = int(end) if end.strip() else -1
                ranges.append((int(start), None if end_no == -1 else end_no))
            else:
                lineno = int(part)
                ranges.append((lineno, lineno))
        except ValueError:
            logger.debug("Ignoring malformed include line range: %s", part)
    return ranges


def _select_by_linenos(lines: List[str], ranges: List[Tuple[int, Optional[int]]]) -> IncludeSelection:
    wanted = set()
    for start, end in ranges:
        last = len(lines) if end is None else min(end, len(lines))
        wanted.update(range(max(start, 1), last + 1))
    selected = [line for number, line in enumerate(lines, 1) if number in wanted]
    first = min(wanted) if wanted else 1
    return IncludeSelection(selected, first, True)


def _parse_tags(spec: str) -> Dict[str, bool]:
    tags: Dict[str, bool] = {}
    for name in re.split(r"[;,]", spec):
        name = name.strip()
        if not name:
            continue
        if name.startswith("!"):
            tags[name[1:]] = False
        else:
            tags[name] = True
    return tags


def _select_by_tags(lines: List[str], tags: Dict[str, bool], path: str) -> IncludeSelection:
    tags = dict(tags)
    wildcard: Optional[bool] = None
    if "**" in tags:
        base_select = tags.pop("**")
        if "*" in tags:
            wildcard = tags.pop("*")
        elif not base_select and tags and next(iter(tags.values())) is False:
            wildcard = True
    elif "*" in tags:
        if next(iter(tags)) == "*":
            wildcard = tags.pop("*")
            base_select = not wildcard
        else:
            base_select = False
            wildcard = tags.pop("*")
    else:
        # Untagged lines are kept only when no tag is requested.
        base_select = True not in tags.values()

    selected: List[str] = []
    first: Optional[int] = None
    stack: List[Tuple[str, bool]] = []
    found = set()
    select = base_select

    for number, line in enumerate(lines, 1):
        match = TAG_DIRECTIVE_PATTERN.search(line) if "::" in line and "[]" in line else None
        if match:
            name = match.group(2)
            if match.group(1):
                if stack and stack[-1][0] == name:
                    stack.pop()
                    select = stack[-1][1] if stack else base_select
                elif name in tags or wildcard is not None:
                    logger.warning(
                        "mismatched end tag in include: expected %s, found %s (%s line %d)",
                        stack[-1][0] if stack else "none",
                        name,
                        path,
                        number,
                    )
                continue
            if name in tags:
                found.add(name)
                select = tags[name]
            elif wildcard is not None:
                select = wildcard
            elif stack:
                select = stack[-1][1]
            stack.append((name, select))
            continue
        if select:
            if first is None:
                first = number
            selected.append(line)

    missing = [name for name, wanted in tags.items() if wanted and name not in found]
    for name in missing:
        logger.warning("tag '%s' not found in include file: %s", name, path)
    return IncludeSelection(selected, first or 1, True)


__all__ = [
    "IncludeProcessor",
    "IncludeSelection",
    "is_uri",
    "select_lines",
]
