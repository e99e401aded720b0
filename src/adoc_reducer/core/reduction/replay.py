"""Replay a replacement tree into a flat list of lines."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List

from .tree import Delete, DropInstruction, Overwrite, ReplacementNode, ReplacementTree

logger = logging.getLogger(__name__)


def replay(tree: ReplacementTree, source_lines: List[str]) -> List[str]:
    """Flatten ``source_lines`` using the substitutions recorded in ``tree``.

    Nodes are processed from the highest id down, so every child is complete
    before it is placed in its parent. A child is only placed when the
    parent still holds the directive line that created it; otherwise the
    parent line is left untouched.

    Args:
        tree: Tree recorded while the document was read. It is consumed.
        source_lines: Lines of the root document as the reader holds them.

    Returns:
        The reduced lines, without trailing empty lines. When nothing was
        tracked, ``source_lines`` is returned unchanged.
    """
    if tree.is_trivial():
        return source_lines

    tree.root.lines = list(source_lines)
    for node in reversed(tree):
        parent_lines = None
        if not node.is_root:
            parent = tree[node.parent_id]
            if not _directive_in_place(node, parent):
                continue
            parent_lines = parent.lines
        _apply_drops(node.lines, node.drop_list)
        if parent_lines is not None:
            parent_lines[node.position] = node.lines

    reduced = list(_flatten(tree.root.lines))
    while reduced and reduced[-1] == "":
        reduced.pop()
    return reduced


def _directive_in_place(node: ReplacementNode, parent: ReplacementNode) -> bool:
    position = node.position
    parent_lines = parent.lines
    if position is None or not 0 <= position < len(parent_lines):
        logger.debug("Include directive to reduce is out of range: %s", node.directive_text)
        return False
    current = parent_lines[position]
    if current != node.directive_text:
        if _take_directive_overwrite(node, parent):
            return True
        logger.debug(
            'Include directive to reduce not found; expected: "%s"; got: "%s"',
            node.directive_text,
            current,
        )
        return False
    return True


def _take_directive_overwrite(node: ReplacementNode, parent: ReplacementNode) -> bool:
    """Accept a single-line conditional whose kept text is the directive itself.

    The parent still holds the conditional line; its overwrite is dropped so
    the included lines take the place of the whole conditional.
    """
    for drop in parent.drop_list:
        if isinstance(drop, Overwrite) and drop.index == node.position and drop.text == node.directive_text:
            parent.drop_list.remove(drop)
            return True
    return False


def _apply_drops(lines: List[Any], drops: Iterable[DropInstruction]) -> None:
    by_index = _merge_drops(drops)
    for index in sorted(by_index, reverse=True):
        if not 0 <= index < len(lines):
            continue
        drop = by_index[index]
        if isinstance(drop, Overwrite):
            lines[index] = drop.text
        elif isinstance(drop, Delete):
            del lines[index]


def _merge_drops(drops: Iterable[DropInstruction]) -> Dict[int, DropInstruction]:
    """Keep one instruction per index.

    Repeated instructions collapse. A delete wins over an overwrite, and the
    first overwrite wins over later ones with different text.
    """
    by_index: Dict[int, DropInstruction] = {}
    for drop in drops:
        current = by_index.get(drop.index)
        if current is None:
            by_index[drop.index] = drop
        elif current == drop:
            continue
        elif isinstance(drop, Delete):
            logger.debug("Delete at index %d replaces %r", drop.index, current)
            by_index[drop.index] = drop
        else:
            logger.debug("Ignoring %r; index %d already has %r", drop, drop.index, current)
    return by_index


def _flatten(lines: Iterable[Any]) -> Iterator[str]:
    for line in lines:
        if isinstance(line, list):
            yield from _flatten(line)
        else:
            yield line


__all__ = ["replay"]
