"""Record which includes a reduced document absorbed.

The map is written as a trailing line comment::

    //# includes=chapters/ch1,~snippets/code

A ``~`` prefix marks an include of which only some lines were kept
(``lines=`` or ``tag=``). Reading the comment back gives
``{"chapters/ch1": True, "snippets/code": False}``.
"""
from __future__ import annotations

from typing import Dict, List, Mapping

from adoc_reducer.core.document.document import Document

INCLUDE_MAP_PREFIX = "//# includes="


def format_include_map(includes: Mapping[str, bool]) -> str:
    return INCLUDE_MAP_PREFIX + ",".join(name if full else f"~{name}" for name, full in includes.items())


def append_include_map(document: Document) -> bool:
    """Append the include map comment to the source of ``document``.

    Returns:
        False when the document has no includes to record.
    """
    includes = document.catalog.get("includes") or {}
    if not includes:
        return False
    document.source_lines.extend(["", format_include_map(includes)])
    return True


def read_include_map(lines: List[str]) -> Dict[str, bool]:
    """Parse the include map comment at the end of ``lines``."""
    if not lines or not lines[-1].startswith(INCLUDE_MAP_PREFIX):
        return {}
    includes: Dict[str, bool] = {}
    for name in lines[-1][len(INCLUDE_MAP_PREFIX):].split(","):
        name = name.strip()
        if not name:
            continue
        if name.startswith("~"):
            includes[name[1:]] = False
        else:
            includes[name] = True
    return includes


def load_include_map(document: Document) -> Dict[str, bool]:
    """Fill ``catalog["includes"]`` of a reduced document from its include map comment."""
    includes = read_include_map(document.source_lines)
    document.catalog["includes"].update(includes)
    return document.catalog["includes"]


__all__ = [
    "INCLUDE_MAP_PREFIX",
    "append_include_map",
    "format_include_map",
    "load_include_map",
    "read_include_map",
]
