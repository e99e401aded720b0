"""Directive tracking and replay.

Usage:
    from adoc_reducer.core.reduction import DocumentReducer

    document = DocumentReducer().reduce_file("book.adoc")
    print(document.source)
"""
from __future__ import annotations

from .conditional_tracker import ConditionalDirectiveTracker
from .include_map import append_include_map, load_include_map, read_include_map
from .include_tracker import IncludeDirectiveTracker
from .rebuild import rebuild_document
from .reducer import DocumentReducer
from .replay import replay
from .tracker import PreprocessorDirectiveTracker
from .tree import Delete, Overwrite, ReplacementNode, ReplacementTree

__all__ = [
    "ConditionalDirectiveTracker",
    "Delete",
    "DocumentReducer",
    "IncludeDirectiveTracker",
    "Overwrite",
    "PreprocessorDirectiveTracker",
    "ReplacementNode",
    "ReplacementTree",
    "append_include_map",
    "load_include_map",
    "read_include_map",
    "rebuild_document",
    "replay",
]
