"""Document reading: preprocessor directives, attributes and blocks.

Usage:
    from adoc_reducer.core.document import load_file

    document = load_file("book.adoc", sourcemap=True)
    for block in document.blocks:
        print(block.context, block.lineno)
"""
from __future__ import annotations

from .document import Block, Document, load, load_file
from .events import ConditionalDirective, DirectiveTracker, IncludeDirective, IncludeOutcome
from .includes import IncludeProcessor
from .reader import Cursor, PreprocessorReader
from .safe_mode import SafeMode

__all__ = [
    "Block",
    "ConditionalDirective",
    "Cursor",
    "DirectiveTracker",
    "Document",
    "IncludeDirective",
    "IncludeOutcome",
    "IncludeProcessor",
    "PreprocessorReader",
    "SafeMode",
    "load",
    "load_file",
]
