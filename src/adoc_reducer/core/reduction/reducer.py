"""One reduction call: read with tracking, replay, rebuild."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Union

from adoc_reducer.core.document.document import Document, load, load_file

from .include_map import append_include_map
from .rebuild import rebuild_document
from .replay import replay
from .tracker import PreprocessorDirectiveTracker

logger = logging.getLogger(__name__)


class DocumentReducer:
    """Flatten includes and conditionals of a document into plain source.

    Each call to :meth:`reduce` uses its own tracker and replacement tree,
    so one reducer may serve any number of documents.

    Args:
        preserve_conditionals: Keep conditional directive lines verbatim.
        include_map: Append a ``//# includes=`` comment listing the includes
            that were inlined.
    """

    def __init__(self, *, preserve_conditionals: bool = False, include_map: bool = False) -> None:
        self.preserve_conditionals = preserve_conditionals
        self.include_map = include_map

    def reduce(self, source: Union[str, Iterable[str]], **options: Any) -> Document:
        """Reduce source text or lines. ``options`` are those of :class:`Document`."""
        tracker = self._new_tracker()
        document = load(source, tracker=tracker, **options)
        return self._finish(document, tracker)

    def reduce_file(self, path: Union[str, Path], **options: Any) -> Document:
        """Reduce the document stored at ``path``."""
        tracker = self._new_tracker()
        document = load_file(path, tracker=tracker, **options)
        return self._finish(document, tracker)

    def _new_tracker(self) -> PreprocessorDirectiveTracker:
        return PreprocessorDirectiveTracker(preserve_conditionals=self.preserve_conditionals)

    def _finish(self, document: Document, tracker: PreprocessorDirectiveTracker) -> Document:
        tracker.finish(document.source_lines)
        tree = tracker.tree
        changed = not tree.is_trivial()
        logger.debug("Replaying %d tracked scope(s)", len(tree))
        reduced = replay(tree, document.source_lines)
        document = rebuild_document(document, reduced, changed=changed)
        if self.include_map:
            append_include_map(document)
        return document


__all__ = ["DocumentReducer"]
