"""Put reduced lines back into a document."""
from __future__ import annotations

import logging
from typing import List

from adoc_reducer.core.document.document import Document, load

logger = logging.getLogger(__name__)


def rebuild_document(document: Document, reduced_lines: List[str], *, changed: bool) -> Document:
    """Return a document whose source is ``reduced_lines``.

    When sourcemaps were requested and reduction changed the source, the
    reduced lines are loaded again (without a tracker) so that every block
    points at its line in the reduced source. Otherwise the source lines of
    ``document`` are replaced in place and its blocks are kept.

    Args:
        document: Document read with a directive tracker attached.
        reduced_lines: Result of replaying the tracked directives.
        changed: False when nothing was tracked.
    """
    if document.sourcemap and changed:
        logger.debug("Reloading reduced document for source mapping")
        rebuilt = load(list(reduced_lines), reduced=True, **document.reload_options())
        rebuilt.catalog["includes"] = document.catalog["includes"]
        return rebuilt

    if reduced_lines is not document.source_lines:
        document.replace_source_lines(reduced_lines)
    return document


__all__ = ["rebuild_document"]
