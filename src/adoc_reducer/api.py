"""Public API: reduce a document and optionally write the result.

Example:
    >>> from adoc_reducer import reduce
    >>> reduce("primary content\\nifdef::flag[]\\nconditional content\\nendif::[]", to=str)
    'primary content'
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Any, Optional, Sequence, Union

from adoc_reducer.core.document.attributes import AttributesInput
from adoc_reducer.core.document.document import Document
from adoc_reducer.core.document.includes import IncludeProcessor
from adoc_reducer.core.document.safe_mode import SafeMode
from adoc_reducer.core.exceptions import InputNotFoundError, OutputError
from adoc_reducer.core.reduction import DocumentReducer

logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"

Input = Union[str, Path, IO[str]]


def reduce(
    input: Input,
    *,
    to: Any = None,
    attributes: AttributesInput = None,
    safe: Union[str, int, SafeMode] = SafeMode.SAFE,
    base_dir: Union[str, Path, None] = None,
    sourcemap: bool = False,
    preserve_conditionals: bool = False,
    include_map: bool = False,
    include_processors: Sequence[IncludeProcessor] = (),
) -> Union[Document, str]:
    """Reduce a document.

    Args:
        input: Source text, a :class:`~pathlib.Path` to a document, or an
            open text file.
        to: Where the reduced source goes. ``None`` or ``"/dev/null"`` writes
            nothing; the ``str`` type returns the reduced source; a path
            writes a file (parent directories are created); an object with
            ``write`` receives the source.
        attributes: Document attributes (mapping, ``"a=b c"`` string or list).
        safe: Safe mode; ``secure`` turns includes into links.
        base_dir: Directory includes of the input resolve against.
        sourcemap: Reload the reduced source so blocks point at reduced lines.
        preserve_conditionals: Keep conditional directive lines.
        include_map: Append the ``//# includes=`` comment.
        include_processors: Processors consulted before include files are read.

    Returns:
        The reduced :class:`Document`, or its source when ``to`` is ``str``.

    Raises:
        InputNotFoundError: If ``input`` is a path that does not exist.
        OutputError: If the output file cannot be written.
    """
    reducer = DocumentReducer(preserve_conditionals=preserve_conditionals, include_map=include_map)
    options = {
        "attributes": attributes,
        "safe": safe,
        "base_dir": base_dir,
        "sourcemap": sourcemap,
        "include_processors": include_processors,
    }

    if isinstance(input, Path):
        if not input.is_file():
            raise InputNotFoundError(f"input file {input} is missing", context={"path": str(input)})
        document = reducer.reduce_file(input, **options)
    elif isinstance(input, str):
        document = reducer.reduce(input, **options)
    elif hasattr(input, "read"):
        name = getattr(input, "name", None)
        if isinstance(name, str) and os.path.isfile(name):
            options["docfile"] = name
        document = reducer.reduce(input.read(), **options)
    else:
        raise TypeError(f"Cannot reduce input of type {type(input).__name__}")

    return _write(document, to)


def reduce_file(path: Union[str, Path], **options: Any) -> Union[Document, str]:
    """Reduce the document at ``path``. Accepts the keyword arguments of :func:`reduce`."""
    return reduce(Path(path), **options)


def _write(document: Document, to: Any) -> Union[Document, str]:
    if to is None or str(to) == DEV_NULL:
        return document
    if to is str:
        return document.source

    output = document.source
    if output:
        output += "\n"

    if isinstance(to, (str, Path)):
        target = Path(to)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(output, encoding="utf-8")
        except OSError as exc:
            raise OutputError(f"cannot write {target}: {exc.strerror or exc}", context={"path": str(target)}) from exc
        logger.debug("Wrote reduced document to %s", target)
    elif hasattr(to, "write"):
        to.write(output)
    else:
        raise TypeError(f"Cannot write reduced document to {type(to).__name__}")
    return document


__all__ = ["reduce", "reduce_file"]
