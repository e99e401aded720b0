"""Parsed document and the ``load`` entry points."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from .attributes import AttributesInput, normalize_attributes
from .events import DirectiveTracker
from .includes import IncludeProcessor
from .reader import Cursor, PreprocessorReader
from .safe_mode import SafeMode

logger = logging.getLogger(__name__)

DEFAULT_ATTRIBUTES: Dict[str, str] = {
    "attribute-missing": "skip",
    "attribute-undefined": "drop-line",
    "backend": "html5",
    "basebackend": "html",
    "doctype": "article",
    "filetype": "html",
    "max-include-depth": "64",
}


@dataclass
class Block:
    """A top-level structural element found by the block scanner.

    Attributes:
        context: ``section``, ``paragraph`` or the kind of delimited block.
        lines: Source lines of the block.
        source_location: Where the block starts; only recorded with sourcemaps.
        level: Section level, ``None`` for other blocks.
    """

    context: str
    lines: List[str] = field(default_factory=list)
    source_location: Optional[Cursor] = None
    level: Optional[int] = None

    @property
    def lineno(self) -> Optional[int]:
        return self.source_location.lineno if self.source_location else None

    @property
    def file(self) -> Optional[str]:
        return self.source_location.file if self.source_location else None

    @property
    def source(self) -> str:
        return "\n".join(self.lines)


class Document:
    """A document read through a :class:`PreprocessorReader`.

    Args:
        source: Source text or lines.
        attributes: Attributes set by the caller; they win over document
            entries unless the value ends with ``@``.
        safe: Safe mode name or :class:`SafeMode`.
        base_dir: Directory includes of the root document resolve against.
        docfile: Path of the document file, if any.
        sourcemap: Record the source location of each block.
        include_processors: Processors consulted before files are read.
        tracker: Receives directive events while the document is read.
        reduced: Marks a document rebuilt from reduced source.
    """

    def __init__(
        self,
        source: Union[str, Iterable[str], None] = None,
        *,
        attributes: AttributesInput = None,
        safe: Union[str, int, SafeMode, None] = None,
        base_dir: Union[str, Path, None] = None,
        docfile: Union[str, Path, None] = None,
        sourcemap: bool = False,
        include_processors: Sequence[IncludeProcessor] = (),
        tracker: Optional[DirectiveTracker] = None,
        reduced: bool = False,
    ) -> None:
        self.safe = SafeMode.parse(safe)
        self.sourcemap = bool(sourcemap)
        self.include_processors: List[IncludeProcessor] = list(include_processors)
        self.catalog: Dict[str, Any] = {"includes": {}}
        self.blocks: List[Block] = []
        self.header_attributes: Dict[str, Optional[str]] = {}
        self.title: Optional[str] = None
        self.parsed = False

        docfile_path = Path(docfile).expanduser().resolve() if docfile else None
        if base_dir is not None:
            self.base_dir = str(Path(base_dir).expanduser().resolve())
        elif docfile_path is not None:
            self.base_dir = str(docfile_path.parent)
        else:
            self.base_dir = os.getcwd()

        self.options: Dict[str, Any] = {
            "attributes": normalize_attributes(attributes),
            "safe": self.safe,
            "base_dir": self.base_dir,
            "docfile": str(docfile_path) if docfile_path else None,
            "sourcemap": self.sourcemap,
            "include_processors": list(self.include_processors),
            "reduced": reduced,
        }

        self._locked: set[str] = set()
        self.attributes: Dict[str, Any] = dict(DEFAULT_ATTRIBUTES)
        self.attributes["safe-mode-name"] = self.safe.name.lower()
        self.attributes["safe-mode-level"] = str(int(self.safe))
        if docfile_path is not None:
            self._set_docfile_attributes(docfile_path)
        self._apply_caller_attributes(self.options["attributes"])

        self.reader = PreprocessorReader(
            self,
            source if source is not None else "",
            file=str(docfile_path) if docfile_path else None,
            dir=self.base_dir,
            path=docfile_path.name if docfile_path else None,
            tracker=tracker,
        )

    # ========== Attributes ==========

    def _set_docfile_attributes(self, docfile: Path) -> None:
        self.attributes["docname"] = docfile.stem
        self.attributes["docfilesuffix"] = docfile.suffix
        if self.safe >= SafeMode.SERVER:
            self.attributes["docfile"] = docfile.name
            self.attributes["docdir"] = ""
        else:
            self.attributes["docfile"] = str(docfile)
            self.attributes["docdir"] = str(docfile.parent)

    def _apply_caller_attributes(self, attributes: Dict[str, Optional[str]]) -> None:
        for name, value in attributes.items():
            if value is None:
                self.attributes.pop(name, None)
                self._locked.add(name)
            elif value.endswith("@"):
                self.attributes[name] = value[:-1]
            else:
                self.attributes[name] = value
                self._locked.add(name)

    def set_attribute(self, name: str, value: Optional[str]) -> bool:
        """Set (or unset, when ``value`` is ``None``) an attribute from a document entry.

        Returns:
            False when the caller locked the attribute.
        """
        if name in self._locked:
            return False
        if value is None:
            self.attributes.pop(name, None)
        else:
            self.attributes[name] = value
        return True

    def is_locked(self, name: str) -> bool:
        return name in self._locked

    # ========== Source ==========

    @property
    def source_lines(self) -> List[str]:
        return self.reader.source_lines

    @property
    def source(self) -> str:
        return "\n".join(self.reader.source_lines)

    def replace_source_lines(self, lines: List[str]) -> None:
        self.reader.source_lines[:] = lines

    # ========== Includes ==========

    def relative_path(self, path: Union[str, Path]) -> str:
        """Path of an include relative to the base directory, when it is inside it."""
        try:
            return Path(path).resolve().relative_to(Path(self.base_dir).resolve()).as_posix()
        except ValueError:
            return str(path)

    def register_include(self, relpath: str, *, partial: bool = False) -> None:
        """Record an include in ``catalog["includes"]``.

        The key is the path without its extension. A full include marks the
        entry ``True``; a partial one marks it ``False`` unless it is already ``True``.
        """
        key = os.path.splitext(relpath)[0]
        includes = self.catalog["includes"]
        if partial:
            includes.setdefault(key, False)
        else:
            includes[key] = True

    # ========== Blocks ==========

    def parse(self) -> "Document":
        if not self.parsed:
            from .parser import BlockParser

            BlockParser(self).parse()
            self.parsed = True
        return self

    def find_by(
        self,
        context: Optional[str] = None,
        predicate: Optional[Callable[[Block], bool]] = None,
    ) -> List[Block]:
        return [
            block
            for block in self.blocks
            if (context is None or block.context == context) and (predicate is None or predicate(block))
        ]

    def reload_options(self) -> Dict[str, Any]:
        """Options that load the same document again from new source lines."""
        return {
            "attributes": dict(self.options["attributes"]),
            "safe": self.safe,
            "base_dir": self.base_dir,
            "docfile": self.options["docfile"],
            "sourcemap": self.sourcemap,
            "include_processors": list(self.include_processors),
        }


def load(source: Union[str, Iterable[str]], *, parse: bool = True, **options: Any) -> Document:
    """Create a :class:`Document` from source text or lines and parse it.

    Args:
        source: Source text or lines.
        parse: Scan blocks right away (default True).
        **options: Keyword arguments of :class:`Document`.
    """
    document = Document(source, **options)
    return document.parse() if parse else document


def load_file(path: Union[str, Path], *, parse: bool = True, **options: Any) -> Document:
    """Read ``path`` and load it as a document."""
    path = Path(path)
    options.setdefault("docfile", path)
    return load(path.read_text(encoding="utf-8"), parse=parse, **options)


__all__ = ["Block", "Document", "load", "load_file"]
