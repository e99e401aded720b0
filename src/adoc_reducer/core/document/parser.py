"""Block scanner for AsciiDoc-style source.

The scanner pulls lines from the document reader, so every directive is
resolved in reading order and attribute entries take effect before the
lines that follow them. It recognizes only what provenance tracking needs:
the document header, section titles, paragraphs and delimited blocks.
"""
from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, List, Optional

from .attributes import parse_attribute_entry, substitute_attributes

if TYPE_CHECKING:
    from .document import Block, Document

logger = logging.getLogger(__name__)

DOCUMENT_TITLE_PATTERN = re.compile(r"^=[ \t]+(\S.*)$")
SECTION_TITLE_PATTERN = re.compile(r"^(={2,6})[ \t]+(\S.*)$")
BLOCK_ATTRIBUTE_LINE_PATTERN = re.compile(r"^\[(?:|[\w.#%{,\"'\[].*)\]$")
BLOCK_TITLE_PATTERN = re.compile(r"^\.(?:[^ \t.].*)$")

DELIMITERS = {
    "----": "listing",
    "....": "literal",
    "====": "example",
    "****": "sidebar",
    "____": "quote",
    "++++": "pass",
    "////": "comment",
    "--": "open",
    "|===": "table",
    "```": "listing",
}


class BlockParser:
    """Scan a document into a flat list of blocks."""

    def __init__(self, document: "Document") -> None:
        self.document = document
        self.reader = document.reader

    def parse(self) -> List["Block"]:
        self._parse_header()
        while True:
            line = self.reader.peek_line()
            if line is None:
                break
            self._parse_next(line)
        return self.document.blocks

    # ========== Header ==========

    def _parse_header(self) -> None:
        reader = self.reader
        line = self._skip_blank_and_comments()
        if line is None:
            return
        match = DOCUMENT_TITLE_PATTERN.match(line)
        if not match:
            return
        reader.read_line()
        self.document.title = match.group(1)

        while True:
            line = reader.peek_line()
            if line is None or line == "":
                return
            if line.startswith("//") and not line.startswith("////"):
                reader.read_line()
                continue
            entry = parse_attribute_entry(line)
            if entry is None:
                # Author and revision lines.
                reader.read_line()
                continue
            reader.read_line()
            name, value = entry
            if self._apply_attribute_entry(name, value):
                self.document.header_attributes[name] = value if value is None else self.document.attributes[name]

    def _skip_blank_and_comments(self) -> Optional[str]:
        while True:
            line = self.reader.peek_line()
            if line is None:
                return None
            if line == "" or (line.startswith("//") and not line.startswith("////")):
                self.reader.read_line()
                continue
            return line

    # ========== Body ==========

    def _parse_next(self, line: str) -> None:
        reader = self.reader
        if line == "":
            reader.read_line()
            return
        if line.startswith("//") and not line.startswith("////"):
            reader.read_line()
            return

        entry = parse_attribute_entry(line)
        if entry is not None:
            reader.read_line()
            self._apply_attribute_entry(*entry)
            return

        if BLOCK_ATTRIBUTE_LINE_PATTERN.match(line) or BLOCK_TITLE_PATTERN.match(line):
            # Metadata lines belong to the next block; the block starts at its content.
            reader.read_line()
            return

        cursor = reader.cursor if self.document.sourcemap else None

        match = SECTION_TITLE_PATTERN.match(line)
        if match:
            reader.read_line()
            self._add_block("section", [line], cursor, level=len(match.group(1)) - 1)
            return

        context = DELIMITERS.get(line)
        if context is not None:
            self._parse_delimited(line, context, cursor)
            return

        self._parse_paragraph(cursor)

    def _parse_delimited(self, delimiter: str, context: str, cursor) -> None:
        reader = self.reader
        start = reader.cursor
        lines = [reader.read_line() or delimiter]
        while True:
            line = reader.read_line()
            if line is None:
                logger.warning("%s: unterminated %s block", start, context)
                break
            lines.append(line)
            if line == delimiter:
                break
        self._add_block(context, lines, cursor)

    def _parse_paragraph(self, cursor) -> None:
        reader = self.reader
        lines: List[str] = []
        while True:
            line = reader.peek_line()
            if line is None or line == "":
                break
            if lines and (line in DELIMITERS or SECTION_TITLE_PATTERN.match(line)):
                break
            lines.append(reader.read_line() or "")
        self._add_block("paragraph", lines, cursor)

    def _add_block(self, context: str, lines: List[str], cursor, *, level: Optional[int] = None) -> None:
        from .document import Block

        self.document.blocks.append(Block(context, lines, cursor, level))

    def _apply_attribute_entry(self, name: str, value: Optional[str]) -> bool:
        if value is not None:
            value = substitute_attributes(value, self.document.attributes) or ""
        return self.document.set_attribute(name, value)


__all__ = ["BlockParser", "DELIMITERS"]
