"""
adoc-reducer includes command.

SUMMARY: List the includes recorded in a reduced document

Reads the //# includes= comment written by `reduce --include-map`.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from adoc_reducer.cli import OutputFormatter, add_json_flag
from adoc_reducer.core.exceptions import InputNotFoundError
from adoc_reducer.core.reduction.include_map import read_include_map

SUMMARY = "List the includes recorded in a reduced document"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "file",
        metavar="FILE",
        help="Reduced document to inspect",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    path = Path(args.file)
    if not path.is_file():
        formatter.error(InputNotFoundError(f"input file {path} is missing"), error_code="includes_error")
        return 1

    includes = read_include_map(path.read_text(encoding="utf-8").splitlines())
    if formatter.json_mode:
        formatter.json_output({"file": str(path), "includes": includes})
    elif not includes:
        formatter.text("No include map found")
    else:
        for name, full in includes.items():
            formatter.text(f"{name}\t{'full' if full else 'partial'}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
