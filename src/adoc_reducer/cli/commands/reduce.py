"""
adoc-reducer reduce command.

SUMMARY: Reduce a document to a single file

Inlines every include and resolves preprocessor conditionals, then writes the
reduced source. Defaults for flags not given come from the `reducer` section
of the configuration.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from adoc_reducer.api import reduce
from adoc_reducer.cli import add_log_flags, add_repo_root_flag, configure_logging, get_repo_root
from adoc_reducer.core.config.domains import ReducerConfig
from adoc_reducer.core.document.attributes import normalize_attributes

SUMMARY = "Reduce a document to a single file"

STDIO = "-"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "file",
        metavar="FILE",
        help="Document to reduce, or - to read from stdin",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        default=STDIO,
        help="Write the reduced document to FILE (default: - for stdout)",
    )
    parser.add_argument(
        "-a",
        "--attribute",
        metavar="KEY[=VALUE]",
        action="append",
        default=[],
        help="Set a document attribute; KEY! unsets it (may be repeated)",
    )
    parser.add_argument(
        "--preserve-conditionals",
        action="store_true",
        default=None,
        help="Keep preprocessor conditional directives in the reduced document",
    )
    parser.add_argument(
        "--include-map",
        action="store_true",
        default=None,
        help="Append a //# includes= comment listing the inlined includes",
    )
    parser.add_argument(
        "-S",
        "--safe",
        "--safe-mode",
        dest="safe",
        choices=["unsafe", "safe", "server", "secure"],
        help="Safe mode (default: from configuration, unsafe)",
    )
    add_log_flags(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Reduce FILE and write it to the requested output."""
    repo_root = get_repo_root(args)
    configure_logging(args, repo_root)
    config = ReducerConfig(repo_root=repo_root)

    attributes = dict(config.attributes)
    attributes.update(normalize_attributes(args.attribute))

    options = {
        "attributes": attributes,
        "safe": args.safe or config.safe,
        "sourcemap": config.sourcemap,
        "preserve_conditionals": config.preserve_conditionals
        if args.preserve_conditionals is None
        else args.preserve_conditionals,
        "include_map": config.include_map if args.include_map is None else args.include_map,
    }

    source = sys.stdin if args.file == STDIO else Path(args.file)

    if args.output == STDIO:
        output = reduce(source, to=str, **options)
        if output:
            sys.stdout.write(output + "\n")
        sys.stdout.flush()
    else:
        reduce(source, to=Path(args.output), **options)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
