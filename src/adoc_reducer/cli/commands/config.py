"""
adoc-reducer config command.

SUMMARY: Show the defaults `reduce` applies and where they come from

Lists every setting `reduce` falls back to when a flag is not given, as the
command resolves it, together with the configuration layer that supplied
it: a bundled default, a project or local file, or an environment variable.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, List, Tuple

from adoc_reducer.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from adoc_reducer.core.config import ConfigManager, LoggingConfig, ReducerConfig

SUMMARY = "Show the defaults `reduce` applies and where they come from"

# Used when no layer sets a key and the accessor falls back to its own value.
BUILTIN_SOURCE = "built-in"

Setting = Tuple[str, Any, str]


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "key",
        nargs="?",
        help="Show only this setting, or the settings below it (e.g., 'reducer.attributes')",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)


def effective_settings(repo_root: Path) -> List[Setting]:
    """Return ``(key, value, source)`` for each default `reduce` applies."""
    reducer = ReducerConfig(repo_root=repo_root)
    logging_config = LoggingConfig(repo_root=repo_root)
    sources = ConfigManager(repo_root).sources()

    def source(key: str) -> str:
        return sources.get(key, BUILTIN_SOURCE)

    settings: List[Setting] = [
        ("reducer.safe", reducer.safe.name.lower(), source("reducer.safe")),
        ("reducer.sourcemap", reducer.sourcemap, source("reducer.sourcemap")),
        ("reducer.preserveConditionals", reducer.preserve_conditionals, source("reducer.preserveConditionals")),
        ("reducer.includeMap", reducer.include_map, source("reducer.includeMap")),
        ("reducer.maxIncludeDepth", reducer.max_include_depth, source("reducer.maxIncludeDepth")),
    ]
    for name, value in reducer.attributes.items():
        key = f"reducer.attributes.{name}"
        if key not in sources and name == "max-include-depth":
            # Derived from maxIncludeDepth unless configured as an attribute.
            settings.append((key, value, source("reducer.maxIncludeDepth")))
        else:
            settings.append((key, value, source(key)))
    settings.append(("logging.level", logging_config.level, source("logging.level")))
    settings.append(("logging.format", logging_config.format, source("logging.format")))
    return settings


def _matches(key: str, wanted: str) -> bool:
    return key == wanted or key.startswith(wanted + ".")


def _display(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "unset"
    if value == "":
        return '""'
    return str(value)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        repo_root = get_repo_root(args)
        ConfigManager(repo_root).load_config(validate=True)
        settings = effective_settings(repo_root)
    except Exception as e:
        formatter.error(e, error_code="config_error")
        return 1

    if args.key:
        settings = [s for s in settings if _matches(s[0], args.key)]
        if not settings:
            formatter.text(f"Key not found: {args.key}")
            return 1

    if formatter.json_mode:
        formatter.json_output({key: {"value": value, "source": src} for key, value, src in settings})
        return 0

    width = max(len(key) for key, _, _ in settings)
    for key, value, src in settings:
        formatter.text(f"{key:<{width}}  {_display(value)}  ({src})")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
