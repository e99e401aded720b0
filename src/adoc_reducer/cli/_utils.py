"""Shared CLI utilities."""
from __future__ import annotations

import argparse
from pathlib import Path

from adoc_reducer.core.config.domains import LoggingConfig
from adoc_reducer.core.stdlib_logging import configure_stdlib_logging


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get the configuration root from args, defaulting to the working directory.

    Args:
        args: Parsed arguments with optional repo_root attribute

    Returns:
        Path: Directory holding the .adoc-reducer/ configuration
    """
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).expanduser().resolve()
    return Path.cwd().resolve()


def configure_logging(args: argparse.Namespace, repo_root: Path) -> None:
    """Route log messages to stderr at the level chosen by flags or configuration."""
    logging_config = LoggingConfig(repo_root=repo_root)
    if getattr(args, "quiet", False):
        level = None
    else:
        level = getattr(args, "log_level", None) or logging_config.level
    configure_stdlib_logging(level=level, fmt=logging_config.format)


__all__ = ["get_repo_root", "configure_logging"]
