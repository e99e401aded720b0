"""Common CLI argument registration utilities.

This module provides reusable argument registration functions to reduce
duplication across CLI commands.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for the directory holding .adoc-reducer/ config.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Directory containing the .adoc-reducer/ configuration (default: current directory)",
    )


def add_log_flags(parser: argparse.ArgumentParser) -> None:
    """Add --log-level and -q/--quiet flags."""
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "error", "fatal"],
        help="Minimum level of messages to report (default: from configuration, warn)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress all log messages",
    )


__all__ = ["add_json_flag", "add_repo_root_flag", "add_log_flags"]
