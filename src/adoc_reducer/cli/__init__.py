"""
adoc-reducer CLI package.

Provides the command-line interface with auto-discovery of commands
from the commands/ subfolder.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._args import add_json_flag, add_log_flags, add_repo_root_flag
from ._output import OutputFormatter
from ._utils import configure_logging, get_repo_root

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_log_flags",
    "add_repo_root_flag",
    # Utilities
    "configure_logging",
    "get_repo_root",
]
