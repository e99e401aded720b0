"""adoc-reducer configuration system.

Usage:
    from adoc_reducer.core.config import ConfigManager
    from adoc_reducer.core.config.domains import ReducerConfig

    # Direct config manager usage
    manager = ConfigManager(repo_root=Path("/path/to/project"))
    config = manager.load_config()

    # Domain-specific accessors (recommended)
    reducer = ReducerConfig(repo_root=Path("/path/to/project"))
    safe = reducer.safe
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config, is_cached
from .domains import LoggingConfig, ReducerConfig
from .manager import ConfigManager

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "LoggingConfig",
    "ReducerConfig",
    "clear_all_caches",
    "get_cached_config",
    "is_cached",
]
