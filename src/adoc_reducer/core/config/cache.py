"""Centralized configuration caching.

Provides a single source of truth for loaded configuration across all domain configs.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

# ---------------------------------------------------------------------------
# Global Cache Registry
# ---------------------------------------------------------------------------

_config_cache: Dict[str, Dict[str, Any]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        return Path.cwd().resolve()
    return Path(repo_root).expanduser().resolve()


def _cache_key(repo_root: Path) -> str:
    """Generate cache key from repo_root, environment overrides and project files.

    Long-running processes and tests may change ADOC_REDUCER_* variables or
    project YAML files after a first load; both are part of the key.
    """
    from .manager import ENV_PREFIX, get_project_config_dir
    from adoc_reducer.core.utils.io import iter_yaml_files

    env_items = sorted((k, os.environ.get(k, "")) for k in os.environ.keys() if k.startswith(ENV_PREFIX))
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    files = []
    project_dir = get_project_config_dir(repo_root)
    for directory in (project_dir / "config", project_dir / "config.local"):
        for p in iter_yaml_files(directory):
            st = p.stat()
            files.append((directory.name, p.name, int(st.st_mtime_ns), int(st.st_size)))
    cfg_fp = hashlib.sha256(repr(files).encode("utf-8")).hexdigest()[:12]

    return f"{repo_root}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(repo_root: Optional[Path] = None, validate: bool = False) -> Dict[str, Any]:
    """Get configuration with caching.

    Returns the same config dict instance for the same repo_root (and the
    same environment and project files), avoiding repeated file I/O.

    Args:
        repo_root: Repository root path. Uses the working directory if None.
        validate: Whether to validate against schema.

    Returns:
        Configuration dictionary (cached).
    """
    normalized_root = _normalize_repo_root(repo_root)
    key = _cache_key(normalized_root)
    if key not in _config_cache:
        from .manager import ConfigManager

        _config_cache[key] = ConfigManager(normalized_root)._load_config_uncached(validate=validate)
    return _config_cache[key]


def is_cached(repo_root: Optional[Path] = None) -> bool:
    return _cache_key(_normalize_repo_root(repo_root)) in _config_cache


def clear_all_caches() -> None:
    """Clear the configuration cache (useful for testing)."""
    _config_cache.clear()


__all__ = ["get_cached_config", "is_cached", "clear_all_caches"]
