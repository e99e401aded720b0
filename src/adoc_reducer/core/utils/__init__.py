"""Shared helpers."""
from __future__ import annotations

from .io import iter_yaml_files, read_yaml
from .merge import deep_merge

__all__ = ["deep_merge", "iter_yaml_files", "read_yaml"]
