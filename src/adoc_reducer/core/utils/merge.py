"""Deep merge for layered configuration."""
from __future__ import annotations

from typing import Any, Dict


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge dictionaries without mutating inputs.

    Mappings merge key by key; any other value in ``override``, lists
    included, replaces the one in ``base``.

    Example:
        >>> deep_merge({"reducer": {"safe": "unsafe"}}, {"reducer": {"sourcemap": True}})
        {'reducer': {'safe': 'unsafe', 'sourcemap': True}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


__all__ = ["deep_merge"]
