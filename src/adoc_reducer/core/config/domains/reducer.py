"""Domain-specific configuration for reduction defaults.

This config controls the defaults the command line applies when a flag is
not given: safe mode, sourcemaps, conditional preservation, the include map
and attributes passed to every document.
"""
from __future__ import annotations

from functools import cached_property
from typing import Dict, Optional

from adoc_reducer.core.document.safe_mode import SafeMode

from ..base import BaseDomainConfig


class ReducerConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "reducer"

    @cached_property
    def safe(self) -> SafeMode:
        return SafeMode.parse(self.section.get("safe", "unsafe"))

    @cached_property
    def sourcemap(self) -> bool:
        return bool(self.section.get("sourcemap", False))

    @cached_property
    def preserve_conditionals(self) -> bool:
        return bool(self.section.get("preserveConditionals", False))

    @cached_property
    def include_map(self) -> bool:
        return bool(self.section.get("includeMap", False))

    @cached_property
    def max_include_depth(self) -> int:
        return int(self.section.get("maxIncludeDepth", 64))

    @cached_property
    def attributes(self) -> Dict[str, Optional[str]]:
        """Configured attributes, plus ``max-include-depth`` unless set there."""
        raw = self.section.get("attributes") or {}
        attributes: Dict[str, Optional[str]] = {}
        for name, value in raw.items():
            if value is None or value is False:
                attributes[str(name)] = None
            elif value is True:
                attributes[str(name)] = ""
            else:
                attributes[str(name)] = str(value)
        attributes.setdefault("max-include-depth", str(self.max_include_depth))
        return attributes


__all__ = ["ReducerConfig"]
