"""Domain-specific configuration for command line logging."""

from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class LoggingConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level", "warn"))

    @cached_property
    def format(self) -> str:
        return str(self.section.get("format", "adoc-reducer: %(levelname)s: %(message)s"))


__all__ = ["LoggingConfig"]
