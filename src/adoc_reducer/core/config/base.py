"""Base class for the per-section configuration accessors."""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .cache import get_cached_config


class BaseDomainConfig(ABC):
    """Read one top-level section of the cached configuration.

    Subclasses name the section and expose its settings as cached
    properties with their fallback values::

        class LoggingConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "logging"

            @cached_property
            def level(self) -> str:
                return str(self.section.get("level", "warn"))
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self._config = get_cached_config(repo_root=repo_root)

    @abstractmethod
    def _config_section(self) -> str:
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """This domain's section, or an empty dict when it is missing."""
        return self._config.get(self._config_section(), {}) or {}


__all__ = ["BaseDomainConfig"]
