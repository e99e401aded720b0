"""Domain-specific configuration accessors."""
from __future__ import annotations

from .logging import LoggingConfig
from .reducer import ReducerConfig

__all__ = ["LoggingConfig", "ReducerConfig"]
