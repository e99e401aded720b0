from __future__ import annotations

from typing import Any, Dict, Mapping


class ReducerError(Exception):
    """Base exception for adoc-reducer."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(ReducerError, ValueError):
    """Raised when configuration cannot be loaded or fails validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ReducerError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class InputNotFoundError(ReducerError, FileNotFoundError):
    """Raised when the document to reduce does not exist."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ReducerError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class OutputError(ReducerError, OSError):
    """Raised when the reduced document cannot be written."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ReducerError.__init__(self, message, context=context)
        OSError.__init__(self, message)


__all__ = [
    "ReducerError",
    "ConfigError",
    "InputNotFoundError",
    "OutputError",
]
