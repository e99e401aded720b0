from __future__ import annotations

from enum import IntEnum
from typing import Union


class SafeMode(IntEnum):
    """How much a document may reach outside of itself.

    ``SECURE`` turns every include into a link to its target. ``SERVER``
    and above hide the location of the document file.
    """

    UNSAFE = 0
    SAFE = 1
    SERVER = 10
    SECURE = 20

    @classmethod
    def parse(cls, value: Union[str, int, "SafeMode", None]) -> "SafeMode":
        """Accept a mode name (``"secure"``), a number, or a mode."""
        if value is None:
            return cls.SAFE
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown safe mode: {value}") from None


__all__ = ["SafeMode"]
