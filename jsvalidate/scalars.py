"""Tri-state scalar wrappers for schema keywords.

A keyword such as ``minimum: 0`` or ``uniqueItems: false`` is present with a
zero value, which is different from the keyword not being there at all. These
wrappers keep the value together with an ``initialized`` flag so the validator
and the writer can tell the two cases apart.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class Number:
    """An optional number keyword (minimum, maximum, multipleOf)."""
    val: float = 0.0
    initialized: bool = False

    def set(self, val: Any) -> None:
        self.val = val
        self.initialized = True

    def get(self, default: Optional[float] = None) -> Optional[float]:
        return self.val if self.initialized else default


@dataclass
class Integer:
    """An optional integer keyword (minLength, maxItems, minProperties, ...)."""
    val: int = 0
    initialized: bool = False

    def set(self, val: int) -> None:
        self.val = int(val)
        self.initialized = True

    def get(self, default: Optional[int] = None) -> Optional[int]:
        return self.val if self.initialized else default


@dataclass
class Bool:
    """An optional boolean keyword with a default used when it is not set."""
    val: bool = False
    initialized: bool = False
    default: bool = False

    def set(self, val: bool) -> None:
        self.val = bool(val)
        self.initialized = True

    def bool(self) -> bool:
        """The effective value: the explicit one if set, otherwise the default."""
        if self.initialized:
            return self.val
        return self.default
