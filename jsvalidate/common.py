"""
Common utility functions for jsvalidate.
"""

import decimal
import fractions
from typing import Any


class _Absent:
    """Marker for a keyword or property that is not present at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'ABSENT'

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


ABSENT = _Absent()


def is_absent(value: Any) -> bool:
    """A property value counts as absent when it is missing or JSON null."""
    return value is ABSENT or value is None


def is_json_number(value: Any) -> bool:
    """True for int, float, Decimal and Fraction values. Booleans are not numbers."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float, decimal.Decimal, fractions.Fraction))


def is_json_integer(value: Any) -> bool:
    """True for ints (not bools) and floats with no fractional part."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def json_equal(a: Any, b: Any) -> bool:
    """Compare two JSON values the way JSON sees them: 1 == 1.0 but True != 1."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_json_number(a) and is_json_number(b):
        return a == b
    if isinstance(a, dict) and isinstance(b, dict):
        if a.keys() != b.keys():
            return False
        return all(json_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    return type(a) is type(b) and a == b


def type_name(value: Any) -> str:
    """Human-readable JSON kind of a value, for error messages."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if is_json_number(value):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, (list, tuple)):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    return type(value).__name__
