"""Uniform property access for the structured values the validator checks.

Object validation needs two things from a value: the names of its properties
and the value of one property. ``PropertyAccessor`` provides both; there is
one implementation for mappings and one per kind of record type (dataclasses
and named tuples). Applications with other record types can pass their own
accessors to ``SchemaValidator``.
"""

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence

from jsvalidate.common import ABSENT
from jsvalidate.errors import InvalidTypeError


class PropertyAccessor(ABC):
    """Reads property names and values from one family of structured values."""

    @abstractmethod
    def handles(self, value: Any) -> bool:
        """True if this accessor knows how to read ``value``."""

    @abstractmethod
    def property_names(self, value: Any) -> List[str]:
        """The property names of ``value``, in their natural order."""

    @abstractmethod
    def get_property(self, value: Any, name: str) -> Any:
        """The value of property ``name``, or ``ABSENT`` if there is none."""


class MappingAccessor(PropertyAccessor):
    """Dicts and other mappings with string keys."""

    def handles(self, value: Any) -> bool:
        return isinstance(value, Mapping)

    def property_names(self, value: Any) -> List[str]:
        names = []
        for key in value.keys():
            if not isinstance(key, str):
                raise InvalidTypeError(f"mapping with {type(key).__name__} keys")
            names.append(key)
        return names

    def get_property(self, value: Any, name: str) -> Any:
        return value.get(name, ABSENT)


class DataclassAccessor(PropertyAccessor):
    """Dataclass instances.

    A field is exposed under its own name unless its metadata carries a
    ``json`` entry, which renames it; ``metadata={'json': '-'}`` hides it.
    """

    def handles(self, value: Any) -> bool:
        return dataclasses.is_dataclass(value) and not isinstance(value, type)

    def _fields(self, value: Any) -> Iterable[tuple]:
        for f in dataclasses.fields(value):
            json_name = f.metadata.get('json', f.name)
            if json_name == '-':
                continue
            yield json_name, f.name

    def property_names(self, value: Any) -> List[str]:
        return [json_name for json_name, _ in self._fields(value)]

    def get_property(self, value: Any, name: str) -> Any:
        for json_name, attr in self._fields(value):
            if json_name == name:
                return getattr(value, attr)
        return ABSENT


class NamedTupleAccessor(PropertyAccessor):
    """Instances of ``typing.NamedTuple`` and ``collections.namedtuple`` classes."""

    def handles(self, value: Any) -> bool:
        return isinstance(value, tuple) and hasattr(type(value), '_fields')

    def property_names(self, value: Any) -> List[str]:
        return list(type(value)._fields)

    def get_property(self, value: Any, name: str) -> Any:
        if name in type(value)._fields:
            return getattr(value, name)
        return ABSENT


DEFAULT_ACCESSORS: Sequence[PropertyAccessor] = (
    MappingAccessor(),
    DataclassAccessor(),
    NamedTupleAccessor(),
)


def find_accessor(value: Any, accessors: Optional[Sequence[PropertyAccessor]] = None) -> Optional[PropertyAccessor]:
    """Returns the first accessor able to read ``value``, or None if the value is not structured."""
    for accessor in accessors if accessors is not None else DEFAULT_ACCESSORS:
        if accessor.handles(value):
            return accessor
    return None
