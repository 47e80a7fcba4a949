"""Validates values against a schema graph.

The validator walks the value and the schema together, depth first:

1. ``$ref`` nodes are dereferenced before anything else is looked at.
2. The combinators ``not``, ``allOf``, ``anyOf`` and ``oneOf`` are applied,
   in that order, whatever the kind of the value.
3. The value is classified as object (anything a ``PropertyAccessor`` can
   read), string or number; any other kind is rejected.
4. The kind is matched against ``type``. A declared type list is a set of
   acceptable kinds: the value needs to match one of them.
5. ``enum`` and the keywords for the value's kind are checked.

Validation stops at the first violation, which is raised as a
``ValidationError`` subclass carrying the JSON pointer of the offending value.
"""

import logging
import math
import weakref
from typing import Any, List, Optional, Sequence, Tuple

from jsvalidate import constants
from jsvalidate.accessors import DEFAULT_ACCESSORS, PropertyAccessor, find_accessor
from jsvalidate.common import is_absent, is_json_number, json_equal, type_name
from jsvalidate.errors import (AdditionalPropertiesError, AnyOfValidationError, CircularReferenceError,
                               EnumValidationError, IntegerValidationError, InvalidTypeError,
                               MaximumError, MaxLengthError, MaxPropertiesError, MinimumError,
                               MinLengthError, MinPropertiesError, MultipleOfError,
                               NotValidationError, NumberValidationError, OneOfValidationError,
                               PatternError, RequiredFieldError, SchemaError)
from jsvalidate.formats import check_format
from jsvalidate.resolver import dereference, reference_key
from jsvalidate.schema import Schema

logger = logging.getLogger(__name__)


def _pointer_token(name: str) -> str:
    return name.replace('~', '~0').replace('/', '~1')


class SchemaValidator:
    """Validates values against one schema graph.

    An instance keeps no state between calls, so one validator can serve
    several threads.
    """

    def __init__(self, schema: Schema, accessors: Optional[Sequence[PropertyAccessor]] = None):
        """Initialize the validator.

        Args:
            schema: The root (or any node) of a schema graph
            accessors: Extra property accessors for application record types,
                tried before the built-in ones
        """
        self.schema = schema
        self.accessors: Sequence[PropertyAccessor] = tuple(accessors or ()) + tuple(DEFAULT_ACCESSORS)

    def validate(self, value: Any) -> None:
        """Validates a value against the schema.

        Args:
            value: The value to validate; a ``weakref.ref`` is followed first

        Raises:
            ValidationError: For the first keyword the value violates
            ResolutionError: If a reference in the schema cannot be resolved
        """
        if isinstance(value, weakref.ReferenceType):
            value = value()
        # (reference URI, id(value)) pairs of the $ref nodes being evaluated, one stack per call
        active_refs: List[Tuple[str, int]] = []
        self._validate(value, self.schema, "#", active_refs)

    def is_valid(self, value: Any) -> bool:
        try:
            self.validate(value)
        except SchemaError:
            return False
        return True

    def _validate(self, value: Any, schema: Schema, path: str, active_refs: List[Tuple[str, int]]) -> None:
        guard = None
        if schema.reference:
            guard = (reference_key(schema), id(value))
            if guard in active_refs:
                chain = [uri for uri, value_id in active_refs if value_id == guard[1]]
                raise CircularReferenceError(guard[0], chain + [guard[0]]).at(path)
            active_refs.append(guard)
        try:
            schema = dereference(schema)
            self._validate_combinators(value, schema, path, active_refs)
            self._validate_value(value, schema, path, active_refs)
        finally:
            if guard is not None:
                active_refs.pop()

    def _passes(self, value: Any, schema: Schema, path: str, active_refs: List[Tuple[str, int]]) -> bool:
        """Validates a combinator branch; any failure but a circular reference counts as not passing."""
        try:
            self._validate(value, schema, path, active_refs)
        except CircularReferenceError:
            raise
        except SchemaError as e:
            logger.debug("Branch failed at %s: %s", path, e)
            return False
        return True

    def _validate_combinators(self, value: Any, schema: Schema, path: str,
                             active_refs: List[Tuple[str, int]]) -> None:
        if schema.not_schema is not None:
            logger.debug("Checking 'not' constraint at %s", path)
            if self._passes(value, schema.not_schema, path, active_refs):
                raise NotValidationError(path)

        if schema.all_of:
            logger.debug("Checking 'allOf' constraint at %s", path)
            for sub in schema.all_of:
                self._validate(value, sub, path, active_refs)

        if schema.any_of:
            logger.debug("Checking 'anyOf' constraint at %s", path)
            if not any(self._passes(value, sub, path, active_refs) for sub in schema.any_of):
                raise AnyOfValidationError(path)

        if schema.one_of:
            logger.debug("Checking 'oneOf' constraint at %s", path)
            matches = sum(1 for sub in schema.one_of if self._passes(value, sub, path, active_refs))
            if matches != 1:
                raise OneOfValidationError(matches, path)

    def _validate_value(self, value: Any, schema: Schema, path: str, active_refs: List[Tuple[str, int]]) -> None:
        accessor = find_accessor(value, self.accessors)
        if accessor is not None:
            self._match_type(constants.OBJECT_TYPE, schema, path)
            self._validate_enum(value, schema, path)
            self._validate_object(value, accessor, schema, path, active_refs)
        elif isinstance(value, str):
            self._match_type(constants.STRING_TYPE, schema, path)
            self._validate_enum(value, schema, path)
            self._validate_string(value, schema, path)
        elif is_json_number(value):
            f = self._to_float(value, path)
            self._match_numeric_type(f, schema, path)
            self._validate_enum(value, schema, path)
            self._validate_number(f, schema, path)
        else:
            logger.debug("Value kind is invalid: %s", type_name(value))
            raise InvalidTypeError(type_name(value), schema.type, path)

    def _match_type(self, kind: str, schema: Schema, path: str) -> None:
        if schema.type and kind not in schema.type:
            raise InvalidTypeError(kind, schema.type, path)

    def _match_numeric_type(self, f: float, schema: Schema, path: str) -> None:
        if not schema.type:
            return
        if constants.INTEGER_TYPE in schema.type and math.floor(f) == f:
            return
        if constants.NUMBER_TYPE in schema.type:
            return
        if constants.INTEGER_TYPE in schema.type:
            raise IntegerValidationError(f, path)
        raise InvalidTypeError(constants.NUMBER_TYPE, schema.type, path)

    def _validate_enum(self, value: Any, schema: Schema, path: str) -> None:
        if schema.enum is None:
            return
        if not any(json_equal(value, member) for member in schema.enum):
            raise EnumValidationError(value, schema.enum, path)

    def _to_float(self, value: Any, path: str) -> float:
        try:
            f = float(value)
        except (OverflowError, ValueError) as e:
            raise NumberValidationError(value, path) from e
        if not math.isfinite(f):
            raise NumberValidationError(value, path)
        return f

    def _validate_object(self, value: Any, accessor: PropertyAccessor, schema: Schema, path: str,
                         active_refs: List[Tuple[str, int]]) -> None:
        try:
            names = accessor.property_names(value)
        except InvalidTypeError as e:
            raise e.at(path)

        if schema.min_properties.initialized or schema.max_properties.initialized:
            count = sum(1 for name in names if not is_absent(accessor.get_property(value, name)))
            if schema.min_properties.initialized and count < schema.min_properties.val:
                raise MinPropertiesError(count, schema.min_properties.val, path)
            if schema.max_properties.initialized and count > schema.max_properties.val:
                raise MaxPropertiesError(count, schema.max_properties.val, path)

        # names not yet matched by properties or patternProperties, in value order
        unclaimed = dict.fromkeys(names)

        for pname, pdef in schema.properties.items():
            unclaimed.pop(pname, None)
            self._validate_prop(value, accessor, pname, pdef, schema.is_prop_required(pname), path, active_refs)

        for pname in schema.required:
            if pname not in schema.properties and is_absent(accessor.get_property(value, pname)):
                raise RequiredFieldError(pname, path)

        if schema.pattern_properties:
            for pname in list(unclaimed):
                for rx, pdef in schema.pattern_properties.items():
                    if rx.search(pname):
                        unclaimed.pop(pname, None)
                        self._validate_prop(value, accessor, pname, pdef, schema.is_prop_required(pname), path, active_refs)

        ap = schema.additional_properties
        if ap.is_forbidden:
            if unclaimed:
                raise AdditionalPropertiesError(list(unclaimed), path)
        elif not ap.is_any:
            for pname in unclaimed:
                self._validate_prop(value, accessor, pname, ap.schema, False, path, active_refs)

    def _validate_prop(self, value: Any, accessor: PropertyAccessor, pname: str, pdef: Schema,
                       required: bool, path: str, active_refs: List[Tuple[str, int]]) -> None:
        # unresolvable references fail even when the property is absent
        dereference(pdef)
        pv = accessor.get_property(value, pname)
        if is_absent(pv):
            if required:
                logger.debug("Property %s is required, but not found", pname)
                raise RequiredFieldError(pname, path)
            return
        self._validate(pv, pdef, f"{path}/{_pointer_token(pname)}", active_refs)

    def _validate_string(self, value: str, schema: Schema, path: str) -> None:
        length = len(value)
        if schema.min_length.initialized and length < schema.min_length.val:
            raise MinLengthError(length, schema.min_length.val, path)
        if schema.max_length.initialized and length > schema.max_length.val:
            raise MaxLengthError(length, schema.max_length.val, path)
        if schema.pattern is not None and not schema.pattern.search(value):
            raise PatternError(value, schema.pattern, path)
        if schema.format:
            check_format(value, schema.format, path)

    def _validate_number(self, f: float, schema: Schema, path: str) -> None:
        if schema.minimum.initialized:
            bound = schema.minimum.val
            exclusive = schema.exclusive_minimum.bool()
            if (exclusive and not f > bound) or (not exclusive and not f >= bound):
                raise MinimumError(f, bound, exclusive, path)

        if schema.maximum.initialized:
            bound = schema.maximum.val
            exclusive = schema.exclusive_maximum.bool()
            if (exclusive and not f < bound) or (not exclusive and not f <= bound):
                raise MaximumError(f, bound, exclusive, path)

        divisor = schema.multiple_of.val
        if schema.multiple_of.initialized and divisor != 0:
            # binary floating point: e.g. 0.3 is not seen as a multiple of 0.1
            if math.fmod(f, float(divisor)) != 0:
                raise MultipleOfError(f, divisor, path)


def validate(value: Any, schema: Schema, accessors: Optional[Sequence[PropertyAccessor]] = None) -> None:
    """Validates a value against a schema.

    Raises:
        ValidationError: For the first keyword the value violates
        ResolutionError: If a reference in the schema cannot be resolved
    """
    SchemaValidator(schema, accessors).validate(value)


def validation_errors(value: Any, schema: Schema) -> List[str]:
    """Validates a value against a schema.

    Returns:
        An empty list if the value is valid, otherwise the message of the first violation
    """
    try:
        validate(value, schema)
        return []
    except SchemaError as e:
        return [str(e)]
