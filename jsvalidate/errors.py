"""Errors raised while reading schemas, resolving references and validating values.

Three families share the ``SchemaError`` base:

- construction errors, raised by the schema reader when a keyword holds a
  value of the wrong JSON type,
- resolution errors, raised when a ``$ref`` or an ``id`` cannot be resolved,
- validation errors, one class per violated keyword.

Every error carries a ``path``: a JSON pointer into the validated value (or,
for construction errors, the keyword name) locating the failure.
"""

from typing import Any, List, Optional, Pattern


class SchemaError(Exception):
    """Base class for all jsvalidate errors."""

    def __init__(self, message: str, path: str = "#"):
        self.message = message
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        if self.path and self.path != "#":
            return f"{self.message} at {self.path}"
        return self.message

    def at(self, path: str) -> 'SchemaError':
        """Sets the location of the error and returns it, for ``raise err.at(path)``."""
        self.path = path
        return self


# Construction errors

class InvalidFieldValueError(SchemaError):
    """A schema keyword holds a value of the wrong JSON type."""

    def __init__(self, name: str, value: Any = None):
        self.name = name
        self.value = value
        super().__init__(f"invalid value for field '{name}'")


# Resolution errors

class ResolutionError(SchemaError):
    """Base class for errors raised while resolving references."""


class SchemaNotFoundError(ResolutionError):
    """No node in the schema tree carries the requested id."""

    def __init__(self, schema_id: str):
        self.schema_id = schema_id
        super().__init__(f"schema not found: '{schema_id}'")


class InvalidReferenceError(ResolutionError):
    """A reference is malformed, cannot be navigated, or does not lead to a schema."""

    def __init__(self, reference: str, message: str):
        self.reference = reference
        self.reason = message
        super().__init__(f"invalid reference '{reference}': {message}")


class CircularReferenceError(ResolutionError):
    """A reference leads back to itself without consuming any part of the value."""

    def __init__(self, reference: str, chain: Optional[List[str]] = None):
        self.reference = reference
        self.chain = chain or [reference]
        super().__init__(f"circular reference detected: {' -> '.join(self.chain)}")


# Validation errors

class ValidationError(SchemaError):
    """Base class for keyword violations."""


class RequiredFieldError(ValidationError):

    def __init__(self, name: str, path: str = "#"):
        self.name = name
        super().__init__(f"required field '{name}' is missing", path)


class MinLengthError(ValidationError):

    def __init__(self, length: int, min_length: int, path: str = "#"):
        self.length = length
        self.min_length = min_length
        super().__init__(f"string length {length} is shorter than minLength {min_length}", path)


class MaxLengthError(ValidationError):

    def __init__(self, length: int, max_length: int, path: str = "#"):
        self.length = length
        self.max_length = max_length
        super().__init__(f"string length {length} is longer than maxLength {max_length}", path)


class PatternError(ValidationError):

    def __init__(self, value: str, pattern: Pattern, path: str = "#"):
        self.value = value
        self.pattern = pattern
        super().__init__(f"'{value}' does not match pattern '{pattern.pattern}'", path)


class InvalidFormatError(ValidationError):
    """The value does not satisfy its ``format``, or the format tag is unknown."""

    def __init__(self, value: str, format_name: str, message: Optional[str] = None, path: str = "#"):
        self.value = value
        self.format = format_name
        super().__init__(message or f"invalid format '{format_name}'", path)


class InvalidDateTimeError(InvalidFormatError):

    def __init__(self, value: str, path: str = "#"):
        super().__init__(value, 'date-time', f"'{value}' is not an RFC 3339 date-time", path)


class InvalidEmailError(InvalidFormatError):

    def __init__(self, value: str, path: str = "#"):
        super().__init__(value, 'email', f"'{value}' is not a valid email address", path)


class InvalidHostnameError(InvalidFormatError):

    def __init__(self, value: str, path: str = "#"):
        super().__init__(value, 'hostname', f"'{value}' is not a valid hostname", path)


class InvalidIPv4Error(InvalidFormatError):

    def __init__(self, value: str, path: str = "#"):
        super().__init__(value, 'ipv4', f"'{value}' is not a valid IPv4 address", path)


class InvalidIPv6Error(InvalidFormatError):

    def __init__(self, value: str, path: str = "#"):
        super().__init__(value, 'ipv6', f"'{value}' is not a valid IPv6 address", path)


class InvalidURIError(InvalidFormatError):

    def __init__(self, value: str, path: str = "#"):
        super().__init__(value, 'uri', f"'{value}' is not a valid URI reference", path)


class MinimumError(ValidationError):

    def __init__(self, value: float, bound: float, exclusive: bool, path: str = "#"):
        self.value = value
        self.bound = bound
        self.exclusive = exclusive
        op = '>' if exclusive else '>='
        super().__init__(f"{value} does not satisfy minimum: value {op} {bound}", path)


class MaximumError(ValidationError):

    def __init__(self, value: float, bound: float, exclusive: bool, path: str = "#"):
        self.value = value
        self.bound = bound
        self.exclusive = exclusive
        op = '<' if exclusive else '<='
        super().__init__(f"{value} does not satisfy maximum: value {op} {bound}", path)


class MultipleOfError(ValidationError):

    def __init__(self, value: float, multiple_of: float, path: str = "#"):
        self.value = value
        self.multiple_of = multiple_of
        super().__init__(f"{value} is not a multiple of {multiple_of}", path)


class MinPropertiesError(ValidationError):

    def __init__(self, count: int, min_properties: int, path: str = "#"):
        self.count = count
        self.min_properties = min_properties
        super().__init__(f"object has {count} properties, fewer than minProperties {min_properties}", path)


class MaxPropertiesError(ValidationError):

    def __init__(self, count: int, max_properties: int, path: str = "#"):
        self.count = count
        self.max_properties = max_properties
        super().__init__(f"object has {count} properties, more than maxProperties {max_properties}", path)


class AdditionalPropertiesError(ValidationError):

    def __init__(self, names: List[str], path: str = "#"):
        self.names = names
        super().__init__(f"additional properties are not allowed: {', '.join(names)}", path)


class IntegerValidationError(ValidationError):

    def __init__(self, value: Any, path: str = "#"):
        self.value = value
        super().__init__(f"{value} is not an integer", path)


class NumberValidationError(ValidationError):

    def __init__(self, value: Any, path: str = "#"):
        self.value = value
        super().__init__(f"{value!r} is not a finite number", path)


class InvalidTypeError(ValidationError):

    def __init__(self, kind: str, expected: Optional[List[str]] = None, path: str = "#"):
        self.kind = kind
        self.expected = expected or []
        if self.expected:
            message = f"expected {' or '.join(self.expected)}, got {kind}"
        else:
            message = f"values of kind '{kind}' cannot be validated"
        super().__init__(message, path)


class EnumValidationError(ValidationError):

    def __init__(self, value: Any, enum: List[Any], path: str = "#"):
        self.value = value
        self.enum = enum
        super().__init__(f"{value!r} is not one of {enum!r}", path)


class NotValidationError(ValidationError):

    def __init__(self, path: str = "#"):
        super().__init__("value must not validate against the 'not' schema", path)


class AnyOfValidationError(ValidationError):

    def __init__(self, path: str = "#"):
        super().__init__("value does not validate against any 'anyOf' schema", path)


class OneOfValidationError(ValidationError):

    def __init__(self, matches: int, path: str = "#"):
        self.matches = matches
        super().__init__(f"value must validate against exactly one 'oneOf' schema, matched {matches}", path)
