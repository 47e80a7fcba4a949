"""Builds a schema graph from a parsed JSON Schema document.

The reader walks the generic JSON tree (dicts, lists, strings, numbers,
booleans, None as produced by ``json.load``), copies every recognized keyword
into a ``Schema`` node and recurses into sub-schemas. Unrecognized keywords
are ignored. A keyword holding a value of the wrong JSON type raises
``InvalidFieldValueError``; invalid regular expressions in ``pattern`` or
``patternProperties`` raise ``re.error``.
"""

import json
import logging
import re
from typing import Any, Dict, IO, List, Optional, Pattern

from jsvalidate.common import ABSENT, is_json_integer, is_json_number
from jsvalidate.constants import PRIMITIVE_TYPES
from jsvalidate.errors import InvalidFieldValueError
from jsvalidate.scalars import Bool, Integer, Number
from jsvalidate.schema import AdditionalProperties, Schema

logger = logging.getLogger(__name__)


def extract_string(m: Dict[str, Any], name: str) -> str:
    if name not in m:
        return ''
    v = m[name]
    if not isinstance(v, str):
        raise InvalidFieldValueError(name, v)
    return v


def extract_string_list(m: Dict[str, Any], name: str) -> List[str]:
    if name not in m:
        return []
    v = m[name]
    if isinstance(v, str):
        return [v]
    if not isinstance(v, list) or not all(isinstance(x, str) for x in v):
        raise InvalidFieldValueError(name, v)
    return list(v)


def extract_number(n: Number, m: Dict[str, Any], name: str) -> None:
    if name not in m:
        return
    v = m[name]
    if not is_json_number(v):
        raise InvalidFieldValueError(name, v)
    n.set(v)


def extract_int(n: Integer, m: Dict[str, Any], name: str) -> None:
    if name not in m:
        return
    v = m[name]
    if not is_json_integer(v):
        raise InvalidFieldValueError(name, v)
    n.set(int(v))


def extract_bool(b: Bool, m: Dict[str, Any], name: str) -> None:
    if name not in m:
        return
    v = m[name]
    if not isinstance(v, bool):
        raise InvalidFieldValueError(name, v)
    b.set(v)


def extract_type(m: Dict[str, Any]) -> List[str]:
    types = extract_string_list(m, 'type')
    for t in types:
        if t not in PRIMITIVE_TYPES:
            raise InvalidFieldValueError('type', t)
    return types


def extract_regexp(m: Dict[str, Any], name: str) -> Optional[Pattern]:
    if name not in m:
        return None
    v = m[name]
    if not isinstance(v, str):
        raise InvalidFieldValueError(name, v)
    return re.compile(v)


def extract_schema(m: Dict[str, Any], name: str) -> Optional[Schema]:
    if name not in m:
        return None
    v = m[name]
    if not isinstance(v, dict):
        raise InvalidFieldValueError(name, v)
    return _extract_node(v)


def extract_schema_list(m: Dict[str, Any], name: str) -> List[Schema]:
    if name not in m:
        return []
    v = m[name]
    if isinstance(v, dict):
        return [_extract_node(v)]
    if not isinstance(v, list):
        raise InvalidFieldValueError(name, v)
    schemas = []
    for item in v:
        if not isinstance(item, dict):
            raise InvalidFieldValueError(name, item)
        schemas.append(_extract_node(item))
    return schemas


def extract_schema_map(m: Dict[str, Any], name: str) -> Dict[str, Schema]:
    if name not in m:
        return {}
    v = m[name]
    if not isinstance(v, dict):
        raise InvalidFieldValueError(name, v)
    schemas = {}
    for key, data in v.items():
        if not isinstance(data, dict):
            raise InvalidFieldValueError(name, data)
        schemas[key] = _extract_node(data)
    return schemas


def extract_regexp_schema_map(m: Dict[str, Any], name: str) -> Dict[Pattern, Schema]:
    return {re.compile(k): s for k, s in extract_schema_map(m, name).items()}


def extract_additional_properties(m: Dict[str, Any]) -> AdditionalProperties:
    if 'additionalProperties' not in m:
        return AdditionalProperties.allow_any()
    v = m['additionalProperties']
    if isinstance(v, bool):
        return AdditionalProperties.allow_any() if v else AdditionalProperties.forbidden()
    if isinstance(v, dict):
        return AdditionalProperties.matching(_extract_node(v))
    raise InvalidFieldValueError('additionalProperties', v)


def _extract_node(m: Dict[str, Any]) -> Schema:
    s = Schema()

    if 'id' in m:
        s.id = extract_string(m, 'id')
    elif '$id' in m:
        s.id = extract_string(m, '$id')
        s.id_keyword = '$id'
    s.title = extract_string(m, 'title')
    s.description = extract_string(m, 'description')
    s.schema_ref = extract_string(m, '$schema')
    s.reference = extract_string(m, '$ref')
    s.format = extract_string(m, 'format')
    s.default = m.get('default', ABSENT)
    s.type = extract_type(m)

    if 'enum' in m:
        if not isinstance(m['enum'], list):
            raise InvalidFieldValueError('enum', m['enum'])
        s.enum = list(m['enum'])

    extract_number(s.minimum, m, 'minimum')
    extract_bool(s.exclusive_minimum, m, 'exclusiveMinimum')
    extract_number(s.maximum, m, 'maximum')
    extract_bool(s.exclusive_maximum, m, 'exclusiveMaximum')
    extract_number(s.multiple_of, m, 'multipleOf')

    extract_int(s.min_length, m, 'minLength')
    extract_int(s.max_length, m, 'maxLength')
    s.pattern = extract_regexp(m, 'pattern')

    s.items = extract_schema_list(m, 'items')
    s.tuple_items = isinstance(m.get('items'), list)
    if isinstance(m.get('additionalItems'), bool):
        extract_bool(s.allow_additional_items, m, 'additionalItems')
    else:
        s.additional_items = extract_schema_list(m, 'additionalItems')
    extract_int(s.min_items, m, 'minItems')
    extract_int(s.max_items, m, 'maxItems')
    extract_bool(s.unique_items, m, 'uniqueItems')

    s.required = extract_string_list(m, 'required')
    extract_int(s.min_properties, m, 'minProperties')
    extract_int(s.max_properties, m, 'maxProperties')
    s.properties = extract_schema_map(m, 'properties')
    s.pattern_properties = extract_regexp_schema_map(m, 'patternProperties')
    s.additional_properties = extract_additional_properties(m)

    s.definitions = extract_schema_map(m, 'definitions')
    s.all_of = extract_schema_list(m, 'allOf')
    s.any_of = extract_schema_list(m, 'anyOf')
    s.one_of = extract_schema_list(m, 'oneOf')
    s.not_schema = extract_schema(m, 'not')
    return s


def extract(m: Dict[str, Any]) -> Schema:
    """Builds a schema node, and its whole subtree, from a generic JSON object.

    Args:
        m: The JSON object holding the schema keywords

    Returns:
        The new node, with every descendant linked to its parent.

    Raises:
        InvalidFieldValueError: If a keyword holds a value of the wrong type
        re.error: If a pattern does not compile
    """
    if not isinstance(m, dict):
        raise InvalidFieldValueError('schema', m)
    s = _extract_node(m)
    s.apply_parent_schema()
    return s


def loads_schema(text: str) -> Schema:
    """Parses a JSON Schema document from a string."""
    return extract(json.loads(text))


def read_schema(fp: IO[str]) -> Schema:
    """Parses a JSON Schema document from an open text file."""
    return extract(json.load(fp))


def read_schema_file(schema_file: str) -> Schema:
    """Parses a JSON Schema document from a file path."""
    logger.debug("Reading schema from %s", schema_file)
    with open(schema_file, 'r', encoding='utf-8') as f:
        return read_schema(f)
