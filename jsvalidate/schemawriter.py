"""Serializes a schema graph back into a generic JSON tree.

Keywords that are not set are omitted. A single-element ``type`` is written
as a string, several as a list. ``additionalProperties`` is written as
``false`` when forbidden, as a schema when it is constrained by a non-empty
schema, and left out when any additional property is allowed.
"""

import json
import logging
from typing import Any, Dict, Optional

from jsvalidate.schema import Schema
from jsvalidate.schemareader import read_schema_file

logger = logging.getLogger(__name__)


def _to_json_value(value: Any) -> Any:
    if isinstance(value, Schema):
        return to_json_tree(value)
    if isinstance(value, dict):
        return {k: _to_json_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_json_value(v) for v in value]
    return value


def to_json_tree(schema: Schema) -> Dict[str, Any]:
    """Converts a schema node and its subtree into dicts, lists and scalars."""
    return {k: _to_json_value(v) for k, v in schema.keywords().items()}


def dumps_schema(schema: Schema, indent: Optional[int] = 2) -> str:
    return json.dumps(to_json_tree(schema), indent=indent)


def normalize_schema_file(input_file: str, output_file: Optional[str] = None) -> str:
    """Reads a schema file and writes it back in normalized form.

    Unrecognized keywords are dropped and keywords are written in a fixed
    order, so two equivalent documents normalize to the same text.

    Args:
        input_file: Path to the JSON Schema file
        output_file: Path of the file to write; nothing is written if not given

    Returns:
        The normalized schema text
    """
    schema = read_schema_file(input_file)
    text = dumps_schema(schema)
    if output_file:
        logger.debug("Writing normalized schema to %s", output_file)
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(text)
    return text


# Command entry point for jsvalidate CLI
def normalize(input: str, out: Optional[str] = None) -> None:
    """Normalizes a schema file.

    Args:
        input: Path to the JSON Schema file
        out: Path of the normalized schema file; printed to stdout if not given
    """
    text = normalize_schema_file(input, out)
    if not out:
        print(text)
