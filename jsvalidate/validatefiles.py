"""Validates JSON instance files against JSON Schema files.

This module provides the file-level front end of the validator: it loads a
schema file once, reads instances from JSON or JSONL files and validates each
instance with a separate call.
"""

import json
import logging
import sys
from typing import Any, List, Optional, Tuple

from jsvalidate.errors import SchemaError
from jsvalidate.schema import Schema
from jsvalidate.schemareader import read_schema_file
from jsvalidate.validator import SchemaValidator

logger = logging.getLogger(__name__)


class ValidationResult:
    """Result of validating a JSON instance against a schema."""

    def __init__(self, is_valid: bool, errors: Optional[List[str]] = None, instance_path: Optional[str] = None):
        self.is_valid = is_valid
        self.errors = errors or []
        self.instance_path = instance_path

    def __str__(self) -> str:
        if self.is_valid:
            return "✓ Valid" + (f": {self.instance_path}" if self.instance_path else "")
        prefix = f"{self.instance_path}: " if self.instance_path else ""
        return f"✗ Invalid: {prefix}" + "; ".join(self.errors)

    def __repr__(self) -> str:
        return f"ValidationResult(is_valid={self.is_valid}, errors={self.errors})"


def validate_instance(instance: Any, schema: Schema) -> ValidationResult:
    """Validates a JSON instance against a schema.

    Args:
        instance: The JSON value to validate
        schema: The schema graph

    Returns:
        ValidationResult with validation status and the first error, if any
    """
    try:
        SchemaValidator(schema).validate(instance)
    except SchemaError as e:
        return ValidationResult(is_valid=False, errors=[str(e)])
    return ValidationResult(is_valid=True)


def load_instances(instance_file: str, schema_is_array: bool = False) -> List[Tuple[Any, str]]:
    """Reads the instances of a JSON or JSONL file.

    A JSON array holds one instance per element, unless the schema itself
    expects an array. A file that is not a single JSON document is read as
    JSONL, one instance per non-empty line.

    Returns:
        (instance, location) pairs, the location naming the file and element or line
    """
    with open(instance_file, 'r', encoding='utf-8') as f:
        content = f.read().strip()

    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        instances = []
        for i, line in enumerate(content.split('\n')):
            line = line.strip()
            if not line:
                continue
            try:
                instances.append((json.loads(line), f"{instance_file}:{i+1}"))
            except json.JSONDecodeError as e:
                logger.warning("Skipping line %d of %s: %s", i + 1, instance_file, e)
        return instances

    if isinstance(data, list) and not schema_is_array:
        return [(item, f"{instance_file}[{i}]") for i, item in enumerate(data)]
    return [(data, instance_file)]


def validate_file(instance_file: str, schema_file: str) -> List[ValidationResult]:
    """Validates JSON instance file(s) against a schema file.

    Args:
        instance_file: Path to JSON file (single object, array, or JSONL)
        schema_file: Path to the JSON Schema file

    Returns:
        List of ValidationResult for each instance in the file
    """
    schema = read_schema_file(schema_file)
    schema_is_array = schema.type == ['array']

    results = []
    for instance, location in load_instances(instance_file, schema_is_array):
        result = validate_instance(instance, schema)
        result.instance_path = location
        results.append(result)
    return results


def validate_json_instances(
    input_files: List[str],
    schema_file: str,
    verbose: bool = False
) -> Tuple[int, int]:
    """Validates multiple JSON instance files against a schema.

    Args:
        input_files: List of JSON file paths to validate
        schema_file: Path to schema file
        verbose: Whether to print validation results

    Returns:
        Tuple of (valid_count, invalid_count)
    """
    valid_count = 0
    invalid_count = 0

    for input_file in input_files:
        for result in validate_file(input_file, schema_file):
            if result.is_valid:
                valid_count += 1
            else:
                invalid_count += 1
            if verbose:
                print(result)

    return valid_count, invalid_count


# Command entry point for jsvalidate CLI
def validate(
    input: List[str],
    schema: str,
    quiet: bool = False
) -> None:
    """Validates JSON instances against a JSON Schema.

    Args:
        input: List of JSON files to validate
        schema: Path to the JSON Schema file
        quiet: Suppress output, exit with code 0 if valid, 1 if invalid
    """
    valid_count, invalid_count = validate_json_instances(
        input_files=input,
        schema_file=schema,
        verbose=not quiet
    )

    if not quiet:
        total = valid_count + invalid_count
        print(f"\nValidation summary: {valid_count}/{total} instances valid")

    if invalid_count > 0:
        sys.exit(1)
