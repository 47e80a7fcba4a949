"""Checks that every reference in a schema document resolves.

Validation only resolves the references it meets on the way, so a broken
``$ref`` in a rarely used branch goes unnoticed until a value reaches it. The
check walks the whole tree and dereferences every pointer node up front.
"""

import logging
import sys
from typing import List, Tuple

from jsvalidate.errors import ResolutionError
from jsvalidate.resolver import dereference
from jsvalidate.schema import Schema
from jsvalidate.schemareader import read_schema_file

logger = logging.getLogger(__name__)


def find_reference_problems(schema: Schema) -> List[Tuple[str, str]]:
    """Dereferences every ``$ref`` in the tree.

    Returns:
        (reference, message) pairs, one for each reference that fails to resolve
    """
    problems = []
    for node in schema.walk():
        if not node.reference:
            continue
        try:
            dereference(node)
        except ResolutionError as e:
            logger.warning("Unresolvable reference '%s': %s", node.reference, e)
            problems.append((node.reference, str(e)))
    return problems


# Command entry point for jsvalidate CLI
def check(input: str) -> None:
    """Reports the references of a schema file that do not resolve.

    Args:
        input: Path to the JSON Schema file
    """
    schema = read_schema_file(input)
    problems = find_reference_problems(schema)
    for reference, message in problems:
        print(f"✗ {reference}: {message}")
    references = sum(1 for node in schema.walk() if node.reference)
    print(f"\nReference check: {references - len(problems)}/{references} references resolve")
    if problems:
        sys.exit(1)
