"""Resolution of ``$ref`` references and ``id`` lookups within a schema tree.

References are resolved against the base URI of the node that holds them
(RFC 3986), then the fragment is navigated as a JSON pointer starting at the
document node the reference points into. Results are cached on the root of
the tree, keyed by the absolute reference URI, so every distinct target is
looked up once per tree.
"""

import logging
from typing import Any, List, Optional
from urllib.parse import ParseResult, unquote, urldefrag, urljoin, urlparse

import jsonpointer
from jsonpointer import JsonPointerException

from jsvalidate.errors import CircularReferenceError, InvalidReferenceError, SchemaNotFoundError
from jsvalidate.schema import Schema

logger = logging.getLogger(__name__)


def resolve_url(schema: Schema, ref: str) -> ParseResult:
    """Resolves a reference against the base URI of a node.

    Args:
        schema: The node holding the reference
        ref: An absolute or relative URI reference, optionally with a fragment

    Returns:
        The absolute reference as a parsed URL.

    Raises:
        InvalidReferenceError: If the reference cannot be parsed
    """
    base = schema.base_url()
    logger.debug("Resolving URL '%s' against base '%s'", ref, base.geturl())
    try:
        reference = urlparse(ref)
        if not (reference.scheme or reference.netloc or reference.path or reference.query):
            # same-document reference
            return base._replace(fragment=reference.fragment)
        return urlparse(urljoin(base.geturl(), ref))
    except ValueError as e:
        raise InvalidReferenceError(ref, str(e)) from e


def reference_key(schema: Schema) -> str:
    """The absolute URI the ``$ref`` of a node resolves to; the cache key for it."""
    return resolve_url(schema, schema.reference).geturl()


def find_schema_by_id(root: Schema, schema_id: str) -> Optional[Schema]:
    """Searches the whole tree below ``root`` for the node with the given id."""
    for node in root.walk():
        if node.id == schema_id:
            return node
    if not schema_id:
        return None
    try:
        wanted = urldefrag(schema_id)[0]
    except ValueError:
        return None
    for node in root.walk():
        if node.id and node.absolute_id() == wanted:
            return node
    return None


def resolve_id(schema: Schema, schema_id: str) -> Schema:
    """Finds the node of a tree whose id is ``schema_id``.

    The id index of the tree is consulted first; on a miss the whole tree
    is searched and the result is added to the index.

    Raises:
        SchemaNotFoundError: If no node in the tree has that id
    """
    state = schema.resolution_state
    with state.lock:
        found = state.schema_by_id.get(schema_id)
        if found is not None:
            return found
        state.id_searches += 1
        found = find_schema_by_id(schema.root(), schema_id)
        if found is None:
            logger.debug("No schema with id '%s'", schema_id)
            raise SchemaNotFoundError(schema_id)
        state.schema_by_id[schema_id] = found
        return found


def _find_document(schema: Schema, url: ParseResult) -> Schema:
    document_uri = urldefrag(url.geturl())[0]
    base_uri = urldefrag(schema.base_url().geturl())[0]
    if document_uri and document_uri != base_uri:
        # points into another document of the same tree, identified by its id
        return resolve_id(schema, document_uri)
    return resolve_id(schema, schema.scope())


def resolve_reference(schema: Schema, ref: str) -> Any:
    """Resolves a reference to the value it points at.

    The result is usually a ``Schema`` node, but a pointer may also lead to
    any other value of the document, such as a ``default`` or an ``enum``.

    Args:
        schema: The node holding the reference
        ref: The reference string

    Returns:
        The referenced value.

    Raises:
        InvalidReferenceError: If the reference is malformed or the pointer cannot be navigated
        SchemaNotFoundError: If the document the reference points into is not part of the tree
    """
    url = resolve_url(schema, ref)
    key = url.geturl()
    state = schema.resolution_state
    with state.lock:
        if key in state.cached_reference:
            state.cache_hits += 1
            logger.debug("Cache HIT for '%s'", key)
            return state.cached_reference[key]

        document = _find_document(schema, url)
        state.pointer_lookups += 1
        try:
            result = jsonpointer.resolve_pointer(document, unquote(url.fragment))
        except JsonPointerException as e:
            raise InvalidReferenceError(ref, str(e)) from e
        state.cached_reference[key] = result
    logger.debug("Resolved '%s' (%s)", ref, key)
    return result


def dereference(schema: Schema) -> Schema:
    """Returns the schema a pointer node stands for, or the node itself.

    Chains of pointer nodes are followed to the first node without ``$ref``.

    Raises:
        InvalidReferenceError: If a reference does not lead to a schema
        CircularReferenceError: If a chain of references loops
    """
    node = schema
    chain: List[str] = []
    while node.reference:
        key = reference_key(node)
        if key in chain:
            raise CircularReferenceError(key, chain + [key])
        chain.append(key)
        target = resolve_reference(node, node.reference)
        if not isinstance(target, Schema):
            raise InvalidReferenceError(node.reference, "resolved target is not a schema")
        node = target
    return node
