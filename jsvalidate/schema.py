"""The in-memory schema graph.

A ``Schema`` is one node of a tree built from a JSON Schema document. Children
(``properties``, ``definitions``, ``allOf`` members, ...) are owned by their
parent node; each child keeps a weak back-reference to its parent, used only
to compute the base URI scope of a node and to find the root of the tree.

The root node additionally owns a ``ResolutionState``: the id index and the
reference cache used by the resolver. The state is created on first use and
exists exactly once per tree.
"""

import threading
import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Pattern
from urllib.parse import ParseResult, urldefrag, urljoin, urlparse

from jsvalidate.common import ABSENT
from jsvalidate.scalars import Bool, Integer, Number

_STATE_LOCK = threading.Lock()


@dataclass
class ResolutionState:
    """Per-tree caches for id lookups and resolved references.

    The counters are instrumentation: they record how many full-tree id
    searches, JSON pointer navigations and cache hits the tree has seen.
    """
    schema_by_id: Dict[str, 'Schema'] = field(default_factory=dict)
    cached_reference: Dict[str, Any] = field(default_factory=dict)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    id_searches: int = 0
    pointer_lookups: int = 0
    cache_hits: int = 0

    def clear(self) -> None:
        with self.lock:
            self.schema_by_id.clear()
            self.cached_reference.clear()


class AdditionalProperties:
    """The three states of ``additionalProperties``: forbidden, any, or matching a schema."""

    def __init__(self, allowed: bool = True, schema: Optional['Schema'] = None):
        self.allowed = allowed
        self.schema = schema

    @classmethod
    def forbidden(cls) -> 'AdditionalProperties':
        return cls(allowed=False)

    @classmethod
    def allow_any(cls) -> 'AdditionalProperties':
        return cls(allowed=True)

    @classmethod
    def matching(cls, schema: 'Schema') -> 'AdditionalProperties':
        return cls(allowed=True, schema=schema)

    @property
    def is_forbidden(self) -> bool:
        return not self.allowed

    @property
    def is_any(self) -> bool:
        return self.allowed and (self.schema is None or self.schema.is_empty())

    def __repr__(self) -> str:
        if self.is_forbidden:
            return 'AdditionalProperties(forbidden)'
        if self.schema is None:
            return 'AdditionalProperties(any)'
        return f'AdditionalProperties({self.schema!r})'


class Schema:
    """A node of the schema graph."""

    def __init__(self):
        self.id: str = ''
        self.id_keyword: str = 'id'
        self.title: str = ''
        self.description: str = ''
        self.default: Any = ABSENT
        self.type: List[str] = []
        self.reference: str = ''
        self.schema_ref: str = ''
        self.enum: Optional[List[Any]] = None
        self.format: str = ''

        # numeric
        self.minimum = Number()
        self.exclusive_minimum = Bool(default=False)
        self.maximum = Number()
        self.exclusive_maximum = Bool(default=False)
        self.multiple_of = Number()

        # string
        self.min_length = Integer()
        self.max_length = Integer()
        self.pattern: Optional[Pattern] = None

        # array
        self.min_items = Integer()
        self.max_items = Integer()
        self.unique_items = Bool(default=False)
        self.items: List['Schema'] = []
        self.tuple_items: bool = False
        self.additional_items: List['Schema'] = []
        self.allow_additional_items = Bool(default=True)

        # object
        self.min_properties = Integer()
        self.max_properties = Integer()
        self.required: List[str] = []
        self.properties: Dict[str, 'Schema'] = {}
        self.pattern_properties: Dict[Pattern, 'Schema'] = {}
        self.additional_properties = AdditionalProperties.allow_any()

        # combinators
        self.all_of: List['Schema'] = []
        self.any_of: List['Schema'] = []
        self.one_of: List['Schema'] = []
        self.not_schema: Optional['Schema'] = None

        self.definitions: Dict[str, 'Schema'] = {}

        self._parent: Optional[weakref.ReferenceType] = None
        self._resolution_state: Optional[ResolutionState] = None

    def __repr__(self) -> str:
        if self.reference:
            return f"<Schema $ref={self.reference!r}>"
        if self.id:
            return f"<Schema id={self.id!r}>"
        if self.title:
            return f"<Schema title={self.title!r}>"
        return f"<Schema type={self.type!r}>"

    # -- tree structure -----------------------------------------------------

    @property
    def parent(self) -> Optional['Schema']:
        if self._parent is None:
            return None
        return self._parent()

    def set_parent(self, parent: Optional['Schema']) -> None:
        self._parent = weakref.ref(parent) if parent is not None else None

    def subschemas(self) -> Iterator['Schema']:
        """Yields the direct children of this node."""
        yield from self.definitions.values()
        yield from self.items
        yield from self.additional_items
        yield from self.properties.values()
        yield from self.pattern_properties.values()
        if self.additional_properties.schema is not None:
            yield self.additional_properties.schema
        yield from self.all_of
        yield from self.any_of
        yield from self.one_of
        if self.not_schema is not None:
            yield self.not_schema

    def apply_parent_schema(self) -> None:
        """Links every descendant to its immediate parent."""
        for child in self.subschemas():
            child.set_parent(self)
            child.apply_parent_schema()

    def walk(self) -> Iterator['Schema']:
        """Pre-order traversal of this node and all of its descendants."""
        yield self
        for child in self.subschemas():
            yield from child.walk()

    def root(self) -> 'Schema':
        node = self
        while True:
            parent = node.parent
            if parent is None:
                return node
            node = parent

    # -- scope --------------------------------------------------------------

    def scope(self) -> str:
        """The id of the nearest node, this one included, that declares one."""
        node = self
        while node is not None:
            if node.id:
                return node.id
            node = node.parent
        return ''

    def base_url(self) -> ParseResult:
        try:
            return urlparse(self.scope())
        except ValueError:
            return urlparse('')

    def absolute_id(self) -> str:
        """This node's id composed with the scope of its ancestors, without fragment."""
        if not self.id:
            return ''
        parent = self.parent
        base = parent.scope() if parent is not None else ''
        try:
            return urldefrag(urljoin(base, self.id))[0]
        except ValueError:
            return ''

    @property
    def resolution_state(self) -> ResolutionState:
        root = self.root()
        if root._resolution_state is None:
            with _STATE_LOCK:
                if root._resolution_state is None:
                    root._resolution_state = ResolutionState()
        return root._resolution_state

    # -- keyword access -----------------------------------------------------

    def is_prop_required(self, name: str) -> bool:
        return name in self.required

    def property_names(self) -> List[str]:
        return list(self.properties)

    def keywords(self) -> Dict[str, Any]:
        """The keywords set on this node, shaped like the JSON document.

        Sub-schemas are returned as ``Schema`` nodes; keywords that are not
        set are left out.
        """
        kw: Dict[str, Any] = {}
        if self.id:
            kw[self.id_keyword] = self.id
        if self.schema_ref:
            kw['$schema'] = self.schema_ref
        if self.reference:
            kw['$ref'] = self.reference
        if self.title:
            kw['title'] = self.title
        if self.description:
            kw['description'] = self.description
        if self.default is not ABSENT:
            kw['default'] = self.default
        if len(self.type) == 1:
            kw['type'] = self.type[0]
        elif self.type:
            kw['type'] = list(self.type)
        if self.enum is not None:
            kw['enum'] = self.enum
        if self.format:
            kw['format'] = self.format

        if self.pattern is not None:
            kw['pattern'] = self.pattern.pattern
        if self.min_length.initialized:
            kw['minLength'] = self.min_length.val
        if self.max_length.initialized:
            kw['maxLength'] = self.max_length.val

        if self.minimum.initialized:
            kw['minimum'] = self.minimum.val
        if self.exclusive_minimum.initialized:
            kw['exclusiveMinimum'] = self.exclusive_minimum.val
        if self.maximum.initialized:
            kw['maximum'] = self.maximum.val
        if self.exclusive_maximum.initialized:
            kw['exclusiveMaximum'] = self.exclusive_maximum.val
        if self.multiple_of.initialized:
            kw['multipleOf'] = self.multiple_of.val

        if self.tuple_items:
            kw['items'] = list(self.items)
        elif self.items:
            kw['items'] = self.items[0]
        if len(self.additional_items) == 1:
            kw['additionalItems'] = self.additional_items[0]
        elif self.additional_items:
            kw['additionalItems'] = list(self.additional_items)
        elif self.allow_additional_items.initialized:
            kw['additionalItems'] = self.allow_additional_items.val
        if self.min_items.initialized:
            kw['minItems'] = self.min_items.val
        if self.max_items.initialized:
            kw['maxItems'] = self.max_items.val
        if self.unique_items.initialized:
            kw['uniqueItems'] = self.unique_items.val

        if self.required:
            kw['required'] = list(self.required)
        if self.min_properties.initialized:
            kw['minProperties'] = self.min_properties.val
        if self.max_properties.initialized:
            kw['maxProperties'] = self.max_properties.val
        if self.properties:
            kw['properties'] = dict(self.properties)
        if self.pattern_properties:
            kw['patternProperties'] = {rx.pattern: s for rx, s in self.pattern_properties.items()}
        ap = self.additional_properties
        if ap.is_forbidden:
            kw['additionalProperties'] = False
        elif not ap.is_any:
            kw['additionalProperties'] = ap.schema

        if self.definitions:
            kw['definitions'] = dict(self.definitions)
        if self.all_of:
            kw['allOf'] = list(self.all_of)
        if self.any_of:
            kw['anyOf'] = list(self.any_of)
        if self.one_of:
            kw['oneOf'] = list(self.one_of)
        if self.not_schema is not None:
            kw['not'] = self.not_schema
        return kw

    def __getitem__(self, keyword: str) -> Any:
        # JSON pointer navigation steps through the graph with this
        return self.keywords()[keyword]

    def is_empty(self) -> bool:
        """True when no keyword is set, i.e. the schema accepts everything."""
        return not self.keywords()
