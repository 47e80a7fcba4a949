import os
import sys
import threading
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsvalidate.errors import (CircularReferenceError, InvalidReferenceError, ResolutionError,
                               SchemaNotFoundError)
from jsvalidate.resolver import dereference, reference_key, resolve_id, resolve_reference, resolve_url
from jsvalidate.schema import Schema
from jsvalidate.schemareader import extract

LOCAL = {
    "definitions": {
        "name": {"type": "string", "minLength": 1},
        "alias": {"$ref": "#/definitions/name"},
        "a b": {"type": "integer"},
        "a/b": {"type": "number"},
        "bad": {"$ref": "#/default"}
    },
    "properties": {
        "n": {"$ref": "#/definitions/name"},
        "m": {"$ref": "#/definitions/alias"}
    },
    "patternProperties": {
        "^x-": {"$ref": "#/definitions/name"}
    },
    "default": {"x": 1}
}

MULTI = {
    "id": "http://example.com/root.json",
    "definitions": {
        "item": {
            "id": "item.json",
            "definitions": {"name": {"type": "string"}},
            "properties": {"self": {"$ref": "#/definitions/name"}}
        }
    },
    "properties": {
        "x": {"$ref": "item.json#/definitions/name"},
        "y": {"$ref": "http://example.com/item.json#/definitions/name"},
        "z": {"$ref": "#/definitions/item/definitions/name"}
    }
}


class TestResolveUrl(unittest.TestCase):
    """Test resolving reference strings against the base URI of a node."""

    def test_same_document_without_id(self):
        s = extract(LOCAL)
        self.assertEqual(resolve_url(s.properties["n"], "#/definitions/name").geturl(), "#/definitions/name")

    def test_against_absolute_base(self):
        s = extract(MULTI)
        x = s.properties["x"]
        self.assertEqual(resolve_url(x, "#/definitions/a").geturl(), "http://example.com/root.json#/definitions/a")
        self.assertEqual(resolve_url(x, "other.json#/a").geturl(), "http://example.com/other.json#/a")
        self.assertEqual(resolve_url(x, "http://other.org/s.json").geturl(), "http://other.org/s.json")

    def test_nested_id_changes_base(self):
        s = extract(MULTI)
        inner = s.definitions["item"].properties["self"]
        self.assertEqual(reference_key(inner), "item.json#/definitions/name")

    def test_malformed_reference(self):
        s = extract(LOCAL)
        with self.assertRaises(InvalidReferenceError):
            resolve_url(s, "http://[::1")


class TestResolveReference(unittest.TestCase):
    """Test navigating references to their targets."""

    def test_local_pointer(self):
        s = extract(LOCAL)
        target = resolve_reference(s.properties["n"], "#/definitions/name")
        self.assertIs(target, s.definitions["name"])

    def test_root_pointer(self):
        s = extract(LOCAL)
        self.assertIs(resolve_reference(s.definitions["name"], "#"), s)

    def test_escaped_pointer_tokens(self):
        s = extract(LOCAL)
        self.assertIs(resolve_reference(s, "#/definitions/a%20b"), s.definitions["a b"])
        self.assertIs(resolve_reference(s, "#/definitions/a~1b"), s.definitions["a/b"])

    def test_non_schema_targets(self):
        """Pointers may lead to any value of the document."""
        s = extract(LOCAL)
        self.assertEqual(resolve_reference(s, "#/default"), {"x": 1})
        self.assertEqual(resolve_reference(s, "#/default/x"), 1)
        self.assertEqual(resolve_reference(s, "#/definitions/name/minLength"), 1)
        self.assertEqual(resolve_reference(s, "#/definitions/name/type"), "string")

    def test_reference_into_subdocument(self):
        """A URI naming a nested id is resolved inside that node."""
        s = extract(MULTI)
        name = s.definitions["item"].definitions["name"]
        self.assertIs(dereference(s.properties["x"]), name)
        self.assertIs(dereference(s.properties["y"]), name)
        self.assertIs(dereference(s.properties["z"]), name)
        self.assertIs(dereference(s.definitions["item"].properties["self"]), name)

    def test_reference_in_pattern_properties(self):
        s = extract(LOCAL)
        node = next(iter(s.pattern_properties.values()))
        self.assertIs(dereference(node), s.definitions["name"])

    def test_missing_pointer_target(self):
        s = extract(LOCAL)
        with self.assertRaises(InvalidReferenceError):
            resolve_reference(s, "#/definitions/missing")
        with self.assertRaises(InvalidReferenceError):
            resolve_reference(s, "#definitions")

    def test_unknown_document(self):
        s = extract(LOCAL)
        with self.assertRaises(SchemaNotFoundError) as cm:
            resolve_reference(s, "http://other.example.com/x.json#/a")
        self.assertEqual(cm.exception.schema_id, "http://other.example.com/x.json")

    def test_resolve_id(self):
        s = extract(MULTI)
        self.assertIs(resolve_id(s, "http://example.com/root.json"), s)
        self.assertIs(resolve_id(s, "item.json"), s.definitions["item"])
        self.assertIs(resolve_id(s, "http://example.com/item.json"), s.definitions["item"])
        with self.assertRaises(SchemaNotFoundError):
            resolve_id(s, "http://nowhere.example.com/x.json")

    def test_errors_are_resolution_errors(self):
        self.assertTrue(issubclass(SchemaNotFoundError, ResolutionError))
        self.assertTrue(issubclass(InvalidReferenceError, ResolutionError))
        self.assertTrue(issubclass(CircularReferenceError, ResolutionError))


class TestResolutionCache(unittest.TestCase):
    """Test that each reference target is looked up once per tree."""

    def test_cached_on_second_lookup(self):
        s = extract(LOCAL)
        state = s.resolution_state
        first = resolve_reference(s.properties["n"], "#/definitions/name")
        self.assertEqual(state.pointer_lookups, 1)
        self.assertEqual(state.id_searches, 1)
        self.assertEqual(state.cache_hits, 0)

        second = resolve_reference(s.properties["n"], "#/definitions/name")
        self.assertIs(first, second)
        self.assertEqual(state.pointer_lookups, 1)
        self.assertEqual(state.cache_hits, 1)

    def test_id_index_reused(self):
        s = extract(LOCAL)
        state = s.resolution_state
        resolve_reference(s, "#/definitions/name")
        resolve_reference(s, "#/definitions/alias")
        self.assertEqual(state.pointer_lookups, 2)
        self.assertEqual(state.id_searches, 1)

    def test_same_reference_from_different_nodes(self):
        """The cache key is the absolute URI, not the node holding the reference."""
        s = extract(LOCAL)
        state = s.resolution_state
        dereference(s.properties["n"])
        dereference(next(iter(s.pattern_properties.values())))
        self.assertEqual(state.pointer_lookups, 1)
        self.assertEqual(state.cache_hits, 1)

    def test_clear(self):
        s = extract(LOCAL)
        state = s.resolution_state
        resolve_reference(s, "#/definitions/name")
        state.clear()
        self.assertEqual(state.cached_reference, {})
        self.assertEqual(state.schema_by_id, {})
        resolve_reference(s, "#/definitions/name")
        self.assertEqual(state.id_searches, 2)

    def test_concurrent_resolution(self):
        """Concurrent lookups of the same targets share one cache."""
        s = extract(LOCAL)
        refs = ["#/definitions/name", "#/definitions/alias", "#/definitions/a%20b", "#/default"]
        results = []
        errors = []

        def worker():
            try:
                for _ in range(50):
                    results.append(tuple(id(resolve_reference(s, ref)) for ref in refs))
            except Exception as e:  # pylint: disable=broad-except
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(set(results)), 1)
        self.assertEqual(s.resolution_state.pointer_lookups, len(refs))
        self.assertEqual(s.resolution_state.cache_hits, 8 * 50 * len(refs) - len(refs))


class TestDereference(unittest.TestCase):
    """Test following chains of pointer nodes."""

    def test_plain_node(self):
        s = extract(LOCAL)
        self.assertIs(dereference(s.definitions["name"]), s.definitions["name"])

    def test_chain(self):
        s = extract(LOCAL)
        self.assertIs(dereference(s.properties["m"]), s.definitions["name"])

    def test_target_not_a_schema(self):
        s = extract(LOCAL)
        with self.assertRaises(InvalidReferenceError) as cm:
            dereference(s.definitions["bad"])
        self.assertEqual(cm.exception.reason, "resolved target is not a schema")

    def test_circular_chain(self):
        s = extract({
            "definitions": {
                "a": {"$ref": "#/definitions/b"},
                "b": {"$ref": "#/definitions/a"}
            }
        })
        with self.assertRaises(CircularReferenceError) as cm:
            dereference(s.definitions["a"])
        self.assertEqual(cm.exception.chain, ["#/definitions/b", "#/definitions/a", "#/definitions/b"])

    def test_self_reference(self):
        s = extract({"definitions": {"a": {"$ref": "#/definitions/a"}}})
        with self.assertRaises(CircularReferenceError):
            dereference(s.definitions["a"])

    def test_tree_built_in_code(self):
        root = Schema()
        target = Schema()
        target.type = ["string"]
        pointer = Schema()
        pointer.reference = "#/definitions/target"
        root.definitions["target"] = target
        root.properties["p"] = pointer
        root.apply_parent_schema()
        self.assertIs(dereference(root.properties["p"]), root.definitions["target"])


if __name__ == '__main__':
    unittest.main()
