import importlib

mod = "jsvalidate"
class LazyLoader:
    """
    Lazy loader for the jsvalidate functions to keep the package import cheap.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, attr_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, attr_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the public names and their corresponding module paths
_mappings = {
    "Schema": (f"{mod}.schema", "Schema"),
    "extract": (f"{mod}.schemareader", "extract"),
    "loads_schema": (f"{mod}.schemareader", "loads_schema"),
    "read_schema": (f"{mod}.schemareader", "read_schema"),
    "read_schema_file": (f"{mod}.schemareader", "read_schema_file"),
    "to_json_tree": (f"{mod}.schemawriter", "to_json_tree"),
    "dumps_schema": (f"{mod}.schemawriter", "dumps_schema"),
    "resolve_url": (f"{mod}.resolver", "resolve_url"),
    "resolve_id": (f"{mod}.resolver", "resolve_id"),
    "resolve_reference": (f"{mod}.resolver", "resolve_reference"),
    "dereference": (f"{mod}.resolver", "dereference"),
    "SchemaValidator": (f"{mod}.validator", "SchemaValidator"),
    "validate": (f"{mod}.validator", "validate"),
    "validation_errors": (f"{mod}.validator", "validation_errors"),
    "PropertyAccessor": (f"{mod}.accessors", "PropertyAccessor"),
    "SchemaError": (f"{mod}.errors", "SchemaError"),
    "ValidationError": (f"{mod}.errors", "ValidationError"),
    "ResolutionError": (f"{mod}.errors", "ResolutionError"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
