"""Schema resolution exports."""

from .bundle_loader import (
    BundleLoadError,
    MalformedBundleError,
    load_schema_graph,
    parse_schema_bundle,
    read_schema_bundle,
)
from .extension_registry import ExtensionRegistry, build_extension_registry, type_url_for
from .graph_resolver import (
    CyclicDependencyError,
    InvalidSchemaError,
    SchemaError,
    SchemaGraphResolver,
    UnknownDependencyError,
    resolve_schema_graph,
)
from .schema_models import SchemaFileDefinition, SchemaGraph, SchemaUnit

__all__ = [
    "BundleLoadError",
    "CyclicDependencyError",
    "ExtensionRegistry",
    "InvalidSchemaError",
    "MalformedBundleError",
    "SchemaError",
    "SchemaFileDefinition",
    "SchemaGraph",
    "SchemaGraphResolver",
    "SchemaUnit",
    "UnknownDependencyError",
    "build_extension_registry",
    "load_schema_graph",
    "parse_schema_bundle",
    "read_schema_bundle",
    "resolve_schema_graph",
    "type_url_for",
]
