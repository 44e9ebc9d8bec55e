"""Extension and Any type registry."""

from __future__ import annotations

from collections.abc import Iterable

from google.protobuf import descriptor_pool
from google.protobuf.descriptor import Descriptor, FieldDescriptor

from .schema_models import SchemaGraph, SchemaUnit

TYPE_URL_PREFIX = "type.googleapis.com/"


class ExtensionRegistry:
    """Lookup tables for extension fields and Any type URLs.

    Built once from a resolved graph and handed explicitly to message factories.
    When two files declare the same full name the first one scanned is kept.
    """

    def __init__(self, pool: descriptor_pool.DescriptorPool | None = None) -> None:
        self._pool = pool
        self._message_types: dict[str, Descriptor] = {}
        self._extensions: dict[tuple[str, int], FieldDescriptor] = {}
        self._extensions_by_name: dict[str, FieldDescriptor] = {}

    @classmethod
    def from_graph(cls, graph: SchemaGraph) -> ExtensionRegistry:
        registry = cls(graph.pool)
        for unit in graph.values():
            registry.add_unit(unit)
        return registry

    @property
    def pool(self) -> descriptor_pool.DescriptorPool | None:
        """Pool used to resolve Any type URLs and extension names during JSON mapping."""
        return self._pool

    def add_unit(self, unit: SchemaUnit) -> None:
        """Register the message types and extensions declared by one unit."""
        self.add_extensions(unit.descriptor.extensions_by_name.values())
        for message_type in unit.iter_message_types():
            self._message_types.setdefault(message_type.full_name, message_type)
            self.add_extensions(message_type.extensions)

    def add_extensions(self, extensions: Iterable[FieldDescriptor]) -> None:
        for extension in extensions:
            key = (extension.containing_type.full_name, extension.number)
            self._extensions.setdefault(key, extension)
            self._extensions_by_name.setdefault(extension.full_name, extension)

    def find_extension(self, extended_type: str, number: int) -> FieldDescriptor | None:
        return self._extensions.get((extended_type, number))

    def find_extension_by_name(self, full_name: str) -> FieldDescriptor | None:
        return self._extensions_by_name.get(full_name)

    def find_message_type(self, full_name: str) -> Descriptor | None:
        return self._message_types.get(full_name)

    def resolve_type_url(self, type_url: str) -> Descriptor | None:
        """Return the message type named by the last path segment of a type URL."""
        if "/" not in type_url:
            return None
        return self._message_types.get(type_url.rsplit("/", 1)[-1])


def build_extension_registry(graph: SchemaGraph) -> ExtensionRegistry:
    return ExtensionRegistry.from_graph(graph)


def type_url_for(message_type: Descriptor) -> str:
    return f"{TYPE_URL_PREFIX}{message_type.full_name}"
