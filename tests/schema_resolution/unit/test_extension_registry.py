"""Extension registry tests."""

from __future__ import annotations

from dynamic_grpc_invoker.schema_resolution import ExtensionRegistry, SchemaGraph, type_url_for


def test_registry_finds_extension_by_extended_type_and_number(
    inventory_registry: ExtensionRegistry,
) -> None:
    extension = inventory_registry.find_extension("inventory.Annotated", 100)

    assert extension is not None
    assert extension.full_name == "inventory.priority"
    assert inventory_registry.find_extension("inventory.Annotated", 101) is None
    assert inventory_registry.find_extension_by_name("inventory.priority") is extension


def test_registry_indexes_nested_message_types(inventory_registry: ExtensionRegistry) -> None:
    entry = inventory_registry.find_message_type("inventory.Item.StockEntry")

    assert entry is not None
    assert entry.GetOptions().map_entry


def test_resolve_type_url_uses_last_path_segment(inventory_registry: ExtensionRegistry) -> None:
    tag = inventory_registry.resolve_type_url("type.googleapis.com/inventory.Tag")
    custom_host = inventory_registry.resolve_type_url("example.com/types/inventory.Tag")

    assert tag is not None
    assert tag.full_name == "inventory.Tag"
    assert custom_host is tag
    assert inventory_registry.resolve_type_url("inventory.Tag") is None
    assert inventory_registry.resolve_type_url("type.googleapis.com/inventory.Missing") is None


def test_type_url_for_uses_default_prefix(inventory_graph: SchemaGraph) -> None:
    item = inventory_graph["inventory/service.proto"].descriptor.message_types_by_name["Item"]

    assert type_url_for(item) == "type.googleapis.com/inventory.Item"


def test_empty_registry_finds_nothing() -> None:
    registry = ExtensionRegistry()

    assert registry.find_extension("inventory.Annotated", 100) is None
    assert registry.resolve_type_url("type.googleapis.com/inventory.Tag") is None
