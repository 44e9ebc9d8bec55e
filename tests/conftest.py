"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from descriptor_builders import descriptor_set_bytes, greeter_files, inventory_files
from dynamic_grpc_invoker.generic_messages import GenericMessageFactory
from dynamic_grpc_invoker.schema_resolution import (
    ExtensionRegistry,
    SchemaGraph,
    build_extension_registry,
    resolve_schema_graph,
)


@pytest.fixture
def greeter_graph() -> SchemaGraph:
    return resolve_schema_graph(greeter_files())


@pytest.fixture
def inventory_graph() -> SchemaGraph:
    return resolve_schema_graph(inventory_files())


@pytest.fixture
def inventory_registry(inventory_graph: SchemaGraph) -> ExtensionRegistry:
    return build_extension_registry(inventory_graph)


@pytest.fixture
def inventory_factory(inventory_registry: ExtensionRegistry) -> GenericMessageFactory:
    return GenericMessageFactory(inventory_registry)


@pytest.fixture
def greeter_protoset(tmp_path: Path) -> Path:
    path = tmp_path / "helloworld.protoset"
    path.write_bytes(descriptor_set_bytes(greeter_files()))
    return path
