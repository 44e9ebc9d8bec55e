"""Schema graph resolution service."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from google.protobuf import descriptor_pool

from .schema_models import SchemaFileDefinition, SchemaGraph, SchemaUnit

_LOGGER = logging.getLogger(__name__)


class SchemaError(Exception):
    """Raised when a schema bundle cannot be loaded or linked."""


class UnknownDependencyError(SchemaError):
    """Raised when a file depends on a file missing from the bundle."""

    def __init__(self, file_name: str, required_by: str | None = None) -> None:
        self.file_name = file_name
        self.required_by = required_by
        message = f"No descriptor found for {file_name!r}"
        if required_by:
            message += f" (imported by {required_by!r})"
        super().__init__(message)


class CyclicDependencyError(SchemaError):
    """Raised when a file transitively depends on itself."""

    def __init__(self, cycle: tuple[str, ...]) -> None:
        self.cycle = cycle
        super().__init__(f"Cyclic schema dependency: {' -> '.join(cycle)}")


class InvalidSchemaError(SchemaError):
    """Raised when a file cannot be linked against its dependencies."""

    def __init__(self, file_name: str, reason: str) -> None:
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"Invalid schema file {file_name!r}: {reason}")


class SchemaGraphResolver:
    """Link an unordered collection of file definitions into a schema graph.

    Every resolver owns its descriptor pool and memo table, so a resolver is meant
    for a single bundle. Files are linked dependencies-first; a file shared by
    several importers is linked once and the same unit is referenced by all of them.
    """

    def __init__(self) -> None:
        self._pool = descriptor_pool.DescriptorPool()
        self._definitions: dict[str, SchemaFileDefinition] = {}
        self._resolved: dict[str, SchemaUnit] = {}
        self._in_progress: list[str] = []

    def resolve(self, bundle: Iterable[SchemaFileDefinition]) -> SchemaGraph:
        """Resolve every file of the bundle and return the linked graph."""
        if self._definitions:
            raise RuntimeError("SchemaGraphResolver instances resolve a single bundle.")
        for definition in bundle:
            self._definitions[definition.name] = definition
        for name in self._definitions:
            self._resolve_one(name, required_by=None)
        _LOGGER.debug("Resolved %d schema files", len(self._resolved))
        return SchemaGraph(self._resolved, self._pool)

    def _resolve_one(self, name: str, *, required_by: str | None) -> SchemaUnit:
        unit = self._resolved.get(name)
        if unit is not None:
            return unit
        if name in self._in_progress:
            start = self._in_progress.index(name)
            raise CyclicDependencyError((*self._in_progress[start:], name))
        definition = self._definitions.get(name)
        if definition is None:
            raise UnknownDependencyError(name, required_by)

        self._in_progress.append(name)
        try:
            dependencies = tuple(
                self._resolve_one(dependency, required_by=name)
                for dependency in definition.dependency
            )
        finally:
            self._in_progress.pop()

        unit = SchemaUnit(
            name=name,
            definition=definition,
            descriptor=self._link(definition),
            dependencies=dependencies,
        )
        self._resolved[name] = unit
        _LOGGER.debug("Linked schema file %s (%d dependencies)", name, len(dependencies))
        return unit

    def _link(self, definition: SchemaFileDefinition):
        try:
            return self._pool.AddSerializedFile(definition.SerializeToString())
        except (TypeError, KeyError, ValueError) as exc:
            raise InvalidSchemaError(definition.name, str(exc)) from exc


def resolve_schema_graph(bundle: Iterable[SchemaFileDefinition]) -> SchemaGraph:
    """Resolve a bundle with a fresh resolver."""
    return SchemaGraphResolver().resolve(bundle)
