"""Schema resolution entities."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from google.protobuf import descriptor_pb2, descriptor_pool
from google.protobuf.descriptor import Descriptor, FileDescriptor

SchemaFileDefinition = descriptor_pb2.FileDescriptorProto


@dataclass(frozen=True, eq=False)
class SchemaUnit:
    """One linked schema file together with the units it depends on."""

    name: str
    definition: SchemaFileDefinition
    descriptor: FileDescriptor
    dependencies: tuple[SchemaUnit, ...]

    @property
    def package(self) -> str:
        return self.definition.package

    def iter_message_types(self) -> Iterator[Descriptor]:
        """Yield every message type declared in this file, nested types included."""
        pending = list(self.descriptor.message_types_by_name.values())
        while pending:
            message_type = pending.pop(0)
            yield message_type
            pending.extend(message_type.nested_types)


class SchemaGraph(Mapping[str, SchemaUnit]):
    """Read-only mapping of file name to linked unit, in resolution order."""

    def __init__(
        self,
        units: Mapping[str, SchemaUnit],
        pool: descriptor_pool.DescriptorPool | None = None,
    ) -> None:
        self._units = dict(units)
        self._pool = pool

    @property
    def pool(self) -> descriptor_pool.DescriptorPool | None:
        """Descriptor pool every unit was linked into."""
        return self._pool

    def __getitem__(self, name: str) -> SchemaUnit:
        return self._units[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def units(self) -> tuple[SchemaUnit, ...]:
        return tuple(self._units.values())

    def __repr__(self) -> str:
        return f"SchemaGraph({list(self._units)!r})"
