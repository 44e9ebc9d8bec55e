"""Service lookup entities."""

from __future__ import annotations

from dataclasses import dataclass

from google.protobuf import descriptor_pb2
from google.protobuf.descriptor import Descriptor, ServiceDescriptor

from dynamic_grpc_invoker.schema_resolution.schema_models import SchemaUnit


@dataclass(frozen=True, eq=False)
class MethodView:
    """Read-only view of one declared RPC method."""

    service_name: str
    name: str
    input_type: Descriptor
    output_type: Descriptor
    client_streaming: bool
    server_streaming: bool

    @property
    def wire_path(self) -> str:
        return f"/{self.service_name}/{self.name}"

    @property
    def is_streaming(self) -> bool:
        return self.client_streaming or self.server_streaming


@dataclass(frozen=True, eq=False)
class ServiceView:
    """Read-only view of one declared service and the unit that declares it."""

    full_name: str
    descriptor: ServiceDescriptor
    definition: descriptor_pb2.ServiceDescriptorProto
    unit: SchemaUnit

    @property
    def method_names(self) -> tuple[str, ...]:
        return tuple(method.name for method in self.definition.method)
