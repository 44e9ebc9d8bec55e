"""Generic message factory."""

from __future__ import annotations

from google.protobuf import descriptor_pool, message_factory
from google.protobuf.descriptor import Descriptor
from google.protobuf.message import Message

from dynamic_grpc_invoker.schema_resolution.extension_registry import ExtensionRegistry

from .generic_message import GenericMessage


class GenericMessageFactory:
    """Create empty generic messages, optionally bound to an extension registry.

    Instances are backed by the runtime message class protobuf builds for the
    descriptor. Messages remember the factory that created them, so nested messages
    share the same registry for extension and Any lookups.
    """

    def __init__(self, registry: ExtensionRegistry | None = None) -> None:
        self._registry = registry

    @property
    def registry(self) -> ExtensionRegistry | None:
        return self._registry

    @property
    def descriptor_pool(self) -> descriptor_pool.DescriptorPool | None:
        return self._registry.pool if self._registry is not None else None

    def new_instance(self, message_type: Descriptor) -> GenericMessage:
        return self.wrap(message_factory.GetMessageClass(message_type)())

    def wrap(self, message: Message) -> GenericMessage:
        """Bind an existing runtime message to this factory without copying it."""
        return GenericMessage(message, self)
