"""Invoke gRPC methods from a protoset at runtime, without generated stubs."""

from .generic_messages import GenericMessage, GenericMessageFactory, decode_request
from .invocation import CallContext, invoke_unary
from .schema_resolution import SchemaGraph, SchemaGraphResolver, load_schema_graph
from .service_lookup import find_method, find_service

__all__ = [
    "CallContext",
    "GenericMessage",
    "GenericMessageFactory",
    "SchemaGraph",
    "SchemaGraphResolver",
    "decode_request",
    "find_method",
    "find_service",
    "invoke_unary",
    "load_schema_graph",
]
