"""Unary invocation use-case service."""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

import grpc

from dynamic_grpc_invoker.generic_messages import (
    GenericMessage,
    GenericMessageFactory,
    decode_request,
)
from dynamic_grpc_invoker.schema_resolution import SchemaGraph, build_extension_registry
from dynamic_grpc_invoker.service_lookup import MethodView, find_method, find_service

from .call_contracts import CallContext

_LOGGER = logging.getLogger(__name__)
_CANCEL_POLL_SECONDS = 0.05


class InvocationError(Exception):
    """Raised when a located method cannot be called."""


class UnsupportedStreamingMethodError(InvocationError):
    """Raised when the located method is not unary."""

    def __init__(self, method: MethodView) -> None:
        self.service_name = method.service_name
        self.method_name = method.name
        modes = [
            label
            for label, enabled in (
                ("client", method.client_streaming),
                ("server", method.server_streaming),
            )
            if enabled
        ]
        super().__init__(
            f"Method {method.service_name}/{method.name} is {'+'.join(modes)} streaming; "
            "only unary methods can be invoked"
        )


class TransportError(InvocationError):
    """Raised when the channel fails, the deadline expires or the call is cancelled."""

    def __init__(
        self,
        target: str,
        reason: str,
        *,
        status_code: str | None = None,
        details: str | None = None,
    ) -> None:
        self.target = target
        self.reason = reason
        self.status_code = status_code
        self.details = details
        message = f"Call to {target} failed: {reason}"
        if status_code:
            message += f" [{status_code}]"
        if details:
            message += f" {details}"
        super().__init__(message)


class UnaryChannel(Protocol):  # pylint: disable=too-few-public-methods
    """Subset of grpc.Channel used for one request/response exchange."""

    def unary_unary(
        self,
        method: str,
        request_serializer: Any = None,
        response_deserializer: Any = None,
    ) -> Any: ...


def invoke_unary(
    context: CallContext,
    graph: SchemaGraph,
    channel: UnaryChannel,
    service_name: str,
    method_name: str,
    payload: str,
    *,
    factory: GenericMessageFactory | None = None,
) -> GenericMessage:
    """Call one unary method described by the graph and return the decoded response."""
    method = find_method(find_service(graph, service_name), method_name)
    if method.is_streaming:
        raise UnsupportedStreamingMethodError(method)

    message_factory = factory or GenericMessageFactory(build_extension_registry(graph))
    request = message_factory.new_instance(method.input_type)
    response = message_factory.new_instance(method.output_type)
    decode_request(payload, request)

    response_bytes = _call_unary(context, channel, method.wire_path, request.serialize())
    response.merge_from_bytes(response_bytes)
    return response


def _call_unary(
    context: CallContext, channel: UnaryChannel, wire_path: str, request_bytes: bytes
) -> bytes:
    if context.cancelled:
        raise TransportError(wire_path, "cancelled")
    multicallable = channel.unary_unary(
        wire_path, request_serializer=None, response_deserializer=None
    )
    metadata = context.metadata or None
    _LOGGER.debug(
        "Calling %s (%d request bytes, timeout=%s)",
        wire_path,
        len(request_bytes),
        context.timeout_seconds,
    )
    try:
        if context.cancel_event is None:
            response_bytes = multicallable(
                request_bytes, timeout=context.timeout_seconds, metadata=metadata
            )
        else:
            response_bytes = _call_cancellable(
                multicallable, request_bytes, context, metadata, wire_path
            )
    except grpc.FutureCancelledError as exc:
        raise TransportError(wire_path, "cancelled") from exc
    except grpc.RpcError as exc:
        raise _transport_error(wire_path, exc) from exc
    _LOGGER.debug("Call %s returned %d response bytes", wire_path, len(response_bytes))
    return response_bytes


def _call_cancellable(
    multicallable: Any,
    request_bytes: bytes,
    context: CallContext,
    metadata: tuple[tuple[str, str], ...] | None,
    wire_path: str,
) -> bytes:
    call_future = multicallable.future(
        request_bytes, timeout=context.timeout_seconds, metadata=metadata
    )
    finished = threading.Event()
    call_future.add_done_callback(lambda _future: finished.set())
    while not finished.wait(_CANCEL_POLL_SECONDS):
        if context.cancelled:
            call_future.cancel()
            raise TransportError(wire_path, "cancelled")
    return call_future.result()


def _transport_error(wire_path: str, error: grpc.RpcError) -> TransportError:
    code = error.code() if callable(getattr(error, "code", None)) else None
    details = error.details() if callable(getattr(error, "details", None)) else None
    if code == grpc.StatusCode.DEADLINE_EXCEEDED:
        reason = "deadline exceeded"
    elif code == grpc.StatusCode.CANCELLED:
        reason = "cancelled"
    elif code is not None:
        reason = code.name.lower().replace("_", " ")
    else:
        reason = str(error) or "rpc failed"
    _LOGGER.debug("Call %s failed: %s", wire_path, reason)
    return TransportError(
        wire_path,
        reason,
        status_code=code.name if code is not None else None,
        details=details,
    )
