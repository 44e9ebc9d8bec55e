"""Unary invoker tests with a fake channel."""

from __future__ import annotations

import threading
from typing import Any

import grpc
import pytest
from dynamic_grpc_invoker.generic_messages import GenericMessageFactory, UnknownFieldError
from dynamic_grpc_invoker.invocation import (
    CallContext,
    TransportError,
    UnsupportedStreamingMethodError,
    invoke_unary,
)
from dynamic_grpc_invoker.schema_resolution import SchemaGraph
from dynamic_grpc_invoker.service_lookup import MethodNotFoundError, ServiceNotFoundError


def _message_type(graph: SchemaGraph, name: str):
    return graph["helloworld/helloworld.proto"].descriptor.message_types_by_name[name]


def _reply_bytes(graph: SchemaGraph, text: str) -> bytes:
    reply = GenericMessageFactory().new_instance(_message_type(graph, "HelloReply"))
    reply.set("message", text)
    return reply.serialize()


class _FakeRpcError(grpc.RpcError):
    def __init__(self, code: grpc.StatusCode, details: str) -> None:
        super().__init__(details)
        self._code = code
        self._details = details

    def code(self) -> grpc.StatusCode:
        return self._code

    def details(self) -> str:
        return self._details


class _FakeFuture:
    def __init__(self, response: bytes | None) -> None:
        self._response = response
        self.cancelled = False

    def add_done_callback(self, callback: Any) -> None:
        if self._response is not None:
            callback(self)

    def cancel(self) -> bool:
        self.cancelled = True
        return True

    def result(self) -> bytes:
        assert self._response is not None
        return self._response


class _FakeMultiCallable:
    def __init__(self, channel: _FakeChannel) -> None:
        self._channel = channel

    def __call__(self, request: bytes, timeout: float | None = None, metadata: Any = None) -> bytes:
        self._channel.calls.append((request, timeout, metadata))
        if self._channel.error is not None:
            raise self._channel.error
        return self._channel.response

    def future(self, request: bytes, timeout: float | None = None, metadata: Any = None):
        self._channel.calls.append((request, timeout, metadata))
        self._channel.future = _FakeFuture(None if self._channel.hang else self._channel.response)
        return self._channel.future


class _FakeChannel:
    def __init__(self, response: bytes = b"", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.hang = False
        self.paths: list[str] = []
        self.calls: list[tuple[bytes, float | None, Any]] = []
        self.future: _FakeFuture | None = None

    def unary_unary(
        self, method: str, request_serializer: Any = None, response_deserializer: Any = None
    ) -> _FakeMultiCallable:
        assert request_serializer is None
        assert response_deserializer is None
        self.paths.append(method)
        return _FakeMultiCallable(self)


def test_invoke_unary_sends_encoded_request_to_wire_path(greeter_graph: SchemaGraph) -> None:
    channel = _FakeChannel(response=_reply_bytes(greeter_graph, "Hello, Ada"))
    context = CallContext(timeout_seconds=2.5, metadata=(("x-trace", "abc"),))

    response = invoke_unary(
        context, greeter_graph, channel, "helloworld.Greeter", "SayHello", '{"name": "Ada"}'
    )

    assert channel.paths == ["/helloworld.Greeter/SayHello"]
    request_bytes, timeout, metadata = channel.calls[0]
    request = GenericMessageFactory().new_instance(_message_type(greeter_graph, "HelloRequest"))
    request.merge_from_bytes(request_bytes)
    assert request.get("name") == "Ada"
    assert timeout == 2.5
    assert metadata == (("x-trace", "abc"),)
    assert response.full_name == "helloworld.HelloReply"
    assert response.get("message") == "Hello, Ada"


def test_empty_payload_sends_empty_request(greeter_graph: SchemaGraph) -> None:
    channel = _FakeChannel()

    response = invoke_unary(
        CallContext(), greeter_graph, channel, "helloworld.Greeter", "SayHello", ""
    )

    assert channel.calls == [(b"", None, None)]
    assert response.list_fields() == []


def test_streaming_methods_are_rejected_before_any_call(greeter_graph: SchemaGraph) -> None:
    channel = _FakeChannel()

    with pytest.raises(UnsupportedStreamingMethodError) as exc_info:
        invoke_unary(
            CallContext(), greeter_graph, channel, "helloworld.Greeter", "SayHelloStream", "{}"
        )

    assert "server streaming" in str(exc_info.value)
    assert channel.paths == []


def test_lookup_failures_propagate(greeter_graph: SchemaGraph) -> None:
    channel = _FakeChannel()

    with pytest.raises(ServiceNotFoundError):
        invoke_unary(CallContext(), greeter_graph, channel, "does.not.Exist", "SayHello", "{}")
    with pytest.raises(MethodNotFoundError):
        invoke_unary(CallContext(), greeter_graph, channel, "helloworld.Greeter", "Nope", "{}")
    assert channel.paths == []


def test_payload_errors_happen_before_the_call(greeter_graph: SchemaGraph) -> None:
    channel = _FakeChannel()

    with pytest.raises(UnknownFieldError) as exc_info:
        invoke_unary(
            CallContext(),
            greeter_graph,
            channel,
            "helloworld.Greeter",
            "SayHello",
            '{"bogus": 1}',
        )

    assert str(exc_info.value) == (
        "Message type 'helloworld.HelloRequest' has no field named 'bogus'"
    )
    assert channel.paths == []


@pytest.mark.parametrize(
    ("code", "reason"),
    [
        (grpc.StatusCode.DEADLINE_EXCEEDED, "deadline exceeded"),
        (grpc.StatusCode.CANCELLED, "cancelled"),
        (grpc.StatusCode.UNAVAILABLE, "unavailable"),
    ],
)
def test_rpc_failures_become_transport_errors(
    greeter_graph: SchemaGraph, code: grpc.StatusCode, reason: str
) -> None:
    channel = _FakeChannel(error=_FakeRpcError(code, "server said no"))

    with pytest.raises(TransportError) as exc_info:
        invoke_unary(CallContext(), greeter_graph, channel, "helloworld.Greeter", "SayHello", "")

    assert exc_info.value.reason == reason
    assert exc_info.value.status_code == code.name
    assert exc_info.value.details == "server said no"
    assert exc_info.value.target == "/helloworld.Greeter/SayHello"


def test_cancelled_context_skips_the_call(greeter_graph: SchemaGraph) -> None:
    cancel_event = threading.Event()
    cancel_event.set()
    channel = _FakeChannel()

    with pytest.raises(TransportError) as exc_info:
        invoke_unary(
            CallContext(cancel_event=cancel_event),
            greeter_graph,
            channel,
            "helloworld.Greeter",
            "SayHello",
            "",
        )

    assert exc_info.value.reason == "cancelled"
    assert channel.paths == []


def test_cancel_event_cancels_an_in_flight_call(greeter_graph: SchemaGraph) -> None:
    cancel_event = threading.Event()
    channel = _FakeChannel()
    channel.hang = True
    timer = threading.Timer(0.1, cancel_event.set)
    timer.start()

    try:
        with pytest.raises(TransportError) as exc_info:
            invoke_unary(
                CallContext(cancel_event=cancel_event),
                greeter_graph,
                channel,
                "helloworld.Greeter",
                "SayHello",
                "",
            )
    finally:
        timer.cancel()

    assert exc_info.value.reason == "cancelled"
    assert channel.future is not None and channel.future.cancelled


def test_cancellable_call_returns_response_when_not_cancelled(greeter_graph: SchemaGraph) -> None:
    channel = _FakeChannel(response=_reply_bytes(greeter_graph, "hi"))

    response = invoke_unary(
        CallContext(cancel_event=threading.Event()),
        greeter_graph,
        channel,
        "helloworld.Greeter",
        "SayHello",
        "",
    )

    assert response.get("message") == "hi"
