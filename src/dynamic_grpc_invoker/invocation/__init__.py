"""Invocation domain exports."""

from .call_contracts import CallContext
from .channel_factory import open_channel
from .invoker import (
    InvocationError,
    TransportError,
    UnaryChannel,
    UnsupportedStreamingMethodError,
    invoke_unary,
)

__all__ = [
    "CallContext",
    "InvocationError",
    "TransportError",
    "UnaryChannel",
    "UnsupportedStreamingMethodError",
    "invoke_unary",
    "open_channel",
]
