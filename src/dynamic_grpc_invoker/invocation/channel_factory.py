"""Plaintext gRPC channel opening."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import grpc

from dynamic_grpc_invoker.configuration.runtime_settings import ConnectionSettings

from .invoker import TransportError

_LOGGER = logging.getLogger(__name__)


@contextmanager
def open_channel(settings: ConnectionSettings) -> Iterator[grpc.Channel]:
    """Open a channel, wait until it is ready and close it on exit."""
    options = []
    if settings.max_message_bytes is not None:
        options.extend(
            [
                ("grpc.max_receive_message_length", settings.max_message_bytes),
                ("grpc.max_send_message_length", settings.max_message_bytes),
            ]
        )
    channel = grpc.insecure_channel(settings.target, options=options)
    try:
        try:
            grpc.channel_ready_future(channel).result(timeout=settings.connect_timeout_seconds)
        except grpc.FutureTimeoutError as exc:
            raise TransportError(
                settings.target,
                f"channel not ready after {settings.connect_timeout_seconds:g}s",
            ) from exc
        _LOGGER.debug("Channel to %s is ready", settings.target)
        yield channel
    finally:
        channel.close()
