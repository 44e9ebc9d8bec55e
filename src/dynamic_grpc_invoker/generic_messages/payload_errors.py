"""Payload error taxonomy."""

from __future__ import annotations


class PayloadError(Exception):
    """Raised when message content does not fit its message type."""


class MalformedPayloadError(PayloadError):
    """Raised when a request payload is not a JSON object."""


class UnknownFieldError(PayloadError):
    """Raised when a field name or number is not declared by the message type."""

    def __init__(self, message_type: str, field_name: str) -> None:
        self.message_type = message_type
        self.field_name = field_name
        super().__init__(f"Message type {message_type!r} has no field named {field_name!r}")


class TypeMismatchError(PayloadError):
    """Raised when a value cannot be converted to the declared field type."""

    def __init__(self, field_path: str, detail: str) -> None:
        self.field_path = field_path
        self.detail = detail
        super().__init__(f"Invalid value for field {field_path!r}: {detail}")


class UnknownAnyTypeError(PayloadError):
    """Raised when the concrete type of an Any value cannot be resolved."""

    def __init__(self, type_url: str) -> None:
        self.type_url = type_url
        super().__init__(f"Unable to resolve Any type URL {type_url!r}")


class WireFormatError(PayloadError):
    """Raised when binary message bytes are corrupt or unsupported."""
