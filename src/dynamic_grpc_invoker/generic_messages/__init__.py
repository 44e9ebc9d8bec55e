"""Generic message exports."""

from .generic_message import GenericMessage
from .message_factory import GenericMessageFactory
from .message_rendering import message_to_dict, message_to_json
from .payload_errors import (
    MalformedPayloadError,
    PayloadError,
    TypeMismatchError,
    UnknownAnyTypeError,
    UnknownFieldError,
    WireFormatError,
)
from .request_decoder import decode_request

__all__ = [
    "GenericMessage",
    "GenericMessageFactory",
    "MalformedPayloadError",
    "PayloadError",
    "TypeMismatchError",
    "UnknownAnyTypeError",
    "UnknownFieldError",
    "WireFormatError",
    "decode_request",
    "message_to_dict",
    "message_to_json",
]
