"""JSON request payload decoding into generic messages."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping

from google.protobuf import json_format

from .generic_message import GenericMessage
from .payload_errors import (
    MalformedPayloadError,
    PayloadError,
    TypeMismatchError,
    UnknownAnyTypeError,
    UnknownFieldError,
)

_UNKNOWN_FIELD = re.compile(r'Message type "([^"]+)" has no field named "([^"]+)"')
_UNKNOWN_TYPE_URL = re.compile(r"type_url: (\S+)")
_ONEOF_CONFLICT = re.compile(r'should not have multiple "[^"]+" oneof fields')
_FIELD_PATH = re.compile(r'\bat "?([A-Za-z_][\w.\[\]-]*)')


def decode_request(payload: str, message: GenericMessage) -> GenericMessage:
    """Parse a JSON object and merge its fields into `message`.

    Uses the proto3 JSON mapping, so well-known types take their JSON forms. Unknown
    keys are rejected. A blank payload leaves the message empty.
    """
    if not payload.strip():
        return message
    try:
        document = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(f"Request payload is not valid JSON: {exc}") from exc
    if not isinstance(document, Mapping):
        raise MalformedPayloadError(
            f"Request payload for {message.full_name} must be a JSON object, "
            f"got {type(document).__name__}"
        )
    try:
        json_format.ParseDict(
            document,
            message.message,
            ignore_unknown_fields=False,
            descriptor_pool=message.factory.descriptor_pool,
        )
    except json_format.ParseError as exc:
        raise _payload_error(exc, message) from exc
    return message


def _payload_error(exc: json_format.ParseError, message: GenericMessage) -> PayloadError:
    text = str(exc)
    unknown_field = _UNKNOWN_FIELD.search(text)
    if unknown_field is not None:
        return UnknownFieldError(unknown_field.group(1), unknown_field.group(2))
    unknown_type = _UNKNOWN_TYPE_URL.search(text)
    if unknown_type is not None:
        return UnknownAnyTypeError(unknown_type.group(1).rstrip("."))
    if _ONEOF_CONFLICT.search(text):
        return MalformedPayloadError(text)
    paths = _FIELD_PATH.findall(text)
    field_path = paths[-1].rstrip(".") if paths else message.full_name
    return TypeMismatchError(field_path, text)
