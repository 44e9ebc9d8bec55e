"""Render generic messages as JSON-compatible values."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

from google.protobuf import json_format

from .payload_errors import UnknownAnyTypeError

if TYPE_CHECKING:
    from .generic_message import GenericMessage

_TYPE_URL_PATTERN = re.compile(r"type_url: (\S+)")


def message_to_dict(message: GenericMessage, *, use_json_names: bool = False) -> dict[str, Any]:
    """Return the proto3 JSON mapping of the fields that are set.

    Keys are the declared field names unless `use_json_names` is set. Any values are
    expanded through the descriptor pool of the message's factory.
    """
    try:
        return json_format.MessageToDict(
            message.message,
            preserving_proto_field_name=not use_json_names,
            descriptor_pool=message.factory.descriptor_pool,
        )
    except (TypeError, json_format.SerializeToJsonError) as exc:
        match = _TYPE_URL_PATTERN.search(str(exc))
        if match is None:
            raise
        raise UnknownAnyTypeError(match.group(1).rstrip(".")) from exc


def message_to_json(
    message: GenericMessage, *, indent: int | None = 2, use_json_names: bool = False
) -> str:
    return json.dumps(
        message_to_dict(message, use_json_names=use_json_names),
        indent=indent,
        ensure_ascii=False,
    )
