"""Descriptor-bound generic message value."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from google.protobuf import text_format
from google.protobuf.descriptor import Descriptor, FieldDescriptor
from google.protobuf.message import DecodeError, EncodeError, Message

from .field_kinds import FLOAT_TYPES, INTEGER_LIMITS, is_map, is_message, map_entry_fields
from .message_rendering import message_to_dict
from .payload_errors import TypeMismatchError, UnknownFieldError, WireFormatError

if TYPE_CHECKING:
    from .message_factory import GenericMessageFactory

FieldKey = str | int | FieldDescriptor


class GenericMessage:
    """A message instance described at runtime by a message descriptor.

    Wraps the runtime message protobuf builds for the descriptor. Fields are
    addressed by name, JSON name, number, `[extension.name]` or descriptor, and every
    read and write resolves the field against the descriptor first. Nested messages
    come back as GenericMessage views sharing storage with their parent, repeated
    fields as lists and map fields as dicts.
    """

    def __init__(self, message: Message, factory: GenericMessageFactory) -> None:
        self._message = message
        self._factory = factory
        self._json_names: dict[str, FieldDescriptor] | None = None

    @property
    def descriptor(self) -> Descriptor:
        return self._message.DESCRIPTOR

    @property
    def factory(self) -> GenericMessageFactory:
        return self._factory

    @property
    def full_name(self) -> str:
        return self.descriptor.full_name

    @property
    def message(self) -> Message:
        """The underlying runtime message."""
        return self._message

    def field(self, key: FieldKey) -> FieldDescriptor:
        """Resolve a field by name, JSON name, number, `[extension.name]` or descriptor."""
        descriptor = self.descriptor
        if isinstance(key, FieldDescriptor):
            if key.containing_type is None or key.containing_type.full_name != self.full_name:
                raise UnknownFieldError(self.full_name, key.full_name)
            return key
        if isinstance(key, bool):
            raise UnknownFieldError(self.full_name, str(key))
        if isinstance(key, int):
            found = descriptor.fields_by_number.get(key) or self._find_extension(number=key)
        elif key.startswith("[") and key.endswith("]"):
            found = self._find_extension(name=key[1:-1])
        else:
            found = descriptor.fields_by_name.get(key) or self._json_name_index().get(key)
        if found is None:
            raise UnknownFieldError(self.full_name, str(key))
        return found

    def has(self, key: FieldKey) -> bool:
        field = self.field(key)
        return any(_same_field(candidate, field) for candidate, _ in self._message.ListFields())

    def get(self, key: FieldKey) -> Any:
        """Return the stored value, or the declared default when the field is unset."""
        field = self.field(key)
        container = self._read(field)
        if is_map(field):
            _key_field, value_field = map_entry_fields(field)
            if is_message(value_field):
                return {entry_key: self._factory.wrap(entry) for entry_key, entry in container.items()}
            return dict(container)
        if field.is_repeated:
            if is_message(field):
                return [self._factory.wrap(item) for item in container]
            return list(container)
        if is_message(field):
            return self._factory.wrap(container) if self.has(field) else None
        return container

    def set(self, key: FieldKey, value: Any) -> None:
        field = self.field(key)
        normalized = normalize_field_value(field, value)
        if field.is_repeated:
            self.clear(field)
            if is_map(field):
                for entry_key, entry_value in normalized.items():
                    self._put_entry(field, entry_key, entry_value)
            else:
                for item in normalized:
                    self._append_item(field, item)
        elif is_message(field):
            target = self._read(field)
            target.SetInParent()
            target.CopyFrom(normalized.message)
        elif field.is_extension:
            self._message.Extensions[field] = normalized
        else:
            setattr(self._message, field.name, normalized)

    def clear(self, key: FieldKey) -> None:
        field = self.field(key)
        if field.is_extension:
            self._message.ClearExtension(field)
        else:
            self._message.ClearField(field.name)

    def append(self, key: FieldKey, value: Any) -> None:
        """Add one element to a repeated, non-map field."""
        field = self.field(key)
        if not field.is_repeated or is_map(field):
            raise TypeMismatchError(field.full_name, "append requires a repeated field")
        self._append_item(field, _normalize_single(field, value))

    def put(self, key: FieldKey, map_key: Any, value: Any) -> None:
        """Add or replace one entry of a map field."""
        field = self.field(key)
        if not is_map(field):
            raise TypeMismatchError(field.full_name, "put requires a map field")
        key_field, value_field = map_entry_fields(field)
        self._put_entry(
            field, _normalize_single(key_field, map_key), _normalize_single(value_field, value)
        )

    def mutable_message(self, key: FieldKey) -> GenericMessage:
        """Return the nested message of a singular message field, marking it present."""
        field = self.field(key)
        if not is_message(field) or field.is_repeated:
            raise TypeMismatchError(field.full_name, "expected a singular message field")
        target = self._read(field)
        target.SetInParent()
        return self._factory.wrap(target)

    def list_fields(self) -> list[tuple[FieldDescriptor, Any]]:
        """Return (field, value) pairs for every set field, ordered by number."""
        return [(field, self.get(field)) for field, _ in self._message.ListFields()]

    def serialize(self) -> bytes:
        try:
            return self._message.SerializeToString()
        except EncodeError as exc:
            raise WireFormatError(f"Cannot encode {self.full_name}: {exc}") from exc

    def merge_from_bytes(self, data: bytes) -> None:
        try:
            self._message.MergeFromString(data)
        except DecodeError as exc:
            raise WireFormatError(f"Cannot decode {self.full_name}: {exc}") from exc

    def to_dict(self, *, use_json_names: bool = False) -> dict[str, Any]:
        return message_to_dict(self, use_json_names=use_json_names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenericMessage):
            return NotImplemented
        return self.full_name == other.full_name and self._message == other._message

    def __repr__(self) -> str:
        fields = text_format.MessageToString(self._message, as_one_line=True)
        return f"GenericMessage<{self.full_name}>({fields})"

    def _read(self, field: FieldDescriptor) -> Any:
        if field.is_extension:
            return self._message.Extensions[field]
        return getattr(self._message, field.name)

    def _append_item(self, field: FieldDescriptor, item: Any) -> None:
        container = self._read(field)
        if is_message(field):
            container.add().CopyFrom(item.message)
        else:
            container.append(item)

    def _put_entry(self, field: FieldDescriptor, entry_key: Any, entry_value: Any) -> None:
        container = self._read(field)
        _key_field, value_field = map_entry_fields(field)
        if is_message(value_field):
            container[entry_key].CopyFrom(entry_value.message)
        else:
            container[entry_key] = entry_value

    def _json_name_index(self) -> dict[str, FieldDescriptor]:
        if self._json_names is None:
            self._json_names = {field.json_name: field for field in self.descriptor.fields}
        return self._json_names

    def _find_extension(
        self, *, number: int | None = None, name: str | None = None
    ) -> FieldDescriptor | None:
        for candidate, _ in self._message.ListFields():
            if candidate.is_extension and (candidate.number == number or candidate.full_name == name):
                return candidate
        registry = self._factory.registry
        if registry is None:
            return None
        if name is not None:
            extension = registry.find_extension_by_name(name)
            if extension is None or extension.containing_type.full_name != self.full_name:
                return None
            return extension
        return registry.find_extension(self.full_name, number)


def normalize_field_value(field: FieldDescriptor, value: Any) -> Any:
    """Validate a value against the field declaration and return its stored form."""
    if is_map(field):
        if not isinstance(value, Mapping):
            raise TypeMismatchError(field.full_name, f"expected a mapping, got {_type_name(value)}")
        key_field, value_field = map_entry_fields(field)
        return {
            _normalize_single(key_field, entry_key): _normalize_single(value_field, entry_value)
            for entry_key, entry_value in value.items()
        }
    if field.is_repeated:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise TypeMismatchError(field.full_name, f"expected a list, got {_type_name(value)}")
        return [_normalize_single(field, item) for item in value]
    return _normalize_single(field, value)


def _normalize_single(field: FieldDescriptor, value: Any) -> Any:
    field_type = field.type
    if is_message(field):
        if not isinstance(value, GenericMessage) or value.full_name != field.message_type.full_name:
            raise TypeMismatchError(
                field.full_name,
                f"expected message {field.message_type.full_name}, got {_type_name(value)}",
            )
        return value
    if field_type == FieldDescriptor.TYPE_BOOL:
        if not isinstance(value, bool):
            raise TypeMismatchError(field.full_name, f"expected bool, got {_type_name(value)}")
        return value
    if field_type == FieldDescriptor.TYPE_ENUM and isinstance(value, str):
        enum_value = field.enum_type.values_by_name.get(value)
        if enum_value is None:
            raise TypeMismatchError(
                field.full_name, f"{value!r} is not a value of enum {field.enum_type.full_name}"
            )
        return enum_value.number
    if field_type in INTEGER_LIMITS:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeMismatchError(field.full_name, f"expected integer, got {_type_name(value)}")
        lower, upper = INTEGER_LIMITS[field_type]
        if not lower <= value <= upper:
            raise TypeMismatchError(field.full_name, f"{value} is outside [{lower}, {upper}]")
        return value
    if field_type in FLOAT_TYPES:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeMismatchError(field.full_name, f"expected number, got {_type_name(value)}")
        return float(value)
    if field_type == FieldDescriptor.TYPE_STRING:
        if not isinstance(value, str):
            raise TypeMismatchError(field.full_name, f"expected string, got {_type_name(value)}")
        return value
    if field_type == FieldDescriptor.TYPE_BYTES:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeMismatchError(field.full_name, f"expected bytes, got {_type_name(value)}")
        return bytes(value)
    raise TypeMismatchError(field.full_name, f"unsupported field type {field_type}")


def _same_field(candidate: FieldDescriptor, field: FieldDescriptor) -> bool:
    return candidate.number == field.number and candidate.is_extension == field.is_extension


def _type_name(value: Any) -> str:
    if isinstance(value, GenericMessage):
        return f"message {value.full_name}"
    return type(value).__name__
