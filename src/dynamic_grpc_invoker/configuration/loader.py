"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import Configuration, ConnectionSettings, SchemaSettings

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 5.0


class ConfigurationError(Exception):
    """Raised when the configuration file or option values are invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    schema = _parse_schema_section(parsed.get("schema"), path.parent)
    connection = _parse_connection_section(parsed.get("connection"))
    return Configuration(path=path, schema=schema, connection=connection)


def build_connection_settings(
    target: Any,
    *,
    timeout_seconds: Any = DEFAULT_TIMEOUT_SECONDS,
    connect_timeout_seconds: Any = DEFAULT_CONNECT_TIMEOUT_SECONDS,
    metadata: Any = None,
    max_message_bytes: Any = None,
) -> ConnectionSettings:
    """Validate connection values that did not come from a configuration file."""
    return ConnectionSettings(
        target=_require_non_empty_string(target, "connection.target"),
        timeout_seconds=_require_positive_number(timeout_seconds, "connection.timeout_seconds"),
        connect_timeout_seconds=_require_positive_number(
            connect_timeout_seconds, "connection.connect_timeout_seconds"
        ),
        metadata=_normalize_metadata(metadata),
        max_message_bytes=(
            None
            if max_message_bytes is None
            else _require_positive_int(max_message_bytes, "connection.max_message_bytes")
        ),
    )


def parse_metadata_pairs(pairs: tuple[str, ...] | list[str]) -> tuple[tuple[str, str], ...]:
    """Turn `key=value` strings into validated metadata pairs."""
    entries: dict[str, str] = {}
    for pair in pairs:
        key, separator, value = pair.partition("=")
        if not separator:
            raise ConfigurationError(f"Metadata entry {pair!r} must look like key=value.")
        entries[key.strip()] = value.strip()
    return _normalize_metadata(entries)


def _parse_schema_section(value: Any, base_path: Path) -> SchemaSettings:
    section = _require_mapping(value, "schema")
    protoset = _require_non_empty_string(section.get("protoset"), "schema.protoset")
    protoset_path = _resolve_path(base_path, protoset)
    if not protoset_path.exists():
        raise ConfigurationError(f"Protoset file not found: {protoset_path}")
    return SchemaSettings(protoset_path=protoset_path)


def _parse_connection_section(value: Any) -> ConnectionSettings:
    section = _require_mapping(value, "connection")
    return build_connection_settings(
        section.get("target"),
        timeout_seconds=section.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
        connect_timeout_seconds=section.get(
            "connect_timeout_seconds", DEFAULT_CONNECT_TIMEOUT_SECONDS
        ),
        metadata=section.get("metadata"),
        max_message_bytes=section.get("max_message_bytes"),
    )


def _normalize_metadata(value: Any) -> tuple[tuple[str, str], ...]:
    if value is None:
        return ()
    if not isinstance(value, Mapping):
        raise ConfigurationError("connection.metadata must be a mapping.")
    normalized = []
    for key, item in value.items():
        if not isinstance(key, str) or not key.strip():
            raise ConfigurationError("connection.metadata keys must be non-empty strings.")
        if key != key.lower():
            raise ConfigurationError(f"connection.metadata key {key!r} must be lowercase.")
        if not isinstance(item, (str, int, float)) or isinstance(item, bool):
            raise ConfigurationError(f"connection.metadata value for {key!r} must be a string.")
        normalized.append((key.strip(), str(item)))
    return tuple(normalized)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_positive_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{field_name} must be a number.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return float(value)


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
