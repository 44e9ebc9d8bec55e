"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SchemaSettings:
    """Location of the protoset bundle."""

    protoset_path: Path


@dataclass(frozen=True)
class ConnectionSettings:
    """Channel target and per-call settings."""

    target: str
    timeout_seconds: float
    connect_timeout_seconds: float
    metadata: tuple[tuple[str, str], ...]
    max_message_bytes: int | None


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    schema: SchemaSettings
    connection: ConnectionSettings
