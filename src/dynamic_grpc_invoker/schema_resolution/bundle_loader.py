"""Protoset bundle loading service."""

from __future__ import annotations

import functools
from pathlib import Path

from google.protobuf import descriptor_pb2
from google.protobuf.message import DecodeError

from .graph_resolver import SchemaError, resolve_schema_graph
from .schema_models import SchemaFileDefinition, SchemaGraph


class BundleLoadError(SchemaError):
    """Raised when the protoset file cannot be read."""


class MalformedBundleError(SchemaError):
    """Raised when protoset bytes are not a serialized FileDescriptorSet."""


def parse_schema_bundle(data: bytes, *, source: str = "<bytes>") -> tuple[SchemaFileDefinition, ...]:
    """Decode FileDescriptorSet bytes into file definitions."""
    descriptor_set = descriptor_pb2.FileDescriptorSet()
    try:
        descriptor_set.ParseFromString(data)
    except DecodeError as exc:
        raise MalformedBundleError(f"Could not parse contents of protoset file {source!r}: {exc}") from exc
    return tuple(descriptor_set.file)


def read_schema_bundle(path: Path | str) -> tuple[SchemaFileDefinition, ...]:
    """Read and decode a protoset file."""
    bundle_path = Path(path)
    try:
        data = bundle_path.read_bytes()
    except OSError as exc:
        raise BundleLoadError(f"Could not load protoset file {str(bundle_path)!r}: {exc}") from exc
    return parse_schema_bundle(data, source=str(bundle_path))


def load_schema_graph(path: Path | str) -> SchemaGraph:
    """Return the resolved graph for a protoset file, cached while the file is unchanged."""
    bundle_path = Path(path).resolve()
    try:
        stat = bundle_path.stat()
    except OSError as exc:
        raise BundleLoadError(f"Could not load protoset file {str(bundle_path)!r}: {exc}") from exc
    return _load_schema_graph_cached(str(bundle_path), stat.st_mtime_ns, stat.st_size)


@functools.lru_cache(maxsize=16)
def _load_schema_graph_cached(path: str, mtime_ns: int, size: int) -> SchemaGraph:
    del mtime_ns, size
    return resolve_schema_graph(read_schema_bundle(path))
