"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "invoker.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Invocation configuration for dynamic-grpc-invoker.
# Replace every <REQUIRED> placeholder before running list-services or invoke.
# Remove <OPTIONAL> entries you do not need; defaults are noted beside them.

schema:
  # FileDescriptorSet produced by: protoc --include_imports --descriptor_set_out=...
  # Relative paths are resolved against this file's directory.
  protoset: "<REQUIRED>"

connection:
  # host:port of the gRPC server; channels are plaintext.
  target: "<REQUIRED>"
  # Deadline for each call in seconds (default 5).
  timeout_seconds: 5
  # How long to wait for the channel to become ready in seconds (default 5).
  connect_timeout_seconds: 5
  # max_message_bytes: 4194304
  # Metadata keys must be lowercase.
  # metadata:
  #   x-request-source: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
