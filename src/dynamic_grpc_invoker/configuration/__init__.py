"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    ConfigurationError,
    build_connection_settings,
    load_configuration,
    parse_metadata_pairs,
)
from .runtime_settings import Configuration, ConnectionSettings, SchemaSettings

__all__ = [
    "Configuration",
    "ConnectionSettings",
    "SchemaSettings",
    "ConfigurationError",
    "load_configuration",
    "build_connection_settings",
    "parse_metadata_pairs",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
