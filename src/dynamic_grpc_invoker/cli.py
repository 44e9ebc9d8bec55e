"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from dynamic_grpc_invoker.configuration import (
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_TIMEOUT_SECONDS,
    Configuration,
    ConfigurationError,
    ConnectionSettings,
    build_connection_settings,
    load_configuration,
    parse_metadata_pairs,
    write_placeholder_configuration,
)
from dynamic_grpc_invoker.generic_messages import PayloadError, message_to_json
from dynamic_grpc_invoker.invocation import (
    CallContext,
    InvocationError,
    invoke_unary,
    open_channel,
)
from dynamic_grpc_invoker.schema_resolution import SchemaError, load_schema_graph
from dynamic_grpc_invoker.service_lookup import ServiceLookupError, find_method, list_services


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="dynamic-grpc-invoker")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug details to stderr.")
def cli(verbose: bool) -> None:
    """Invoke gRPC methods described by a protoset, without generated stubs."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="list-services")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON configuration file",
)
@click.option(
    "--protoset",
    "protoset_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to a FileDescriptorSet file (overrides schema.protoset)",
)
def list_services_command(config_path: str | None, protoset_path: str | None) -> None:
    """List every service method declared by the protoset."""
    try:
        configuration = load_configuration(config_path) if config_path else None
        graph = load_schema_graph(_resolve_protoset(protoset_path, configuration))
        for service in list_services(graph):
            for method_name in service.method_names:
                method = find_method(service, method_name)
                marker = " [streaming]" if method.is_streaming else ""
                click.echo(
                    f"{service.full_name}/{method.name} "
                    f"({method.input_type.full_name} -> {method.output_type.full_name}){marker}"
                )
    except (ConfigurationError, SchemaError, ServiceLookupError) as exc:
        raise CliError(str(exc)) from exc


@cli.command(name="invoke")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON configuration file",
)
@click.option(
    "--protoset",
    "protoset_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to a FileDescriptorSet file (overrides schema.protoset)",
)
@click.option("--target", required=False, help="host:port of the server (overrides connection.target)")
@click.option("--service", "service_name", required=True, help="Fully-qualified service name")
@click.option("--method", "method_name", required=True, help="Method name within the service")
@click.option("--data", required=False, help="JSON request payload")
@click.option(
    "--data-file",
    required=False,
    type=click.Path(path_type=str, allow_dash=True),
    help="File holding the JSON request payload, or - for stdin",
)
@click.option("--timeout", "timeout_seconds", required=False, type=float, help="Call deadline in seconds")
@click.option(
    "-H",
    "--header",
    "headers",
    multiple=True,
    help="Request metadata as key=value; may be repeated",
)
def invoke(  # pylint: disable=too-many-arguments
    config_path: str | None,
    protoset_path: str | None,
    target: str | None,
    service_name: str,
    method_name: str,
    data: str | None,
    data_file: str | None,
    timeout_seconds: float | None,
    headers: tuple[str, ...],
) -> None:
    """Call one unary method and print the response as JSON."""
    try:
        configuration = load_configuration(config_path) if config_path else None
        graph = load_schema_graph(_resolve_protoset(protoset_path, configuration))
        settings = _resolve_connection(configuration, target, timeout_seconds, headers)
        payload = _read_payload(data, data_file)
        with open_channel(settings) as channel:
            response = invoke_unary(
                CallContext(timeout_seconds=settings.timeout_seconds, metadata=settings.metadata),
                graph,
                channel,
                service_name,
                method_name,
                payload,
            )
        rendered = message_to_json(response)
    except (
        ConfigurationError,
        SchemaError,
        ServiceLookupError,
        PayloadError,
        InvocationError,
        OSError,
    ) as exc:
        raise CliError(str(exc)) from exc
    click.echo(rendered)


def _resolve_protoset(protoset_path: str | None, configuration: Configuration | None) -> Path:
    if protoset_path:
        return Path(protoset_path)
    if configuration is not None:
        return configuration.schema.protoset_path
    raise CliError("Provide --protoset or --config.")


def _resolve_connection(
    configuration: Configuration | None,
    target: str | None,
    timeout_seconds: float | None,
    headers: tuple[str, ...],
) -> ConnectionSettings:
    base = configuration.connection if configuration is not None else None
    if base is None and not target:
        raise CliError("Provide --target or --config.")
    metadata = dict(base.metadata) if base is not None else {}
    metadata.update(parse_metadata_pairs(headers))
    if base is None:
        return build_connection_settings(
            target,
            timeout_seconds=(
                timeout_seconds if timeout_seconds is not None else DEFAULT_TIMEOUT_SECONDS
            ),
            metadata=metadata,
        )
    return build_connection_settings(
        target or base.target,
        timeout_seconds=timeout_seconds if timeout_seconds is not None else base.timeout_seconds,
        connect_timeout_seconds=base.connect_timeout_seconds,
        metadata=metadata,
        max_message_bytes=base.max_message_bytes,
    )


def _read_payload(data: str | None, data_file: str | None) -> str:
    if data is not None and data_file is not None:
        raise CliError("Use either --data or --data-file, not both.")
    if data_file == "-":
        return click.get_text_stream("stdin").read()
    if data_file is not None:
        return Path(data_file).read_text(encoding="utf-8")
    return data or ""


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
