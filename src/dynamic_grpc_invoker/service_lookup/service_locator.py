"""Service and method lookup over a resolved schema graph."""

from __future__ import annotations

import logging

from dynamic_grpc_invoker.schema_resolution.schema_models import SchemaGraph, SchemaUnit

from .service_models import MethodView, ServiceView

_LOGGER = logging.getLogger(__name__)


class ServiceLookupError(Exception):
    """Raised when a service or method is not declared by the schema graph."""


class ServiceNotFoundError(ServiceLookupError):
    """Raised when no unit declares the requested service."""

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        super().__init__(f"Service {service_name!r} not found")


class MethodNotFoundError(ServiceLookupError):
    """Raised when a service does not declare the requested method."""

    def __init__(self, service_name: str, method_name: str) -> None:
        self.service_name = service_name
        self.method_name = method_name
        super().__init__(
            f"Service {service_name!r} does not include a method named {method_name!r}"
        )


def find_service(graph: SchemaGraph, full_name: str) -> ServiceView:
    """Return the first service whose fully-qualified name matches exactly."""
    for unit in graph.values():
        view = _service_in_unit(unit, full_name)
        if view is not None:
            _LOGGER.debug("Found service %s in %s", full_name, unit.name)
            return view
    raise ServiceNotFoundError(full_name)


def find_method(service: ServiceView, name: str) -> MethodView:
    """Return the named method of a service."""
    for method_definition in service.definition.method:
        if method_definition.name != name:
            continue
        method = service.descriptor.methods_by_name[name]
        return MethodView(
            service_name=service.full_name,
            name=name,
            input_type=method.input_type,
            output_type=method.output_type,
            client_streaming=method_definition.client_streaming,
            server_streaming=method_definition.server_streaming,
        )
    raise MethodNotFoundError(service.full_name, name)


def list_services(graph: SchemaGraph) -> list[ServiceView]:
    """Return every declared service in graph order."""
    services = []
    for unit in graph.values():
        for service_descriptor in unit.descriptor.services_by_name.values():
            view = _service_in_unit(unit, service_descriptor.full_name)
            if view is not None:
                services.append(view)
    return services


def _service_in_unit(unit: SchemaUnit, full_name: str) -> ServiceView | None:
    for definition in unit.definition.service:
        descriptor = unit.descriptor.services_by_name.get(definition.name)
        if descriptor is not None and descriptor.full_name == full_name:
            return ServiceView(
                full_name=full_name,
                descriptor=descriptor,
                definition=definition,
                unit=unit,
            )
    return None
