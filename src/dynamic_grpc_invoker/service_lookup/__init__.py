"""Service lookup exports."""

from .service_locator import (
    MethodNotFoundError,
    ServiceLookupError,
    ServiceNotFoundError,
    find_method,
    find_service,
    list_services,
)
from .service_models import MethodView, ServiceView

__all__ = [
    "MethodNotFoundError",
    "MethodView",
    "ServiceLookupError",
    "ServiceNotFoundError",
    "ServiceView",
    "find_method",
    "find_service",
    "list_services",
]
