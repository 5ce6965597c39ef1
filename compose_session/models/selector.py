"""Service selectors.

A selector names the services an operation targets. It is one of three
cases; each renders its own trailing command-line arguments so callers
never inspect the raw value again after parse_selector.
"""

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Union

from .errors import InvalidSelectorError


@dataclass(frozen=True)
class AllServices:
    """Every service declared in the manifest."""

    def as_args(self) -> List[str]:
        return []


@dataclass(frozen=True)
class SingleService:
    """One named service."""

    name: str

    def as_args(self) -> List[str]:
        return [self.name]


@dataclass(frozen=True)
class ServiceList:
    """An ordered collection of service names."""

    names: Tuple[str, ...]

    def as_args(self) -> List[str]:
        return list(self.names)


ServiceSelector = Union[AllServices, SingleService, ServiceList]

ALL_SERVICES = AllServices()


def _check_name(operation: str, raw: Any, name: Any) -> str:
    if not isinstance(name, str):
        raise InvalidSelectorError(
            operation, raw, f"service names must be strings, got {type(name).__name__}"
        )
    if not name or any(ch.isspace() for ch in name):
        raise InvalidSelectorError(
            operation, raw, "service names must be non-empty and contain no whitespace"
        )
    return name


def parse_selector(operation: str, services: Any = None) -> ServiceSelector:
    """Convert a caller-supplied selector into one of the three cases.

    Accepts None (or an empty string/sequence) for all services, a string
    for one service, or a list/tuple of strings. Anything else raises
    InvalidSelectorError.
    """
    if isinstance(services, (AllServices, SingleService, ServiceList)):
        return services
    if services is None or services == "":
        return ALL_SERVICES
    if isinstance(services, str):
        return SingleService(_check_name(operation, services, services))
    if isinstance(services, (list, tuple)):
        if not services:
            return ALL_SERVICES
        return ServiceList(tuple(_check_name(operation, services, n) for n in services))
    raise InvalidSelectorError(
        operation,
        services,
        f"expected None, a service name or a list of names, got {type(services).__name__}",
    )


def parse_log_target(service_name: Any) -> SingleService:
    """Validate the single service a logs call follows."""
    if not isinstance(service_name, str):
        raise InvalidSelectorError(
            "logs", service_name, "logs follows exactly one service name"
        )
    return SingleService(_check_name("logs", service_name, service_name))


def describe(selector: ServiceSelector) -> Union[str, Sequence[str]]:
    """Short form of a selector for log context."""
    if isinstance(selector, AllServices):
        return "all"
    return selector.as_args()
