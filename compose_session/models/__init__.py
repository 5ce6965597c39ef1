"""Data models for compose-session."""

from .errors import (
    ComposeSessionException,
    ErrorType,
    ExternalCommandFailedError,
    InvalidSelectorError,
    ToolProbeError,
    ToolUnavailableError,
)
from .result import CommandResult
from .selector import (
    ALL_SERVICES,
    AllServices,
    ServiceList,
    ServiceSelector,
    SingleService,
    parse_log_target,
    parse_selector,
)

__all__ = [
    # Errors
    "ComposeSessionException",
    "ErrorType",
    "ExternalCommandFailedError",
    "InvalidSelectorError",
    "ToolProbeError",
    "ToolUnavailableError",
    # Results
    "CommandResult",
    # Selectors
    "ALL_SERVICES",
    "AllServices",
    "ServiceList",
    "ServiceSelector",
    "SingleService",
    "parse_log_target",
    "parse_selector",
]
