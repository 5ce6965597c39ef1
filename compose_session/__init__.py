"""compose-session: an asyncio façade over docker-compose style CLIs.

Usage:
    from compose_session import ComposeSession

    session = ComposeSession("path/to/docker-compose.yml")
    await session.up("web")
    subscription = await session.logs("web", print)
    ...
    await subscription.dispose()
"""

from .config import ConfigOverrides, SessionConfig, Settings, merge_config, settings
from .models import (
    ALL_SERVICES,
    AllServices,
    CommandResult,
    ComposeSessionException,
    ErrorType,
    ExternalCommandFailedError,
    InvalidSelectorError,
    ServiceList,
    SingleService,
    ToolProbeError,
    ToolUnavailableError,
)
from .services import LogSubscription
from .session import ComposeSession

__version__ = "1.0.0"

__all__ = [
    "ComposeSession",
    "LogSubscription",
    "CommandResult",
    # Configuration
    "Settings",
    "settings",
    "SessionConfig",
    "ConfigOverrides",
    "merge_config",
    # Selectors
    "ALL_SERVICES",
    "AllServices",
    "SingleService",
    "ServiceList",
    # Errors
    "ComposeSessionException",
    "ErrorType",
    "ExternalCommandFailedError",
    "InvalidSelectorError",
    "ToolProbeError",
    "ToolUnavailableError",
]
