"""Exception classes for compose-session."""

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ErrorType(str, Enum):
    """Error type enumeration."""

    TOOL_UNAVAILABLE = "tool_unavailable"
    TOOL_PROBE_FAILED = "tool_probe_failed"
    INVALID_SELECTOR = "invalid_selector"
    COMMAND_FAILED = "command_failed"


class ComposeSessionException(Exception):
    """Base exception for compose-session."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the error for structured logging."""
        return {
            "error": self.message,
            "error_type": self.error_type.value,
            **self.details,
        }


class ToolUnavailableError(ComposeSessionException):
    """The orchestration tool is not on PATH."""

    def __init__(
        self,
        tool: str,
        message: Optional[str] = None,
        error_type: ErrorType = ErrorType.TOOL_UNAVAILABLE,
    ):
        self.tool = tool
        super().__init__(
            message=message or f"{tool} not found on PATH",
            error_type=error_type,
            details={"tool": tool},
        )


class ToolProbeError(ToolUnavailableError):
    """The PATH lookup for the tool failed before it could answer."""

    def __init__(self, tool: str, cause: BaseException):
        super().__init__(
            tool,
            message=f"Failed to check for {tool} on PATH: {cause}",
            error_type=ErrorType.TOOL_PROBE_FAILED,
        )


class InvalidSelectorError(ComposeSessionException, ValueError):
    """A service selector had an unsupported shape."""

    def __init__(self, operation: str, selector: Any, reason: Optional[str] = None):
        self.operation = operation
        self.selector = selector
        message = f'Invalid input parameter to "{operation}": {selector!r}'
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            message=message,
            error_type=ErrorType.INVALID_SELECTOR,
            details={"operation": operation},
        )


class ExternalCommandFailedError(ComposeSessionException):
    """The orchestration tool exited with an error or could not be spawned."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int],
        stdout: str = "",
        stderr: str = "",
    ):
        self.command: List[str] = list(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        if returncode is None:
            message = f"Failed to run {' '.join(self.command)}: {stderr}"
        else:
            message = f"Command {' '.join(self.command)} exited with code {returncode}"
            if stderr.strip():
                message = f"{message}: {stderr.strip()}"
        super().__init__(
            message=message,
            error_type=ErrorType.COMMAND_FAILED,
            details={"returncode": returncode, "command": self.command},
        )
