"""Compose session façade.

A ComposeSession wraps one compose manifest. Each lifecycle operation is
a single invocation of the orchestration tool; logs keeps the tool
running and streams its output to a callback.
"""

import os
from typing import Any, List, Optional, Union

import structlog

from .config import Settings, settings as default_settings
from .config.session import OverridesLike, SessionConfig, merge_config
from .models.result import CommandResult
from .models.selector import describe, parse_log_target, parse_selector
from .services.availability import AvailabilityCheck
from .services.command import DOWN, KILL, UP, CommandComposer
from .services.runner import ProcessRunner
from .services.stream import LineCallback, LogSubscription

logger = structlog.get_logger(__name__)


class ComposeSession:
    """Runs orchestration tool commands against one manifest.

    The tool's presence on PATH is checked once, starting at
    construction when an event loop is running (otherwise on the first
    operation). Every operation awaits that outcome; a missing tool
    fails all of them with ToolUnavailableError for the session's
    lifetime.

    Operations are independent and may run concurrently.
    """

    def __init__(
        self,
        manifest_path: Union[str, os.PathLike],
        working_directory: Optional[Union[str, os.PathLike]] = None,
        force_recreate: bool = True,
        timestamps: bool = False,
        *,
        settings: Optional[Settings] = None,
    ):
        """Initialize the session.

        Args:
            manifest_path: Path to the compose manifest
            working_directory: Directory to run the tool in; defaults to
                the manifest's directory
            force_recreate: Recreate containers on up
            timestamps: Include timestamps in log output
            settings: Process settings; defaults to the global instance
        """
        config = SessionConfig(
            manifest_path=manifest_path,
            working_directory=working_directory,
            force_recreate=force_recreate,
            timestamps=timestamps,
        )
        self._init(config, settings)

    @classmethod
    def from_config(
        cls, config: SessionConfig, *, settings: Optional[Settings] = None
    ) -> "ComposeSession":
        """Create a session from an existing SessionConfig."""
        session = cls.__new__(cls)
        session._init(config, settings)
        return session

    def _init(self, config: SessionConfig, settings: Optional[Settings]) -> None:
        self._config = config
        self._settings = settings or default_settings
        self._composer = CommandComposer()
        self._runner = ProcessRunner(self._settings)
        self._availability = AvailabilityCheck(self._settings.tool_executable)
        self._subscriptions: List[LogSubscription] = []

        scheduled = self._availability.start()
        logger.info(
            "Compose session created",
            manifest=config.manifest_path,
            working_directory=config.working_directory,
            tool=self._settings.compose_command,
            probe_scheduled=scheduled,
        )

    @property
    def config(self) -> SessionConfig:
        """Construction-time configuration."""
        return self._config

    @property
    def availability(self) -> AvailabilityCheck:
        return self._availability

    @property
    def subscriptions(self) -> List[LogSubscription]:
        """Log subscriptions that are still live."""
        return list(self._subscriptions)

    async def up(self, services: Any = None, overrides: OverridesLike = None) -> CommandResult:
        """Performs an "up" on all services, one service or a list of services.

        Services start detached; containers are recreated unless
        force_recreate is off.
        """
        return await self._run_lifecycle(UP, services, overrides)

    async def down(self, services: Any = None, overrides: OverridesLike = None) -> CommandResult:
        """Performs a "down" on all services, one service or a list of services."""
        return await self._run_lifecycle(DOWN, services, overrides)

    async def kill(self, services: Any = None, overrides: OverridesLike = None) -> CommandResult:
        """Performs a "kill" on all services, one service or a list of services."""
        return await self._run_lifecycle(KILL, services, overrides)

    async def logs(
        self,
        service_name: str,
        on_line: LineCallback,
        overrides: OverridesLike = None,
    ) -> LogSubscription:
        """Follows the logs of one service, sending each line to on_line.

        Returns once the tool is running. Lines keep arriving until the
        returned subscription is disposed, the session is closed, or the
        tool exits. An unknown service is not detected here: the tool's
        error output arrives as log lines.

        Raises:
            InvalidSelectorError: service_name is not a single service name
            ToolUnavailableError: The tool is not on PATH
        """
        service = parse_log_target(service_name)
        if not callable(on_line):
            raise TypeError("on_line must be callable")
        config = merge_config(self._config, overrides)

        await self._availability.wait()

        args = self._composer.build_logs_args(service, config)
        subscription = await self._runner.stream(args, config.working_directory, on_line)
        self._subscriptions.append(subscription)
        subscription.add_finished_callback(self._forget)
        logger.info(
            "Following service logs",
            service=service.name,
            pid=subscription.pid,
            timestamps=config.timestamps,
        )
        return subscription

    def _forget(self, subscription: LogSubscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass

    async def close(self) -> None:
        """Dispose every log subscription opened by this session."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            await subscription.dispose()

    async def __aenter__(self) -> "ComposeSession":
        self._availability.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _run_lifecycle(
        self, operation: str, services: Any, overrides: OverridesLike
    ) -> CommandResult:
        # Validation happens before any await so bad input never reaches a spawn
        selector = parse_selector(operation, services)
        config = merge_config(self._config, overrides)

        await self._availability.wait()

        args = self._composer.build_args(operation, config, selector)
        logger.debug(
            "Dispatching compose operation",
            operation=operation,
            services=describe(selector),
        )
        return await self._runner.run(args, config.working_directory)
