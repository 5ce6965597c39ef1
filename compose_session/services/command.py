"""Command composition for the orchestration tool.

CommandComposer translates an operation, a service selector and the
effective session config into the tool's command-line arguments.
"""

from typing import List

import structlog

from ..config.session import SessionConfig
from ..models.selector import (
    ALL_SERVICES,
    ServiceSelector,
    SingleService,
    describe,
)

logger = structlog.get_logger(__name__)

UP = "up"
DOWN = "down"
KILL = "kill"
LOGS = "logs"


class CommandComposer:
    """Builds orchestration tool arguments from session configuration.

    The result excludes the tool's own executable tokens; the process
    runner prepends those.
    """

    def build_args(
        self,
        operation: str,
        config: SessionConfig,
        selector: ServiceSelector = ALL_SERVICES,
    ) -> List[str]:
        """Build the argument list for a lifecycle operation.

        Args:
            operation: One of "up", "down" or "kill"
            config: Effective (already merged) session config
            selector: Services the operation targets

        Returns:
            Arguments following the tool executable
        """
        if operation == UP:
            flags = ["--force-recreate"] if config.force_recreate else []
            flags.append("-d")
        elif operation in (DOWN, KILL):
            flags = []
        else:
            raise ValueError(f"Unsupported compose operation: {operation}")

        args = self._manifest_args(config) + [operation] + flags + selector.as_args()
        logger.debug(
            "Composed command",
            operation=operation,
            services=describe(selector),
            args=args,
        )
        return args

    def build_logs_args(self, service: SingleService, config: SessionConfig) -> List[str]:
        """Build the arguments that follow one service's logs.

        Logs always follow (-f) and target exactly one service.
        """
        flags = ["-f"]
        if config.timestamps:
            flags.append("-t")
        return self._manifest_args(config) + [LOGS] + flags + service.as_args()

    def _manifest_args(self, config: SessionConfig) -> List[str]:
        return ["-f", config.manifest_path]
