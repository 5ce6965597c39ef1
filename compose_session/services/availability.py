"""Availability check for the orchestration tool.

The PATH lookup runs once per session in the default executor. Its
outcome, the resolved path or an exception, is memoized as a single
asyncio task that every operation awaits.
"""

import asyncio
import shutil
from typing import Optional

import structlog

from ..models.errors import ToolProbeError, ToolUnavailableError
from ..utils import run_in_executor

logger = structlog.get_logger(__name__)


class AvailabilityCheck:
    """Write-once check that the orchestration tool is on PATH."""

    def __init__(self, executable: str):
        """Initialize the check.

        Args:
            executable: Name or path of the tool's executable
        """
        self._executable = executable
        self._task: Optional[asyncio.Task] = None

    @property
    def executable(self) -> str:
        return self._executable

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def ready(self) -> bool:
        """True once the probe has found the tool."""
        return (
            self._task is not None
            and self._task.done()
            and not self._task.cancelled()
            and self._task.exception() is None
        )

    def start(self) -> bool:
        """Schedule the probe on the running loop.

        Returns:
            True if the probe is scheduled (now or earlier), False when no
            event loop is running yet
        """
        if self._task is not None:
            return True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return False
        self._task = loop.create_task(self._probe())
        self._task.add_done_callback(self._log_outcome)
        return True

    async def wait(self) -> str:
        """Wait for the probe and return the tool's resolved path.

        Raises:
            ToolUnavailableError: The tool is not on PATH
            ToolProbeError: The lookup itself failed
        """
        self.start()
        # A cancelled caller must not cancel the shared probe
        return await asyncio.shield(self._task)

    async def _probe(self) -> str:
        try:
            path = await run_in_executor(shutil.which, self._executable)
        except Exception as e:
            raise ToolProbeError(self._executable, e) from e
        if path is None:
            raise ToolUnavailableError(self._executable)
        return path

    def _log_outcome(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Orchestration tool unavailable", **error.to_dict())
        else:
            logger.debug(
                "Orchestration tool found",
                tool=self._executable,
                path=task.result(),
            )
