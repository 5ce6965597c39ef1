"""Process execution for the orchestration tool.

Uses asyncio subprocesses: run() waits for the tool to exit and captures
its output, stream() keeps it running and feeds a LogSubscription.
"""

import asyncio
from typing import List, Optional

import structlog

from ..config import Settings, settings as default_settings
from ..models.errors import ExternalCommandFailedError
from ..models.result import CommandResult
from .stream import LineCallback, LogSubscription

logger = structlog.get_logger(__name__)


class ProcessRunner:
    """Spawns the orchestration tool with composed arguments."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize runner.

        Args:
            settings: Settings supplying the tool command and stream tuning
        """
        self._settings = settings or default_settings

    def command(self, args: List[str]) -> List[str]:
        """Full argv: tool tokens followed by the composed arguments."""
        return self._settings.tool_tokens() + list(args)

    async def run(self, args: List[str], cwd: str) -> CommandResult:
        """Run the tool to completion.

        Args:
            args: Composed arguments following the tool executable
            cwd: Working directory for the process

        Returns:
            CommandResult with the decoded stdout and stderr

        Raises:
            ExternalCommandFailedError: Nonzero exit or spawn failure
        """
        command = self.command(args)
        logger.info("Running compose command", command=command, cwd=cwd)

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            error = ExternalCommandFailedError(command, None, stderr=str(e))
            logger.error("Failed to spawn compose command", **error.to_dict())
            raise error from e

        try:
            stdout_bytes, stderr_bytes = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
                # Reap the child so no zombie outlives the cancelled call
                await asyncio.shield(proc.wait())
            raise

        stdout = self._decode(stdout_bytes)
        stderr = self._decode(stderr_bytes)

        if proc.returncode != 0:
            error = ExternalCommandFailedError(command, proc.returncode, stdout, stderr)
            logger.warning("Compose command failed", **error.to_dict())
            raise error

        logger.info("Compose command finished", command=command, returncode=proc.returncode)
        return CommandResult(
            stdout=stdout, stderr=stderr, returncode=proc.returncode, command=command
        )

    async def stream(self, args: List[str], cwd: str, on_line: LineCallback) -> LogSubscription:
        """Start the tool and deliver its output line by line.

        Returns as soon as the process is spawned; the returned
        subscription keeps delivering until disposed or the process exits.

        Raises:
            ExternalCommandFailedError: The process could not be spawned
        """
        command = self.command(args)
        logger.info("Streaming compose command", command=command, cwd=cwd)

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,  # New process group for clean cleanup
            )
        except OSError as e:
            error = ExternalCommandFailedError(command, None, stderr=str(e))
            logger.error("Failed to spawn compose command", **error.to_dict())
            raise error from e

        return LogSubscription(
            proc,
            on_line,
            command,
            chunk_size=self._settings.stream_chunk_size,
            terminate_grace_seconds=self._settings.terminate_grace_seconds,
        )

    @staticmethod
    def _decode(output: Optional[bytes]) -> str:
        if not output:
            return ""
        return output.decode("utf-8", errors="replace")
