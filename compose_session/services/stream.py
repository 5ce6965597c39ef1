"""Log streaming from a running orchestration tool process.

LogSubscription owns a follow-mode subprocess and two reader tasks that
drain its stdout and stderr. Each chunk read is decoded, split on
newlines and handed to the subscriber one piece at a time. A chunk that
ends on a newline yields a trailing empty string, and a line spanning
two reads arrives as two pieces; subscribers match on substrings and
tolerate both.
"""

import asyncio
import codecs
import os
import signal
from typing import Callable, List, Optional, Sequence

import structlog

logger = structlog.get_logger(__name__)

LineCallback = Callable[[str], None]


class LineSplitter:
    """Decodes one byte stream incrementally and splits each chunk on newlines."""

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    def feed(self, chunk: bytes) -> List[str]:
        text = self._decoder.decode(chunk)
        if not text:
            # Only part of a multi-byte character so far
            return []
        return text.split("\n")

    def flush(self) -> List[str]:
        text = self._decoder.decode(b"", final=True)
        return text.split("\n") if text else []


class LogSubscription:
    """Handle for a running logs -f process.

    The subscription delivers lines until the process exits on its own
    or dispose() is called. It is also an async context manager that
    disposes on exit.
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        on_line: LineCallback,
        command: Sequence[str],
        chunk_size: int = 4096,
        terminate_grace_seconds: float = 5.0,
    ):
        self._process = process
        self._on_line: Optional[LineCallback] = on_line
        self._command = list(command)
        self._chunk_size = chunk_size
        self._grace = terminate_grace_seconds
        self._closed = False
        self._finished_callbacks: List[Callable[["LogSubscription"], None]] = []
        self._readers = [
            asyncio.create_task(self._pump(process.stdout, "stdout")),
            asyncio.create_task(self._pump(process.stderr, "stderr")),
        ]

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def command(self) -> List[str]:
        return list(self._command)

    @property
    def closed(self) -> bool:
        """True once dispose() has been called."""
        return self._closed

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    async def wait(self) -> int:
        """Wait until the process exits and both streams are drained.

        Never returns while the tool keeps following a live service.
        """
        await asyncio.wait(self._readers)
        returncode = await self._process.wait()
        self._finished()
        return returncode

    def add_finished_callback(self, callback: Callable[["LogSubscription"], None]) -> None:
        """Call callback once, after dispose() or after wait() sees the process exit."""
        self._finished_callbacks.append(callback)

    async def dispose(self) -> None:
        """Stop delivering lines and terminate the process. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._on_line = None

        if self._process.returncode is None:
            self._signal(signal.SIGTERM)
            try:
                await asyncio.wait_for(self._process.wait(), timeout=self._grace)
            except asyncio.TimeoutError:
                logger.warning(
                    "Log process ignored SIGTERM, killing",
                    pid=self._process.pid,
                    grace_seconds=self._grace,
                )
                self._signal(signal.SIGKILL)
                await self._process.wait()

        for reader in self._readers:
            reader.cancel()
        await asyncio.gather(*self._readers, return_exceptions=True)

        logger.debug(
            "Log subscription disposed",
            pid=self._process.pid,
            returncode=self._process.returncode,
        )
        self._finished()

    async def __aenter__(self) -> "LogSubscription":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.dispose()

    def _finished(self) -> None:
        callbacks, self._finished_callbacks = self._finished_callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception:
                logger.exception("Subscription finished callback failed", pid=self._process.pid)

    def _signal(self, sig: int) -> None:
        # The process leads its own session, so its group holds any children
        try:
            os.killpg(self._process.pid, sig)
        except (ProcessLookupError, PermissionError):
            try:
                self._process.send_signal(sig)
            except ProcessLookupError:
                pass

    async def _pump(self, stream: Optional[asyncio.StreamReader], name: str) -> None:
        if stream is None:
            return
        splitter = LineSplitter()
        while True:
            chunk = await stream.read(self._chunk_size)
            if not chunk:
                break
            self._deliver(splitter.feed(chunk), name)
        self._deliver(splitter.flush(), name)

    def _deliver(self, lines: List[str], stream_name: str) -> None:
        for line in lines:
            callback = self._on_line
            if callback is None:
                return
            try:
                callback(line)
            except Exception:
                # Keep draining: a stalled pipe would block the tool
                logger.exception(
                    "Log line callback failed",
                    stream=stream_name,
                    pid=self._process.pid,
                )
