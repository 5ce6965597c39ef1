"""Unit tests for AvailabilityCheck."""

import asyncio
from unittest.mock import MagicMock, patch

import pytest
from structlog.testing import capture_logs

from compose_session.models import ToolProbeError, ToolUnavailableError
from compose_session.services.availability import AvailabilityCheck


class TestAvailabilityCheck:
    """Test the one-time PATH probe."""

    @pytest.mark.asyncio
    async def test_tool_found(self):
        """Test wait returns the resolved path."""
        with patch("shutil.which", return_value="/usr/bin/docker-compose") as which:
            check = AvailabilityCheck("docker-compose")
            assert await check.wait() == "/usr/bin/docker-compose"
            which.assert_called_once_with("docker-compose")
            assert check.ready is True

    @pytest.mark.asyncio
    async def test_tool_missing(self):
        """Test a missing tool raises ToolUnavailableError."""
        with patch("shutil.which", return_value=None):
            check = AvailabilityCheck("docker-compose")
            with pytest.raises(ToolUnavailableError) as exc_info:
                await check.wait()
            assert "docker-compose not found on PATH" in str(exc_info.value)
            assert not isinstance(exc_info.value, ToolProbeError)
            assert check.ready is False

    @pytest.mark.asyncio
    async def test_probe_failure_is_distinct(self):
        """Test a failing lookup raises ToolProbeError chaining the cause."""
        with patch("shutil.which", side_effect=PermissionError("denied")):
            check = AvailabilityCheck("docker-compose")
            with pytest.raises(ToolProbeError) as exc_info:
                await check.wait()
            assert isinstance(exc_info.value.__cause__, PermissionError)
            assert isinstance(exc_info.value, ToolUnavailableError)

    @pytest.mark.asyncio
    async def test_probe_runs_once(self):
        """Test repeated and concurrent waits share one probe."""
        which = MagicMock(return_value=None)
        with patch("shutil.which", which):
            check = AvailabilityCheck("docker-compose")
            results = await asyncio.gather(
                *(check.wait() for _ in range(5)), return_exceptions=True
            )
            for _ in range(3):
                with pytest.raises(ToolUnavailableError):
                    await check.wait()
        assert which.call_count == 1
        assert all(isinstance(r, ToolUnavailableError) for r in results)

    @pytest.mark.asyncio
    async def test_start_schedules_probe(self):
        """Test start inside a running loop schedules the probe immediately."""
        with patch("shutil.which", return_value="/bin/tool") as which:
            check = AvailabilityCheck("tool")
            assert check.start() is True
            assert check.started is True
            await check.wait()
            which.assert_called_once()

    def test_start_without_loop_is_deferred(self):
        """Test start outside an event loop defers the probe."""
        check = AvailabilityCheck("tool")
        assert check.start() is False
        assert check.started is False

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_probe(self):
        """Test cancelling one waiter leaves the shared probe running."""
        release = asyncio.Event()
        loop = asyncio.get_running_loop()

        def slow_which(name):
            asyncio.run_coroutine_threadsafe(release.wait(), loop).result()
            return "/bin/tool"

        with patch("shutil.which", side_effect=slow_which):
            check = AvailabilityCheck("tool")
            waiter = asyncio.ensure_future(check.wait())
            await asyncio.sleep(0.05)
            waiter.cancel()
            with pytest.raises(asyncio.CancelledError):
                await waiter
            release.set()
            assert await check.wait() == "/bin/tool"

    @pytest.mark.asyncio
    async def test_missing_tool_logged_with_error_fields(self):
        """Test the failure log carries the error's structured fields."""
        with capture_logs() as logs, patch("shutil.which", return_value=None):
            check = AvailabilityCheck("docker-compose")
            with pytest.raises(ToolUnavailableError):
                await check.wait()
            await asyncio.sleep(0)

        entry = next(e for e in logs if e["event"] == "Orchestration tool unavailable")
        assert entry["log_level"] == "error"
        assert entry["error_type"] == "tool_unavailable"
        assert entry["tool"] == "docker-compose"
        assert entry["error"] == "docker-compose not found on PATH"
