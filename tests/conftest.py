"""Pytest configuration and shared fixtures."""

import asyncio
import os
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Keep a developer's environment from changing the tool under test
os.environ.pop("COMPOSE_SESSION_COMPOSE_COMMAND", None)

from compose_session.config import SessionConfig, Settings


@pytest.fixture
def manifest(tmp_path) -> Path:
    """An empty compose manifest in a temp directory."""
    path = tmp_path / "docker-compose.yml"
    path.write_text("services: {}\n")
    return path


@pytest.fixture
def session_config(manifest) -> SessionConfig:
    return SessionConfig(manifest_path=str(manifest))


@pytest.fixture
def test_settings() -> Settings:
    """Settings that don't depend on the environment."""
    return Settings(
        _env_file=None,
        compose_command="docker-compose",
        stream_chunk_size=4096,
        terminate_grace_seconds=1.0,
    )


@pytest.fixture
def shell_settings() -> Settings:
    """Settings whose 'tool' is /bin/sh, for real streaming subprocesses."""
    return Settings(
        _env_file=None,
        compose_command="/bin/sh",
        stream_chunk_size=4096,
        terminate_grace_seconds=1.0,
    )


def make_process(returncode=0, stdout=b"", stderr=b"") -> MagicMock:
    """Mock asyncio subprocess that has already exited."""
    proc = MagicMock()
    proc.returncode = returncode
    proc.pid = 4242
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    proc.wait = AsyncMock(return_value=returncode)
    return proc


@pytest.fixture
def process_factory():
    return make_process


async def _poll(predicate, timeout: float = 5.0, interval: float = 0.02) -> bool:
    """Poll predicate until it is true or timeout elapses."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(interval)
    return predicate()


@pytest.fixture
def poll():
    return _poll
