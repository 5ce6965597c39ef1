"""Integration fixtures for a live orchestration tool.

These tests start real containers from sample-compose.yml. They are
skipped unless the configured tool is on PATH. Configure via:
    INTEGRATION_COMPOSE_COMMAND: tool command (default: docker-compose)

Example:
    INTEGRATION_COMPOSE_COMMAND="docker compose" \
    pytest tests/integration/ -v -m integration
"""

import os
import shutil
from pathlib import Path

import pytest
import pytest_asyncio

from compose_session import ComposeSession, Settings

SAMPLE_MANIFEST = Path(__file__).parent / "sample-compose.yml"

COMPOSE_COMMAND = os.environ.get("INTEGRATION_COMPOSE_COMMAND", "docker-compose")


def pytest_collection_modifyitems(config, items):
    tool = Settings(_env_file=None, compose_command=COMPOSE_COMMAND).tool_executable
    if shutil.which(tool) is not None:
        return
    skip = pytest.mark.skip(reason=f"{tool} not found on PATH")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest_asyncio.fixture
async def compose():
    """Session over the sample manifest with timestamps on; tears services down after."""
    settings = Settings(_env_file=None, compose_command=COMPOSE_COMMAND)
    session = ComposeSession(str(SAMPLE_MANIFEST), timestamps=True, settings=settings)
    try:
        yield session
    finally:
        await session.close()
        await session.down()
