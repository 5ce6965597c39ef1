"""Configuration management for compose-session.

Process-wide settings come from the environment (prefix
``COMPOSE_SESSION_``) and an optional ``.env`` file. Per-session
configuration lives in :mod:`compose_session.config.session`.

Usage:
    from compose_session.config import settings

    settings.compose_command
    settings.tool_tokens()
    settings.logging.log_level
"""

import shlex
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import LoggingConfig
from .session import (
    ConfigOverrides,
    OverridesLike,
    SessionConfig,
    coerce_overrides,
    merge_config,
)


class Settings(BaseSettings):
    """Process-wide settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="COMPOSE_SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # External tool
    compose_command: str = Field(
        default="docker-compose",
        description="Command used to invoke the orchestration tool, e.g. 'docker compose'",
    )

    # Streaming
    stream_chunk_size: int = Field(default=4096, ge=1, le=1024 * 1024)
    terminate_grace_seconds: float = Field(default=5.0, ge=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")

    @field_validator("compose_command")
    @classmethod
    def _non_empty_command(cls, value: str) -> str:
        if not shlex.split(value):
            raise ValueError("compose_command must not be empty")
        return value

    def tool_tokens(self) -> List[str]:
        """Executable plus leading arguments of the orchestration tool."""
        return shlex.split(self.compose_command)

    @property
    def tool_executable(self) -> str:
        """The executable looked up on PATH by the availability probe."""
        return self.tool_tokens()[0]

    @property
    def logging(self) -> LoggingConfig:
        """Access logging configuration group."""
        return LoggingConfig(log_level=self.log_level, log_format=self.log_format)


# Global settings instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "LoggingConfig",
    "SessionConfig",
    "ConfigOverrides",
    "OverridesLike",
    "coerce_overrides",
    "merge_config",
]
