"""Logging configuration."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class LoggingConfig(BaseSettings):
    """structlog output settings."""

    log_level: str = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")

    class Config:
        env_prefix = "COMPOSE_SESSION_"
        extra = "ignore"
