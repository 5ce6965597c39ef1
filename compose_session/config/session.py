"""Per-session configuration and the per-call override merge.

SessionConfig is fixed when a session is constructed. ConfigOverrides
carries the optional fields a single call may replace; merge_config is
the only place the two are combined.
"""

import os
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SessionConfig(BaseModel):
    """Immutable configuration for one compose session."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    manifest_path: str = Field(..., min_length=1, description="Path to the compose manifest")
    working_directory: Optional[str] = Field(
        default=None,
        description="Directory the tool runs in; defaults to the manifest's directory",
    )
    force_recreate: bool = Field(default=True, description="Pass --force-recreate on up")
    timestamps: bool = Field(default=False, description="Pass -t on logs")

    @field_validator("manifest_path", "working_directory", mode="before")
    @classmethod
    def _fspath(cls, value: Any) -> Any:
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        return value

    @field_validator("manifest_path")
    @classmethod
    def _absolute_manifest(cls, value: str) -> str:
        # The tool runs in working_directory, so a relative -f would move with it
        return os.path.abspath(value)

    @model_validator(mode="before")
    @classmethod
    def _default_working_directory(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("manifest_path") and not data.get("working_directory"):
            manifest = os.path.abspath(data["manifest_path"])
            data = {**data, "working_directory": os.path.dirname(manifest)}
        return data


class ConfigOverrides(BaseModel):
    """Fields a single call may override. Unset fields keep the session value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    manifest_path: Optional[str] = None
    working_directory: Optional[str] = None
    force_recreate: Optional[bool] = None
    timestamps: Optional[bool] = None

    @field_validator("manifest_path", "working_directory", mode="before")
    @classmethod
    def _fspath(cls, value: Any) -> Any:
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        return value


OverridesLike = Union[ConfigOverrides, Mapping[str, Any], None]


def coerce_overrides(overrides: OverridesLike) -> ConfigOverrides:
    """Normalize caller-supplied overrides into a ConfigOverrides."""
    if overrides is None:
        return ConfigOverrides()
    if isinstance(overrides, ConfigOverrides):
        return overrides
    if isinstance(overrides, Mapping):
        return ConfigOverrides.model_validate(dict(overrides))
    raise TypeError(
        f"overrides must be ConfigOverrides or a mapping, got {type(overrides).__name__}"
    )


def merge_config(base: SessionConfig, overrides: OverridesLike = None) -> SessionConfig:
    """Shallow-merge overrides over a session config.

    Only fields explicitly set on the overrides replace base values, and
    derived defaults are not recomputed: overriding manifest_path alone
    keeps the base working_directory.
    """
    patch = coerce_overrides(overrides).model_dump(exclude_none=True)
    if not patch:
        return base
    merged = base.model_dump()
    merged.update(patch)
    return SessionConfig.model_validate(merged)
