"""Configuration models for LifeForge CLI.

The whole configuration is one JSON document validated by pydantic; every
section has defaults so a missing or partial file still loads.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class TimerConfig(BaseModel):
    """Focus/break countdown lengths."""

    focus_minutes: int = Field(default=25, ge=1, le=999)
    break_minutes: int = Field(default=5, ge=1, le=999)
    bell_on_mode_end: bool = Field(default=True)


class ProxyConfig(BaseModel):
    """Where the timer looks for the next task."""

    endpoint: str = Field(default="http://localhost:5174")
    timeout: float = Field(default=10.0, gt=0)
    fetch_on_start: bool = Field(default=True)


class StorageConfig(BaseModel):
    """Local persistence settings."""

    data_dir: str | None = Field(
        default=None, description="Override for the session/stats directory"
    )
    max_sessions: int = Field(
        default=500, ge=1, le=500, description="Session log cap (at most 500)"
    )


class OutputConfig(BaseModel):
    """Output configuration."""

    color: bool = Field(default=True)
    refresh_per_second: int = Field(default=4, ge=1, le=30)


class AppConfig(BaseModel):
    """Main LifeForge configuration."""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    proxy: ProxyConfig = Field(default_factory=ProxyConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
