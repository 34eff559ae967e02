"""
Logging Configuration.

Settings are read from ``MULTILOG_*`` environment variables and ``.env``::

    MULTILOG_ENV=production        # default minimum level becomes INFO
    MULTILOG_LEVEL=warning         # explicit minimum level wins
    MULTILOG_SINKS=console,file    # console | file | remote
    MULTILOG_FILE_NAME=app.log
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .level import Level

Environment = Literal["development", "testing", "staging", "production"]

SINK_NAMES = ("console", "file", "remote")


class LoggingSettings(BaseSettings):
    """Logging infrastructure configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MULTILOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    env: Environment = Field(default="development", description="Current environment")
    level: Level | None = Field(default=None, description="Minimum level; derived from env when unset")
    enabled: bool = Field(default=True, description="Master switch for every log call")
    sinks: str = Field(default="console", description="Comma-separated sink names (console, file, remote)")
    file_name: str = Field(default="logs", description="File name for the file sink")
    log_dir: str | None = Field(default=None, description="Directory for the file sink (default: ~/Documents)")
    gcloud_project: str | None = Field(default=None, description="GCP project ID for the remote sink")
    gcloud_log_name: str = Field(default="multilog", description="Log name for the remote sink")
    console_color: bool | None = Field(default=None, description="Force ANSI colour on or off")
    console_timestamp_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="Console timestamp format")
    intercept_stdlib: bool = Field(default=False, description="Route stdlib logging records to the sinks")

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: object) -> Level | None:
        if value is None or value == "":
            return None
        return Level.parse(value)

    @field_validator("sinks")
    @classmethod
    def _check_sinks(cls, value: str) -> str:
        unknown = [name for name in _split(value) if name not in SINK_NAMES]
        if unknown:
            raise ValueError(f"Unknown sinks: {unknown}. Available: {list(SINK_NAMES)}")
        return value

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def minimum_level(self) -> Level:
        """Explicit level, else DEBUG outside production and INFO in it."""
        if self.level is not None:
            return self.level
        return Level.INFO if self.is_production else Level.DEBUG

    @property
    def sink_names(self) -> list[str]:
        return _split(self.sinks)


def _split(value: str) -> list[str]:
    return [name.strip().lower() for name in value.split(",") if name.strip()]
