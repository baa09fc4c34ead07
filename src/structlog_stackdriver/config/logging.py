"""
Logging Configuration.
"""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..types import LogLevel


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class LoggingSettings(BaseSettings):
    """Local log rendering configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STACKDRIVER_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: LogLevel = Field(default=LogLevel.INFO, description="Minimum level rendered locally")
    format: LogFormat = Field(default=LogFormat.CONSOLE, description="Local output format")

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> LogLevel:
        level = LogLevel.parse(value)
        if level is None:
            raise ValueError(f"Unknown log level: {value!r}")
        return level
