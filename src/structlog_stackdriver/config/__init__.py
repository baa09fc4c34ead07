"""
Configuration Module.

Each concern has its own settings class and environment variable prefix:

    from structlog_stackdriver.config import settings

    settings.hook.project_id
    settings.hook.levels
    settings.logging.level
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .hook import ClientConfig, HookSettings
from .logging import LoggingSettings


class Settings(BaseSettings):
    """Composite settings aggregating the hook and local logging domains."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def hook(self) -> HookSettings:
        return HookSettings()

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "ClientConfig",
    "HookSettings",
    "LoggingSettings",
]
