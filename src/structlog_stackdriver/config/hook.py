"""
Stackdriver Hook Configuration.

Settings for the Cloud Logging client and the hook that feeds it.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientConfig(BaseModel):
    """Options for constructing the Cloud Logging client.

    ``credentials`` wins over ``credentials_file``; with neither set the
    client falls back to Application Default Credentials.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    credentials_file: Optional[str] = None
    credentials: Optional[Any] = None


class HookSettings(BaseSettings):
    """
    Hook settings.
    Prefix: STACKDRIVER_

    List and mapping values are read from the environment as JSON, e.g.
    ``STACKDRIVER_LABELS='{"service": "api"}'``.
    """

    model_config = SettingsConfigDict(
        env_prefix="STACKDRIVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    project_id: Optional[str] = Field(default=None, description="GCP project ID (None: inferred from credentials)")
    log_name: str = Field(default="app", description="Default log name when an entry does not set log_name")
    levels: List[str] = Field(
        default_factory=lambda: ["alert", "critical", "error", "warning", "info"],
        description="Levels that trigger a write",
    )
    labels: Dict[str, str] = Field(default_factory=dict, description="Labels attached to every entry")
    async_mode: bool = Field(default=False, description="Write from a worker thread without blocking the caller")
    ignore_fields: List[str] = Field(default_factory=list, description="Fields dropped from every entry")
    max_workers: int = Field(default=4, ge=1, description="Worker threads used in async mode")
    credentials_file: Optional[str] = Field(default=None, description="Service account JSON key file")

    def to_client_config(self) -> ClientConfig:
        return ClientConfig(credentials_file=self.credentials_file)
