"""
Application configuration models and helpers.

Centralizes settings management so both the monthly duplication job and the
one-time setup server share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class MisocaSettings(BaseSettings):
    """OAuth client credentials registered with Misoca."""

    client_id: str = Field(..., validation_alias="CLIENT_ID")
    client_secret: str = Field(..., validation_alias="CLIENT_SECRET")
    redirect_uri: str = Field(
        ...,
        validation_alias="REDIRECT_URI",
        description="Must match the redirect URI registered for the application.",
    )


class JobSettings(BaseSettings):
    """Inputs of the monthly duplication job."""

    refresh_token: Optional[str] = Field(
        None,
        validation_alias="REFRESH_TOKEN",
        description="Initial refresh token. Falls back to the token store when omitted.",
    )
    source_invoice_id: Optional[str] = Field(None, validation_alias="SOURCE_INVOICE_ID")

    @field_validator("refresh_token", "source_invoice_id", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: Optional[str]) -> Optional[str]:
        """Treat empty assignments such as ``REFRESH_TOKEN=`` as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class StorageSettings(BaseSettings):
    """Where the rotating refresh token is persisted."""

    gcs_bucket_name: Optional[str] = Field(None, validation_alias="GCS_BUCKET_NAME")
    token_object_name: str = Field("refresh-token.txt", validation_alias="GCS_TOKEN_OBJECT")
    env_file_path: Path = Field(
        Path(".env"),
        validation_alias="ENV_FILE_PATH",
        description="Local env file rewritten when the refresh token rotates.",
    )
    env_mount_path: Path = Field(
        Path("/app/.env"),
        validation_alias="ENV_MOUNT_PATH",
        description="Mounted env file whose presence disables GCS persistence.",
    )

    @field_validator("gcs_bucket_name", mode="before")
    @classmethod
    def _blank_bucket(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SetupServerSettings(BaseSettings):
    """Bind address for the authorization-code callback server."""

    host: str = Field("127.0.0.1", validation_alias="SETUP_SERVER_HOST")
    port: int = Field(3000, validation_alias="SETUP_SERVER_PORT")


class AppSettings(BaseSettings):
    """Root settings object shared by the job and the setup server."""

    environment: str = Field("development", validation_alias="NODE_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    misoca: MisocaSettings = Field(default_factory=MisocaSettings)
    job: JobSettings = Field(default_factory=JobSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    setup_server: SetupServerSettings = Field(default_factory=SetupServerSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_managed_batch(self) -> bool:
        """Cloud Run Jobs deployments run with ``NODE_ENV=production``."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "JobSettings",
    "MisocaSettings",
    "SetupServerSettings",
    "StorageSettings",
    "get_settings",
]
