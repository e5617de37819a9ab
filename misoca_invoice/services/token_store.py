"""
Refresh-token persistence backends and the startup policy that picks one.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Protocol

from misoca_invoice.clients import EnvFileTokenStore, GCSTokenStore
from misoca_invoice.core.config import AppSettings
from misoca_invoice.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    """Read and write the single authoritative refresh token."""

    async def load(self) -> Optional[str]:
        ...

    async def save(self, token: str) -> None:
        ...


class TokenBackend(str, Enum):
    GCS = "gcs"
    ENV_FILE = "env_file"


def select_token_backend(
    *,
    is_managed_batch: bool,
    has_env_mount: bool,
    has_bucket: bool,
    has_preset_token: bool,
) -> TokenBackend:
    """GCS only for a managed batch run with a bucket, no mounted env file and no preset token."""
    if is_managed_batch and not has_env_mount and has_bucket and not has_preset_token:
        return TokenBackend.GCS
    return TokenBackend.ENV_FILE


def backend_for_settings(settings: AppSettings) -> TokenBackend:
    return select_token_backend(
        is_managed_batch=settings.is_managed_batch,
        has_env_mount=settings.storage.env_mount_path.exists(),
        has_bucket=bool(settings.storage.gcs_bucket_name),
        has_preset_token=bool(settings.job.refresh_token),
    )


def create_token_store(settings: AppSettings, backend: Optional[TokenBackend] = None) -> TokenStore:
    """Build the store for ``backend``, evaluating the environment when omitted."""
    backend = backend or backend_for_settings(settings)
    if backend is TokenBackend.GCS:
        if not settings.storage.gcs_bucket_name:
            raise ConfigurationError("GCS_BUCKET_NAME is required for GCS token persistence.")
        logger.info("Refresh token persistence: GCS bucket %s", settings.storage.gcs_bucket_name)
        return GCSTokenStore(
            settings.storage.gcs_bucket_name,
            settings.storage.token_object_name,
        )
    logger.info("Refresh token persistence: %s", settings.storage.env_file_path)
    return EnvFileTokenStore(settings.storage.env_file_path)


async def resolve_refresh_token(configured: Optional[str], store: TokenStore) -> Optional[str]:
    """Prefer the configured token; otherwise ask the store."""
    if configured:
        return configured
    token = await store.load()
    if token:
        logger.info("Using REFRESH_TOKEN from the token store")
    return token


__all__ = [
    "TokenBackend",
    "TokenStore",
    "backend_for_settings",
    "create_token_store",
    "resolve_refresh_token",
    "select_token_backend",
]
