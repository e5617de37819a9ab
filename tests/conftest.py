"""Pytest configuration shared across the suite."""

from __future__ import annotations

from pathlib import Path

import pytest

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

from misoca_invoice.core.config import (
    AppSettings,
    JobSettings,
    MisocaSettings,
    StorageSettings,
)


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def make_settings(tmp_path: Path):
    """Build ``AppSettings`` isolated from the developer's environment."""

    def _factory(
        *,
        refresh_token: str | None = "stored-refresh-token",
        source_invoice_id: str | None = "1001",
        environment: str = "development",
        bucket: str | None = None,
        env_mount: bool = False,
    ) -> AppSettings:
        mount_path = tmp_path / "mounted.env"
        if env_mount:
            mount_path.write_text("CLIENT_ID=mounted\n", encoding="utf-8")
        return AppSettings(
            NODE_ENV=environment,
            APP_LOG_LEVEL="INFO",
            misoca=MisocaSettings(
                CLIENT_ID="client",
                CLIENT_SECRET="secret",
                REDIRECT_URI="http://localhost:3000/callback",
            ),
            job=JobSettings(REFRESH_TOKEN=refresh_token, SOURCE_INVOICE_ID=source_invoice_id),
            storage=StorageSettings(
                GCS_BUCKET_NAME=bucket,
                ENV_FILE_PATH=tmp_path / ".env",
                ENV_MOUNT_PATH=mount_path,
            ),
        )

    return _factory
