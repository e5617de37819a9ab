"""Tests for the configuration check script."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest

from scripts import check_env

JOB_ENV_KEYS = [
    "CLIENT_ID",
    "CLIENT_SECRET",
    "REDIRECT_URI",
    "REFRESH_TOKEN",
    "SOURCE_INVOICE_ID",
    "GCS_BUCKET_NAME",
    "NODE_ENV",
    "ENV_FILE_PATH",
    "ENV_MOUNT_PATH",
]


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Path]:
    # check_env loads env files straight into os.environ, so restore it wholesale.
    saved = dict(os.environ)
    for key in JOB_ENV_KEYS:
        os.environ.pop(key, None)
    os.environ["ENV_MOUNT_PATH"] = str(tmp_path / "not-mounted.env")
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    os.environ.clear()
    os.environ.update(saved)


def test_main_requires_existing_env_file(clean_env: Path) -> None:
    exit_code = check_env.main(["--env-file", str(clean_env / ".missing-env")])
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_complete_env_file_passes(
    clean_env: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = clean_env / "job.env"
    _write_env(
        env_file,
        CLIENT_ID="abc",
        CLIENT_SECRET="secret",
        REDIRECT_URI="http://localhost:3000/callback",
        REFRESH_TOKEN="refresh",
        SOURCE_INVOICE_ID="1001",
    )

    exit_code = check_env.main(["--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_OK
    assert "env_file" in capsys.readouterr().out


def test_managed_batch_without_token_selects_gcs(
    clean_env: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = clean_env / "job.env"
    _write_env(
        env_file,
        CLIENT_ID="abc",
        CLIENT_SECRET="secret",
        REDIRECT_URI="http://localhost:3000/callback",
        SOURCE_INVOICE_ID="1001",
        GCS_BUCKET_NAME="tokens",
        NODE_ENV="production",
    )

    exit_code = check_env.main(["--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_OK
    assert "gcs" in capsys.readouterr().out


def test_validation_failure_for_missing_credentials(clean_env: Path) -> None:
    env_file = clean_env / "job.env"
    _write_env(
        env_file,
        CLIENT_ID="abc",
        REDIRECT_URI="http://localhost:3000/callback",
        REFRESH_TOKEN="refresh",
        SOURCE_INVOICE_ID="1001",
    )

    exit_code = check_env.main(["--env-file", str(env_file)])
    assert exit_code == check_env.EXIT_VALIDATION_ERROR


def test_validation_failure_for_missing_job_values(
    clean_env: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = clean_env / "job.env"
    _write_env(
        env_file,
        CLIENT_ID="abc",
        CLIENT_SECRET="secret",
        REDIRECT_URI="http://localhost:3000/callback",
    )

    exit_code = check_env.main(["--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_VALIDATION_ERROR
    stderr = capsys.readouterr().err
    assert "SOURCE_INVOICE_ID" in stderr
    assert "REFRESH_TOKEN" in stderr
