"""Verify that the duplication job's configuration is complete.

The tool loads ``AppSettings`` from the environment (optionally seeded from an
env file), checks the values the job requires, and reports which refresh-token
backend the job would select. It makes no network calls, so it is safe to run
from a deploy pipeline before the scheduled job is enabled.

Example usages::

    python -m scripts.check_env
    python -m scripts.check_env --env-file /app/.env
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError

from misoca_invoice.core.config import AppSettings, _load_env_file
from misoca_invoice.services import TokenBackend, backend_for_settings, create_token_store

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_RUNTIME_ERROR = 5


def _validate_settings(env_file: Path | None) -> AppSettings:
    """Ensure required settings can be loaded, optionally from ``env_file``."""
    if env_file is not None:
        _load_env_file(str(env_file))
    return AppSettings()  # type: ignore[call-arg]


def _missing_job_values(settings: AppSettings, backend: TokenBackend) -> list[str]:
    problems: list[str] = []
    if not settings.job.source_invoice_id:
        problems.append("SOURCE_INVOICE_ID is not set.")
    if not settings.job.refresh_token and backend is TokenBackend.ENV_FILE:
        stored = asyncio.run(create_token_store(settings, backend).load())
        if not stored:
            problems.append(
                f"REFRESH_TOKEN is neither set nor present in {settings.storage.env_file_path}."
            )
    return problems


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the monthly duplication job's settings."
    )
    parser.add_argument(
        "--env-file",
        default=None,
        type=Path,
        help="Env file to load before validating (default: environment and ./.env only).",
    )
    return parser


def _ensure_env_file(env_file: Path | None) -> None:
    if env_file is not None and not env_file.exists():
        raise FileNotFoundError(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool."
        )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    env_file: Path | None = args.env_file

    try:
        _ensure_env_file(env_file)
        settings = _validate_settings(env_file)
        backend = backend_for_settings(settings)
        problems = _missing_job_values(settings, backend)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Unexpected error during validation: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if problems:
        print("Job configuration incomplete:", file=sys.stderr)
        for problem in problems:
            print(f"  - {problem}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    print(f"Configuration OK. Refresh token backend: {backend.value}")
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
