"""
Scheduled entrypoint for the monthly invoice duplication job.

Run once per month by an external scheduler (Cloud Scheduler + Cloud Run Jobs,
or cron)::

    python -m jobs.monthly_duplication [--dry-run]

Exit codes:
    0 - Success
    1 - Unexpected error
    2 - Configuration error (missing REFRESH_TOKEN, SOURCE_INVOICE_ID, ...)
    3 - Authentication error (refresh token rejected)
    4 - Misoca API error while fetching or creating the invoice
    5 - The rotated refresh token could not be written to the env file
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date
from typing import Callable, Optional

from pydantic import ValidationError

from misoca_invoice.clients import MisocaInvoiceClient, MisocaOAuthClient
from misoca_invoice.core.config import AppSettings, get_settings
from misoca_invoice.core.errors import ErrorKind, JobError
from misoca_invoice.core.logging import configure_logging
from misoca_invoice.services import (
    InvoiceDuplicationService,
    MissingRefreshTokenError,
    RefreshTokenHolder,
    TokenRefresher,
    TokenStore,
    create_token_store,
    resolve_refresh_token,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_AUTHENTICATION_ERROR = 3
EXIT_UPSTREAM_ERROR = 4
EXIT_PERSISTENCE_ERROR = 5

_EXIT_CODES = {
    ErrorKind.CONFIGURATION: EXIT_CONFIGURATION_ERROR,
    ErrorKind.AUTHENTICATION: EXIT_AUTHENTICATION_ERROR,
    ErrorKind.UPSTREAM: EXIT_UPSTREAM_ERROR,
    ErrorKind.PERSISTENCE: EXIT_PERSISTENCE_ERROR,
}


async def run_job(
    settings: AppSettings,
    *,
    store: Optional[TokenStore] = None,
    oauth_client: Optional[MisocaOAuthClient] = None,
    invoice_client: Optional[MisocaInvoiceClient] = None,
    today: Callable[[], date] = date.today,
    dry_run: bool = False,
) -> int:
    """Wire the pipeline from ``settings`` and run it once, returning an exit code."""
    try:
        store = store or create_token_store(settings)
        holder = RefreshTokenHolder(await resolve_refresh_token(settings.job.refresh_token, store))
        if not holder.value:
            logger.error("REFRESH_TOKEN is not configured.")
            logger.error("Local runs: check REFRESH_TOKEN in %s", settings.storage.env_file_path)
            logger.error(
                "Cloud Run Jobs: upload %s to the GCS bucket", settings.storage.token_object_name
            )
            raise MissingRefreshTokenError("REFRESH_TOKEN is not set.")

        service = InvoiceDuplicationService(
            refresher=TokenRefresher(oauth_client or MisocaOAuthClient(settings.misoca), store),
            invoice_client=invoice_client or MisocaInvoiceClient(),
            today=today,
        )
        await service.duplicate_monthly_invoice(
            holder, settings.job.source_invoice_id, dry_run=dry_run
        )
    except JobError as exc:
        logger.error("Monthly invoice duplication failed (%s): %s", exc.kind.value, exc)
        return _EXIT_CODES[exc.kind]
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unexpected failure during monthly invoice duplication")
        return EXIT_RUNTIME_ERROR
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Duplicate the source Misoca invoice for the current month."
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Refresh the token and fetch the source invoice, but do not create the duplicate.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging()
        logger.error("Settings validation failed. Missing or invalid values detected:\n%s", exc)
        return EXIT_CONFIGURATION_ERROR

    configure_logging(settings.log_level)
    return asyncio.run(run_job(settings, dry_run=args.dry_run))


__all__ = ["main", "run_job"]
