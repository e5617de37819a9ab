"""
Monthly invoice duplication pipeline.

AcquireToken -> FetchSource -> Transform+Submit -> Done. Any failure raises a
``JobError`` and ends the run at the step where it happened.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Callable, Optional

from misoca_invoice.clients import MisocaInvoiceClient
from misoca_invoice.core.errors import ConfigurationError
from misoca_invoice.schemas import CreatedInvoice
from misoca_invoice.services.invoice_transformer import build_duplicate_request
from misoca_invoice.services.token_refresher import RefreshTokenHolder, TokenRefresher

logger = logging.getLogger(__name__)


class MissingSourceInvoiceError(ConfigurationError):
    """Raised when SOURCE_INVOICE_ID is not configured."""


class InvoiceDuplicationService:
    """Duplicate the configured source invoice for the current month."""

    def __init__(
        self,
        *,
        refresher: TokenRefresher,
        invoice_client: MisocaInvoiceClient,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._refresher = refresher
        self._invoices = invoice_client
        self._today = today

    async def duplicate_monthly_invoice(
        self,
        holder: RefreshTokenHolder,
        source_invoice_id: Optional[str],
        *,
        dry_run: bool = False,
    ) -> Optional[CreatedInvoice]:
        """Run the pipeline once. Returns ``None`` for a dry run."""
        started = datetime.now(timezone.utc)
        logger.info("Monthly invoice duplication started: %s", started.isoformat())

        if not source_invoice_id:
            logger.error("SOURCE_INVOICE_ID is not configured")
            raise MissingSourceInvoiceError("SOURCE_INVOICE_ID is not set.")

        access_token = await self._refresher.refresh(holder)
        source = await self._invoices.get_invoice(access_token, source_invoice_id)

        request = build_duplicate_request(source, self._today())
        logger.info("Duplicating invoice")
        logger.info('Duplicate subject: "%s"', request.subject)
        logger.info("Issue date: %s, payment due: %s", request.issue_date, request.payment_due_on)

        created: Optional[CreatedInvoice] = None
        if dry_run:
            logger.info("Dry run; not submitting: %s", request.to_payload())
        else:
            created = await self._invoices.create_invoice(access_token, request)

        finished = datetime.now(timezone.utc)
        elapsed_ms = int((finished - started).total_seconds() * 1000)
        logger.info("Monthly invoice duplication finished: %s", finished.isoformat())
        logger.info("Elapsed: %dms", elapsed_ms)
        return created


__all__ = ["InvoiceDuplicationService", "MissingSourceInvoiceError"]
