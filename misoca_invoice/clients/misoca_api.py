"""Misoca v3 invoice API client."""

from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from misoca_invoice.core.errors import UpstreamAPIError
from misoca_invoice.schemas import CreatedInvoice, DuplicateInvoiceRequest, SourceInvoice

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class MisocaAPIError(UpstreamAPIError):
    """Raised when the invoice API returns a non-2xx response or is unreachable."""


_STATUS_HINTS = {
    401: "Authentication error. The access token is probably invalid.",
    422: "Probably a validation error. Check the invoice data.",
}


def _log_failure(summary: str, error: MisocaAPIError) -> None:
    diagnostics = error.diagnostics()
    logger.error("%s: %s", summary, diagnostics, extra={"diagnostics": diagnostics})


def _parse_body(response: httpx.Response, model: Type[ModelT], summary: str) -> ModelT:
    """Validate a 2xx body, reporting malformed payloads as upstream errors."""
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        error = MisocaAPIError(
            f"{summary}: unexpected response body.",
            status_code=response.status_code,
            status_text=response.reason_phrase,
            body=response.text,
        )
        _log_failure(summary, error)
        raise error from exc


class MisocaInvoiceClient:
    """Read and create invoices on behalf of the authorized account."""

    API_BASE_URL = "https://app.misoca.jp/api/v3"
    VIEWER_BASE_URL = "https://app.misoca.jp/invoices"

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    @staticmethod
    def _headers(access_token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, access_token: str, **kwargs: Any) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.API_BASE_URL, timeout=self._timeout, transport=self._transport
        ) as client:
            return await client.request(method, path, headers=self._headers(access_token), **kwargs)

    async def get_invoice(self, access_token: str, invoice_id: str) -> SourceInvoice:
        """Fetch the invoice that serves as the template for duplication."""
        logger.info("Fetching source invoice (id=%s)", invoice_id)
        try:
            response = await self._request("GET", f"/invoice/{invoice_id}", access_token)
        except httpx.HTTPError as exc:
            error = MisocaAPIError.from_transport_error(exc)
            _log_failure("Fetching source invoice failed", error)
            raise error from exc

        if not response.is_success:
            error = MisocaAPIError.from_response(response, "Fetching source invoice failed.")
            _log_failure("Fetching source invoice failed", error)
            raise error

        invoice = _parse_body(response, SourceInvoice, "Fetching source invoice failed")
        logger.info('Fetched source invoice: "%s"', invoice.subject)
        logger.info("Bill to: %s", invoice.contact_name or "no contact information")
        logger.info("Line items: %d", len(invoice.items or []))
        return invoice

    async def create_invoice(
        self, access_token: str, request: DuplicateInvoiceRequest
    ) -> CreatedInvoice:
        """Create a new invoice and return its identifier and subject."""
        try:
            response = await self._request(
                "POST", "/invoice", access_token, json=request.to_payload()
            )
        except httpx.HTTPError as exc:
            error = MisocaAPIError.from_transport_error(exc)
            _log_failure("Creating duplicate invoice failed", error)
            raise error from exc

        if not response.is_success:
            error = MisocaAPIError.from_response(response, "Creating duplicate invoice failed.")
            _log_failure("Creating duplicate invoice failed", error)
            hint = _STATUS_HINTS.get(response.status_code)
            if hint:
                logger.error(hint)
            raise error

        created = _parse_body(response, CreatedInvoice, "Creating duplicate invoice failed")
        logger.info('Duplicated invoice: "%s"', created.subject)
        logger.info("New invoice id: %s", created.id)
        logger.info("Invoice URL: %s", self.invoice_url(created.id))
        return created

    def invoice_url(self, invoice_id: Any) -> str:
        return f"{self.VIEWER_BASE_URL}/{invoice_id}"


__all__ = ["MisocaAPIError", "MisocaInvoiceClient"]
