"""Invoice payloads exchanged with the Misoca v3 API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceInvoice(BaseModel):
    """Snapshot of the invoice being duplicated."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[Any] = None
    subject: str = ""
    contact_id: Optional[Any] = None
    contact_name: Optional[str] = Field(None, description="Only used for logging.")
    body: Optional[str] = None
    items: Optional[List[Dict[str, Any]]] = Field(
        None, description="Line items, copied verbatim into the duplicate."
    )


class DuplicateInvoiceRequest(BaseModel):
    """Body of ``POST /api/v3/invoice``."""

    subject: str
    contact_id: Optional[Any] = None
    issue_date: str = Field(..., description="YYYY-MM-DD, last day of the current month.")
    payment_due_on: str = Field(..., description="YYYY-MM-DD, last day of the next month.")
    body: Optional[str] = None
    items: Optional[List[Dict[str, Any]]] = None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for the API, omitting values absent from the source."""
        return self.model_dump(exclude_none=True)


class CreatedInvoice(BaseModel):
    """Subset of the API response for a newly created invoice."""

    model_config = ConfigDict(extra="ignore")

    id: Any
    subject: Optional[str] = None


__all__ = ["CreatedInvoice", "DuplicateInvoiceRequest", "SourceInvoice"]
