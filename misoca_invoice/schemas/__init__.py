"""Public schema exports."""

from .auth import TokenResponse
from .invoice import CreatedInvoice, DuplicateInvoiceRequest, SourceInvoice

__all__ = [
    "CreatedInvoice",
    "DuplicateInvoiceRequest",
    "SourceInvoice",
    "TokenResponse",
]
