"""Service layer exports."""

from .invoice_duplication import InvoiceDuplicationService, MissingSourceInvoiceError
from .invoice_transformer import billing_dates, build_duplicate_request, rewrite_subject
from .token_refresher import MissingRefreshTokenError, RefreshTokenHolder, TokenRefresher
from .token_store import (
    TokenBackend,
    TokenStore,
    backend_for_settings,
    create_token_store,
    resolve_refresh_token,
    select_token_backend,
)

__all__ = [
    "InvoiceDuplicationService",
    "MissingRefreshTokenError",
    "MissingSourceInvoiceError",
    "RefreshTokenHolder",
    "TokenBackend",
    "TokenRefresher",
    "TokenStore",
    "backend_for_settings",
    "billing_dates",
    "build_duplicate_request",
    "create_token_store",
    "resolve_refresh_token",
    "rewrite_subject",
    "select_token_backend",
]
