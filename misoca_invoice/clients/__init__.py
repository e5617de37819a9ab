"""Expose constructed client wrappers."""

from .env_file_token_store import EnvFileTokenStore, TokenPersistenceError
from .gcs_token_store import GCSTokenStore
from .misoca_api import MisocaAPIError, MisocaInvoiceClient
from .misoca_auth import MisocaOAuthClient, OAuthTokenExchangeError

__all__ = [
    "EnvFileTokenStore",
    "GCSTokenStore",
    "MisocaAPIError",
    "MisocaInvoiceClient",
    "MisocaOAuthClient",
    "OAuthTokenExchangeError",
    "TokenPersistenceError",
]
