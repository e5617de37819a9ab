"""
Factory functions to provide shared clients as FastAPI dependencies.
"""

from functools import lru_cache

from misoca_invoice.clients import MisocaOAuthClient
from misoca_invoice.dependencies.config import get_app_settings


@lru_cache()
def get_misoca_oauth_client() -> MisocaOAuthClient:
    """Create a singleton Misoca OAuth client."""
    return MisocaOAuthClient(get_app_settings().misoca)


__all__ = ["get_misoca_oauth_client"]
