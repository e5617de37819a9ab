"""
Access-token acquisition with refresh-token rotation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from misoca_invoice.clients import MisocaOAuthClient, OAuthTokenExchangeError
from misoca_invoice.core.errors import ConfigurationError
from misoca_invoice.services.token_store import TokenStore

logger = logging.getLogger(__name__)


class MissingRefreshTokenError(ConfigurationError):
    """Raised when no refresh token is configured or stored."""


@dataclass
class RefreshTokenHolder:
    """The in-memory copy of the current refresh token for one run."""

    value: Optional[str] = None


_INVALID_GRANT_GUIDANCE = (
    "The refresh token is no longer valid. To set it up again:",
    "1. Run the setup server (python -m scripts.setup_server) and authorize the app",
    "2. Copy the refresh_token from the callback page",
    "3. Store it as REFRESH_TOKEN in .env, or in refresh-token.txt in the GCS bucket",
)


class TokenRefresher:
    """Exchange the held refresh token for an access token."""

    def __init__(self, oauth_client: MisocaOAuthClient, store: TokenStore) -> None:
        self._oauth = oauth_client
        self._store = store

    async def refresh(self, holder: RefreshTokenHolder) -> str:
        """Return a fresh access token, persisting a rotated refresh token first."""
        current = holder.value
        if not current:
            logger.error("REFRESH_TOKEN is not configured")
            raise MissingRefreshTokenError(
                "REFRESH_TOKEN is not set. Run the one-time setup first."
            )

        logger.info("Requesting an access token with the refresh token")
        try:
            tokens = await self._oauth.refresh_token(current)
        except OAuthTokenExchangeError as exc:
            diagnostics = exc.diagnostics()
            logger.error("Token refresh failed: %s", diagnostics, extra={"diagnostics": diagnostics})
            if exc.status_code == 400 and exc.error_code == "invalid_grant":
                for line in _INVALID_GRANT_GUIDANCE:
                    logger.error(line)
            raise

        logger.info("Obtained an access token")
        rotated = tokens.refresh_token
        if rotated and rotated != current:
            logger.info("A new refresh token was issued; persisting it")
            await self._store.save(rotated)
            holder.value = rotated

        return tokens.access_token


__all__ = ["MissingRefreshTokenError", "RefreshTokenHolder", "TokenRefresher"]
