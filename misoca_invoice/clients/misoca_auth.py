"""
Misoca OAuth utilities.

These helpers perform the authorization-code exchange used during setup and
the refresh-token exchange used by every job run.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from misoca_invoice.core.config import MisocaSettings
from misoca_invoice.core.errors import AuthenticationError
from misoca_invoice.schemas import TokenResponse


class OAuthTokenExchangeError(AuthenticationError):
    """Raised when the token endpoint rejects an exchange."""


class MisocaOAuthClient:
    """Exchange authorization codes and refresh tokens at the Misoca token endpoint."""

    TOKEN_URL = "https://app.misoca.jp/oauth2/token"

    def __init__(
        self,
        settings: MisocaSettings,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._timeout = timeout
        self._transport = transport

    async def _post_token(self, form: Dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                return await client.post(
                    self.TOKEN_URL,
                    data=form,
                    auth=(self._settings.client_id, self._settings.client_secret),
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
            except httpx.HTTPError as exc:
                raise OAuthTokenExchangeError.from_transport_error(exc) from exc

    async def exchange_authorization_code(self, code: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for the initial token pair.

        Returns the token endpoint's JSON payload unchanged so it can be shown
        to the operator.
        """
        response = await self._post_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._settings.redirect_uri,
            }
        )
        if not response.is_success:
            raise OAuthTokenExchangeError.from_response(
                response, "Authorization code exchange failed."
            )
        return response.json()

    async def refresh_token(self, refresh_token: str) -> TokenResponse:
        """Exchange a refresh token for a new access token."""
        response = await self._post_token(
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
                "redirect_uri": self._settings.redirect_uri,
            }
        )
        if not response.is_success:
            raise OAuthTokenExchangeError.from_response(response, "Refresh token exchange failed.")

        try:
            return TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise OAuthTokenExchangeError(
                "Incomplete refresh payload returned from Misoca.",
                status_code=response.status_code,
                status_text=response.reason_phrase,
                body=response.text,
            ) from exc


__all__ = ["MisocaOAuthClient", "OAuthTokenExchangeError"]
