"""Schemas related to OAuth flows."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenResponse(BaseModel):
    """Payload returned by ``POST /oauth2/token``."""

    model_config = ConfigDict(extra="allow")

    access_token: str = Field(..., description="Short-lived bearer credential.")
    refresh_token: Optional[str] = Field(
        None, description="Present when the server rotates the refresh token."
    )
    token_type: Optional[str] = None
    expires_in: Optional[int] = None


__all__ = ["TokenResponse"]
