"""
FastAPI routes for the one-time OAuth setup server.
"""

from __future__ import annotations

import html
import json
import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from misoca_invoice.clients import OAuthTokenExchangeError
from misoca_invoice.dependencies import get_misoca_oauth_client

router = APIRouter()
logger = logging.getLogger(__name__)


def _render_page(title: str, payload: Any) -> str:
    pretty = json.dumps(payload, indent=2, ensure_ascii=False)
    return f"<h1>{html.escape(title)}</h1>\n<pre>{html.escape(pretty)}</pre>\n"


@router.get("/callback", response_class=HTMLResponse, status_code=HTTPStatus.OK)
async def handle_misoca_oauth_callback(
    oauth_client: Annotated[Any, Depends(get_misoca_oauth_client)],
    code: str = Query(..., description="Authorization code returned by Misoca."),
) -> HTMLResponse:
    """Exchange the authorization code and show the raw token response."""
    try:
        token_payload = await oauth_client.exchange_authorization_code(code)
    except OAuthTokenExchangeError as exc:
        detail = exc.body if exc.body is not None else exc.message
        logger.error("Token error: %s", detail)
        return HTMLResponse(_render_page("Token exchange failed", detail))

    logger.info("Authorization code exchanged; copy refresh_token into REFRESH_TOKEN")
    return HTMLResponse(_render_page("Access token obtained", token_payload))


__all__ = ["router"]
