"""
FastAPI application entrypoint for the one-time OAuth setup server.
"""

from __future__ import annotations

from fastapi import FastAPI

from misoca_invoice.api.routes import router as setup_router
from misoca_invoice.core.config import get_settings
from misoca_invoice.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the setup FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Misoca OAuth Setup",
        version="0.1.0",
        description="Exchanges an authorization code for the initial refresh token.",
    )
    app.include_router(setup_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
