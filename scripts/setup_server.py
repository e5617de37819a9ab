"""Run the one-time OAuth callback server.

Register ``http://localhost:3000/callback`` as the redirect URI of the Misoca
application, start this server, and open the Misoca authorization page in a
browser. The callback page shows the token response; copy its
``refresh_token`` into ``REFRESH_TOKEN``::

    python -m scripts.setup_server
"""

from __future__ import annotations

import logging

import uvicorn

from misoca_invoice.core.config import get_settings
from misoca_invoice.core.logging import configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    host, port = settings.setup_server.host, settings.setup_server.port
    logger.info("Setup server running: http://localhost:%d", port)
    uvicorn.run("misoca_invoice.main:app", host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()
