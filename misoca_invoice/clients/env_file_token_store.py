"""Local ``.env`` persistence for the rotating refresh token."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from misoca_invoice.core.errors import PersistenceError
from misoca_invoice.core.logging import preview_token

logger = logging.getLogger(__name__)

_REFRESH_TOKEN_LINE = re.compile(r"^REFRESH_TOKEN=[^\r\n]*", re.MULTILINE)


class TokenPersistenceError(PersistenceError):
    """Raised when the env file cannot be rewritten."""


class EnvFileTokenStore:
    """Rewrite the ``REFRESH_TOKEN=`` line of an env file in place."""

    def __init__(self, env_path: Path) -> None:
        self._env_path = Path(env_path)

    async def load(self) -> Optional[str]:
        if not self._env_path.exists():
            return None
        with self._env_path.open("r", encoding="utf-8", newline="") as handle:
            content = handle.read()
        match = _REFRESH_TOKEN_LINE.search(content)
        if match is None:
            return None
        value = match.group(0).partition("=")[2].strip().strip('"').strip("'")
        return value or None

    async def save(self, token: str) -> None:
        logger.info("Updating %s", self._env_path)
        try:
            with self._env_path.open("r", encoding="utf-8", newline="") as handle:
                content = handle.read()
            line = f"REFRESH_TOKEN={token}"
            if _REFRESH_TOKEN_LINE.search(content):
                content = _REFRESH_TOKEN_LINE.sub(lambda _: line, content, count=1)
            else:
                content += f"\n{line}"
            self._replace(content)
        except OSError as exc:
            logger.error("Failed to update %s: %s", self._env_path, exc)
            raise TokenPersistenceError(
                f"Could not persist the rotated refresh token to {self._env_path}: {exc}"
            ) from exc

        logger.info("Updated %s", self._env_path)
        logger.info("New REFRESH_TOKEN: %s", preview_token(token))

    def _replace(self, content: str) -> None:
        """Write to a sibling temp file, then atomically swap it in."""
        directory = self._env_path.parent
        fd, tmp_name = tempfile.mkstemp(prefix=".env.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
            if self._env_path.exists():
                os.chmod(tmp_name, self._env_path.stat().st_mode & 0o777)
            os.replace(tmp_name, self._env_path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["EnvFileTokenStore", "TokenPersistenceError"]
