"""Google Cloud Storage persistence for the rotating refresh token."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from google.cloud import storage

from misoca_invoice.core.logging import preview_token

logger = logging.getLogger(__name__)


class GCSTokenStore:
    """Keep the refresh token as a plain-text object in a GCS bucket.

    Failures never propagate: a failed load yields ``None`` and a failed save
    asks the operator to update the object by hand.
    """

    CONTENT_TYPE = "text/plain"

    def __init__(
        self,
        bucket_name: str,
        object_name: str = "refresh-token.txt",
        *,
        client: Optional[storage.Client] = None,
    ) -> None:
        self._bucket_name = bucket_name
        self._object_name = object_name
        self._client = client

    def _blob(self) -> storage.Blob:
        if self._client is None:
            self._client = storage.Client()
        return self._client.bucket(self._bucket_name).blob(self._object_name)

    def _download(self) -> Optional[str]:
        blob = self._blob()
        if not blob.exists():
            return None
        return blob.download_as_bytes().decode("utf-8").strip()

    def _upload(self, token: str) -> None:
        blob = self._blob()
        blob.cache_control = "no-cache"
        blob.upload_from_string(token, content_type=self.CONTENT_TYPE)

    async def load(self) -> Optional[str]:
        logger.info("Loading refresh token from gs://%s/%s", self._bucket_name, self._object_name)
        try:
            token = await asyncio.to_thread(self._download)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Failed to load refresh token from GCS: %s", exc)
            return None

        if not token:
            logger.warning("%s is missing or empty in bucket %s", self._object_name, self._bucket_name)
            return None
        logger.info("Loaded refresh token from GCS: %s", preview_token(token))
        return token

    async def save(self, token: str) -> None:
        logger.info("Saving refresh token to gs://%s/%s", self._bucket_name, self._object_name)
        try:
            await asyncio.to_thread(self._upload, token)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Failed to save refresh token to GCS: %s", exc)
            logger.warning(
                "Update REFRESH_TOKEN manually before the next run; the rotated token was not persisted."
            )
            return
        logger.info("Saved refresh token to GCS")
        logger.info("New REFRESH_TOKEN: %s", preview_token(token))


__all__ = ["GCSTokenStore"]
