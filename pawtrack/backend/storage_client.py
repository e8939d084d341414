"""
Supabase Storage client
Uploads report photos and resolves their public URLs
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

import httpx

from pawtrack.backend.base import SupabaseClient, error_message
from pawtrack.core.constants import IMAGE_EXTENSIONS
from pawtrack.core.exceptions import StorageError

logger = logging.getLogger(__name__)


def make_object_key(mime_type: str) -> str:
    """Unique object key with an extension matching the MIME type."""
    extension = IMAGE_EXTENSIONS.get(mime_type, "bin")
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"{stamp}-{uuid.uuid4().hex[:12]}.{extension}"


class SupabaseStorageClient(SupabaseClient):
    """Object storage backed by a public Supabase Storage bucket."""

    def __init__(self, url: str, anon_key: str, bucket: str = "report-photos", **kwargs):
        super().__init__(url, anon_key, **kwargs)
        self.bucket = bucket

    def upload(self, data: bytes, mime_type: str, object_key: Optional[str] = None) -> str:
        """
        Upload binary data.

        Args:
            data: File contents
            mime_type: Content type, e.g. image/jpeg
            object_key: Key to store under, generated if None

        Returns:
            Object key

        Raises:
            StorageError: upload failed or was rejected
        """
        key = object_key or make_object_key(mime_type)

        try:
            response = self._client.post(
                f"{self.url}/storage/v1/object/{self.bucket}/{key}",
                content=data,
                headers=self._headers({"Content-Type": mime_type, "x-upsert": "false"}),
            )
        except httpx.HTTPError as e:
            raise StorageError(f"Upload of {key} failed: {e}") from e

        if response.is_error:
            raise StorageError(f"Upload of {key} rejected: {error_message(response)}")

        logger.info(f"Uploaded {len(data)} bytes to {self.bucket}/{key}")
        return key

    def public_url(self, object_key: str) -> str:
        """Durable public URL of an uploaded object."""
        return f"{self.url}/storage/v1/object/public/{self.bucket}/{object_key}"
