"""
Photo capture for reports
Camera captures and gallery picks resolved to local image handles
"""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pawtrack.core.constants import IMAGE_EXTENSIONS, DEFAULT_IMAGE_MIME
from pawtrack.core.exceptions import CaptureError

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = frozenset(IMAGE_EXTENSIONS)


def guess_image_type(name: str) -> Optional[str]:
    """MIME type from a file name, None if it is not a supported image."""
    mime_type, _ = mimetypes.guess_type(name)
    if mime_type is None and name.lower().endswith(".heic"):
        mime_type = "image/heic"
    return mime_type if mime_type in SUPPORTED_MIME_TYPES else None


@dataclass(frozen=True)
class LocalImageHandle:
    """
    Locally addressable image.

    Either points at a file (`uri`) or carries the bytes itself (`data`),
    e.g. for images received over HTTP.
    """
    uri: str
    mime_type: str = DEFAULT_IMAGE_MIME
    data: Optional[bytes] = None

    def read_bytes(self) -> bytes:
        """
        Image contents.

        Raises:
            CaptureError: file missing or unreadable
        """
        if self.data is not None:
            return self.data

        try:
            return Path(self.uri).read_bytes()
        except OSError as e:
            raise CaptureError(f"Could not read image {self.uri}: {e}") from e

    @classmethod
    def from_upload(
        cls,
        filename: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> "LocalImageHandle":
        """
        Handle for uploaded bytes.

        Raises:
            CaptureError: empty upload or not a supported image type
        """
        if not data:
            raise CaptureError("Uploaded photo is empty.")

        mime_type = content_type if content_type in SUPPORTED_MIME_TYPES else guess_image_type(filename or "")
        if mime_type is None:
            raise CaptureError(f"Unsupported image type: {content_type or filename}")

        return cls(uri=filename or "upload", mime_type=mime_type, data=data)


class FileMediaProvider:
    """
    Media capture backed by the local filesystem.

    The camera writes into camera_dir; the newest image there is the
    latest capture. Gallery picks are arbitrary image paths.
    """

    def __init__(self, camera_dir: str = "captures"):
        self.camera_dir = Path(camera_dir)

    def capture_from_camera(self) -> LocalImageHandle:
        """
        Most recent camera capture.

        Raises:
            CaptureError: no capture available
        """
        if not self.camera_dir.is_dir():
            raise CaptureError(f"Camera directory not found: {self.camera_dir}")

        images = [
            p for p in self.camera_dir.iterdir()
            if p.is_file() and guess_image_type(p.name)
        ]
        if not images:
            raise CaptureError("No photo captured yet.")

        latest = max(images, key=lambda p: p.stat().st_mtime)
        logger.info(f"Using camera capture {latest.name}")

        return LocalImageHandle(uri=str(latest), mime_type=guess_image_type(latest.name))

    def pick_from_gallery(self, path: str) -> LocalImageHandle:
        """
        Image chosen from the gallery.

        Raises:
            CaptureError: missing file or not a supported image
        """
        picked = Path(path)
        if not picked.is_file():
            raise CaptureError(f"Image not found: {path}")

        mime_type = guess_image_type(picked.name)
        if mime_type is None:
            raise CaptureError(f"Not a supported image: {picked.name}")

        return LocalImageHandle(uri=str(picked), mime_type=mime_type)
