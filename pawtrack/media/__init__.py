"""
PawTrack - Media Module
Photo capture for report drafts.
"""

from pawtrack.media.capture import (
    LocalImageHandle,
    FileMediaProvider,
    guess_image_type,
)

__all__ = [
    "LocalImageHandle",
    "FileMediaProvider",
    "guess_image_type",
]
