"""
PawTrack - Core Utilities
Central configuration, constants, and error types.
"""

from pawtrack.core.config import settings
from pawtrack.core.constants import (
    UNKNOWN_LOCATION,
    STATUS_LABELS,
    STATUS_COLORS,
)
from pawtrack.core.exceptions import PawTrackError

__all__ = [
    "settings",
    "UNKNOWN_LOCATION",
    "STATUS_LABELS",
    "STATUS_COLORS",
    "PawTrackError",
]
