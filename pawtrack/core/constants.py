"""
PawTrack - Constants and Reference Data
Static values used throughout the application.
"""

from typing import Dict, Tuple

# =============================================================================
# REPORTS
# =============================================================================

# Address stored when reverse geocoding fails
UNKNOWN_LOCATION = "Unknown location"

DEFAULT_ANIMAL_TYPE = "dog"
DEFAULT_STATUS = "pending"

# Header counter labels, in display order
STATUS_LABELS: Dict[str, str] = {
    "rescued": "Rescues",
    "pending": "Pending",
    "critical": "Critical",
    "missing": "Missing",
}

# =============================================================================
# MAP
# =============================================================================

STATUS_COLORS: Dict[str, str] = {
    "pending": "orange",
    "critical": "red",
    "rescued": "green",
    "missing": "purple",
}

# Used when there is nothing to center the map on
DEFAULT_MAP_CENTER: Tuple[float, float] = (0.0, 0.0)
DEFAULT_MAP_ZOOM = 13

# =============================================================================
# MEDIA
# =============================================================================

IMAGE_EXTENSIONS: Dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/heic": "heic",
    "image/webp": "webp",
}

DEFAULT_IMAGE_MIME = "image/jpeg"
