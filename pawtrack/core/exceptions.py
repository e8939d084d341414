"""
PawTrack - Error types

Collaborator adapters raise StoreError / StorageError / AuthError /
LocationError / GeocodeError / CaptureError. The flows translate them into
UploadFailed, PersistenceFailed and FetchError. Everything derives from
PawTrackError so the controller can catch the whole family at one boundary.
"""

from typing import Optional


class PawTrackError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PawTrackError):
    """User input is missing or invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UploadFailed(PawTrackError):
    """Photo could not be uploaded to object storage."""


class PersistenceFailed(PawTrackError):
    """Row could not be written to the store."""


class FetchError(PawTrackError):
    """Reports could not be read from the store."""


class AuthError(PawTrackError):
    """Identity provider rejected the request."""


class NotAuthenticated(AuthError):
    """No signed-in user."""


class LocationError(PawTrackError):
    """Device location is unavailable."""


class GeocodeError(PawTrackError):
    """Reverse geocoding failed."""


class CaptureError(PawTrackError):
    """No usable image could be obtained."""


class StoreError(PawTrackError):
    """Relational store request failed."""


class StorageError(PawTrackError):
    """Object storage request failed."""
