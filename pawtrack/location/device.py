"""
Device location
Holds the most recent position fix reported by the device.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pawtrack.core.exceptions import LocationError
from pawtrack.reports.models import Coordinates

logger = logging.getLogger(__name__)


class DeviceLocation:
    """Last known device coordinates."""

    def __init__(self, initial: Optional[Coordinates] = None):
        self._fix: Optional[Coordinates] = None
        self.updated_at: Optional[datetime] = None
        if initial is not None:
            self.update(initial.lat, initial.lng)

    def update(self, lat: float, lng: float) -> Coordinates:
        """
        Record a new fix.

        Raises:
            LocationError: coordinates out of range
        """
        if not (-90 <= lat <= 90) or not (-180 <= lng <= 180):
            raise LocationError(f"Invalid coordinates: ({lat}, {lng})")

        self._fix = Coordinates(lat, lng)
        self.updated_at = datetime.now(timezone.utc)
        logger.debug(f"Device location updated: ({lat}, {lng})")
        return self._fix

    def current_coordinates(self) -> Coordinates:
        """
        Latest fix.

        Raises:
            LocationError: no fix received yet
        """
        if self._fix is None:
            raise LocationError("Device location is not available. Enable location and try again.")
        return self._fix
