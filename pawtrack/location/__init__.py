"""
PawTrack - Location Module
Device position and reverse geocoding.
"""

from pawtrack.location.device import DeviceLocation
from pawtrack.location.geocoding_client import NominatimGeocoder
from pawtrack.reports.models import AddressComponents, Coordinates


class GeolocationProvider:
    """Current coordinates plus reverse geocoding, behind one object."""

    def __init__(self, device: DeviceLocation, geocoder):
        self.device = device
        self.geocoder = geocoder

    def current_coordinates(self) -> Coordinates:
        return self.device.current_coordinates()

    def reverse_geocode(self, coords: Coordinates) -> AddressComponents:
        return self.geocoder.reverse_geocode(coords)


__all__ = [
    "DeviceLocation",
    "NominatimGeocoder",
    "GeolocationProvider",
]
