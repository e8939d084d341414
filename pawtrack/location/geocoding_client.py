"""
PawTrack - Reverse Geocoding Client
Resolves coordinates to a street address using OpenStreetMap Nominatim.

API Documentation: https://nominatim.org/release-docs/latest/api/Reverse/
"""

import logging
from typing import Optional, Dict, Any

import httpx

from pawtrack.core.exceptions import GeocodeError
from pawtrack.reports.models import AddressComponents, Coordinates

logger = logging.getLogger(__name__)


class NominatimGeocoder:
    """
    Reverse geocoder for the Nominatim API.

    Usage:
        geocoder = NominatimGeocoder(user_agent="pawtrack/0.1")
        address = geocoder.reverse_geocode(Coordinates(10.0, 20.0))

    Usage Policy:
        - At most 1 request per second
        - A User-Agent identifying the application is required
    """

    BASE_URL = "https://nominatim.openstreetmap.org"

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: str = "pawtrack/0.1",
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._client = http_client or httpx.Client(timeout=timeout)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self._client.close()

    def reverse_geocode(self, coords: Coordinates) -> AddressComponents:
        """
        Resolve coordinates to address parts.

        Raises:
            GeocodeError: request failed or no address at that point
        """
        try:
            response = self._client.get(
                f"{self.base_url}/reverse",
                params={
                    "format": "jsonv2",
                    "lat": coords.lat,
                    "lon": coords.lng,
                    "addressdetails": 1,
                },
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GeocodeError(f"Reverse geocoding failed: {e}") from e

        if not isinstance(body, dict) or "error" in body:
            message = body.get("error") if isinstance(body, dict) else "bad response"
            raise GeocodeError(f"No address for ({coords.lat}, {coords.lng}): {message}")

        return self._parse_address(body)

    def _parse_address(self, body: Dict[str, Any]) -> AddressComponents:
        """Map a Nominatim result onto AddressComponents."""
        address = body.get("address") or {}

        street = address.get("road") or address.get("pedestrian") or address.get("footway")
        if street and address.get("house_number"):
            street = f"{address['house_number']} {street}"

        city = (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or address.get("suburb")
        )

        return AddressComponents(
            street=street,
            name=body.get("name") or None,
            city=city,
            region=address.get("state") or address.get("county"),
            postal_code=address.get("postcode"),
            country=address.get("country"),
        )
