"""
Pytest configuration and fixtures
"""
import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pawtrack.backend import (  # noqa: E402
    Backend,
    InMemoryIdentityProvider,
    InMemoryReportStore,
    InMemoryProfileStore,
    InMemoryObjectStorage,
)
from pawtrack.core.exceptions import GeocodeError  # noqa: E402
from pawtrack.location import DeviceLocation, GeolocationProvider  # noqa: E402
from pawtrack.media.capture import LocalImageHandle  # noqa: E402
from pawtrack.reports.models import AddressComponents, Coordinates  # noqa: E402


class StaticGeocoder:
    """Geocoder returning a fixed address, or failing."""

    def __init__(self, address=None, fail=False):
        self.address = address or AddressComponents(street="Main St", city="Townsville")
        self.fail = fail
        self.calls = []

    def reverse_geocode(self, coords):
        self.calls.append(coords)
        if self.fail:
            raise GeocodeError("geocoder unavailable")
        return self.address


@pytest.fixture
def sample_rows():
    """Three community and two rescuer reports, oldest first."""
    base = {
        "photo_url": "https://example.supabase.co/storage/v1/object/public/report-photos/a.jpg",
        "animal_type": "dog",
        "location_lat": 10.0,
        "location_lng": 20.0,
        "location_address": "Main St, Townsville",
    }
    specs = [
        ("r1", "u1", "community", "pending", "2026-01-01T08:00:00+00:00"),
        ("r2", "u2", "community", "critical", "2026-01-02T08:00:00+00:00"),
        ("r3", "u1", "community", "rescued", "2026-01-03T08:00:00+00:00"),
        ("r4", "u3", "rescuer", "pending", "2026-01-04T08:00:00+00:00"),
        ("r5", "u3", "rescuer", "missing", "2026-01-05T08:00:00+00:00"),
    ]
    return [
        dict(
            base,
            id=report_id,
            user_id=user_id,
            category=category,
            status=status,
            created_at=created_at,
            description=f"Report {report_id}",
        )
        for report_id, user_id, category, status, created_at in specs
    ]


@pytest.fixture
def photo():
    """In-memory JPEG handle."""
    return LocalImageHandle(uri="img1", mime_type="image/jpeg", data=b"\xff\xd8\xff\xe0fake")


@pytest.fixture
def location():
    return Coordinates(10.0, 20.0)


@pytest.fixture
def identity():
    """Identity provider with a signed-in user."""
    provider = InMemoryIdentityProvider()
    provider.sign_up("volunteer@example.com", "secret123")
    return provider


@pytest.fixture
def report_store(sample_rows):
    """Report store seeded with the sample rows, wrapped to record calls."""
    store = InMemoryReportStore()
    store.rows.extend(dict(row) for row in sample_rows)
    return MagicMock(wraps=store)


@pytest.fixture
def empty_report_store():
    return MagicMock(wraps=InMemoryReportStore())


@pytest.fixture
def object_storage():
    return MagicMock(wraps=InMemoryObjectStorage())


@pytest.fixture
def geocoder():
    return StaticGeocoder()


@pytest.fixture
def geolocation(geocoder, location):
    return GeolocationProvider(DeviceLocation(location), geocoder)


@pytest.fixture
def backend(identity, report_store, object_storage):
    return Backend(
        identity=identity,
        reports=report_store,
        profiles=InMemoryProfileStore(),
        storage=object_storage,
    )


@pytest.fixture
def static_geocoder():
    """The StaticGeocoder class, for tests that build their own."""
    return StaticGeocoder
