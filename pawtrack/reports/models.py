"""
Stray report data model
Reports, drafts, and listing snapshots shared by the report flows
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Optional, Dict, Any, Tuple, Mapping

from pawtrack.core.constants import (
    UNKNOWN_LOCATION,
    DEFAULT_ANIMAL_TYPE,
    DEFAULT_STATUS,
)


class AnimalType(str, Enum):
    """Kind of animal in a report."""
    DOG = "dog"
    CAT = "cat"


class ReportStatus(str, Enum):
    """Lifecycle tag chosen by the submitter."""
    PENDING = "pending"
    CRITICAL = "critical"
    RESCUED = "rescued"
    MISSING = "missing"


class SubmitterCategory(str, Enum):
    """Display partition a report belongs to."""
    COMMUNITY = "community"
    RESCUER = "rescuer"


class ViewMode(str, Enum):
    """How the home screen presents reports."""
    MAP = "map"
    LIST = "list"


def is_member(enum_cls, value: Any) -> bool:
    """Check whether value is one of the enum's values."""
    return value in {member.value for member in enum_cls}


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class AddressComponents:
    """Reverse-geocoded address parts."""
    street: Optional[str] = None
    name: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    @property
    def formatted(self) -> str:
        """
        Human-readable address.

        Street (or place name) and city when known, otherwise the widest
        area available. Empty string when nothing is known.
        """
        parts = [p for p in (self.street or self.name, self.city) if p]
        if not parts:
            parts = [p for p in (self.region, self.country) if p]
        return ", ".join(parts)


@dataclass
class Report:
    """
    Stray animal sighting/rescue record.

    `id` and `created_at` are assigned by the store and stay None on a
    report that has not been read back.
    """
    submitter_id: str
    photo_url: str
    animal_type: str
    description: str
    location_lat: float
    location_lng: float
    status: str
    submitter_category: str
    location_address: str = UNKNOWN_LOCATION
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.location_lat, self.location_lng)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Report":
        """Build a report from a store row."""
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))

        report_id = row.get("id")

        return cls(
            id=str(report_id) if report_id is not None else None,
            submitter_id=row.get("user_id"),
            photo_url=row.get("photo_url"),
            animal_type=row.get("animal_type"),
            description=row.get("description") or "",
            location_lat=float(row["location_lat"]),
            location_lng=float(row["location_lng"]),
            location_address=row.get("location_address") or UNKNOWN_LOCATION,
            status=row.get("status"),
            submitter_category=row.get("category"),
            created_at=created_at,
        )

    def to_row(self) -> Dict[str, Any]:
        """Row for insertion. Never carries the store-assigned columns."""
        return {
            "user_id": self.submitter_id,
            "photo_url": self.photo_url,
            "animal_type": self.animal_type,
            "description": self.description,
            "location_lat": self.location_lat,
            "location_lng": self.location_lng,
            "location_address": self.location_address,
            "status": self.status,
            "category": self.submitter_category,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "submitter_id": self.submitter_id,
            "photo_url": self.photo_url,
            "animal_type": self.animal_type,
            "description": self.description,
            "location_lat": self.location_lat,
            "location_lng": self.location_lng,
            "location_address": self.location_address,
            "status": self.status,
            "submitter_category": self.submitter_category,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class ReportDraft:
    """Client-only candidate report under construction."""
    photo: Optional[Any] = None  # LocalImageHandle
    animal_type: str = DEFAULT_ANIMAL_TYPE
    description: str = ""
    status: str = DEFAULT_STATUS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "photo": getattr(self.photo, "uri", None),
            "animal_type": self.animal_type,
            "description": self.description,
            "status": self.status,
        }


def _empty_partition() -> Mapping[str, Tuple[Report, ...]]:
    return MappingProxyType({c.value: () for c in SubmitterCategory})


def _zero_counts() -> Mapping[str, int]:
    return MappingProxyType({s.value: 0 for s in ReportStatus})


@dataclass(frozen=True)
class ListingSnapshot:
    """Complete result of one refresh. Replaced wholesale, never mutated."""
    all_reports: Tuple[Report, ...] = ()
    by_category: Mapping[str, Tuple[Report, ...]] = field(default_factory=_empty_partition)
    status_counts: Mapping[str, int] = field(default_factory=_zero_counts)

    def for_category(self, category: str) -> Tuple[Report, ...]:
        """Reports of one display partition."""
        return self.by_category.get(category, ())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": len(self.all_reports),
            "by_category": {
                category: len(reports) for category, reports in self.by_category.items()
            },
            "status_counts": dict(self.status_counts),
        }
