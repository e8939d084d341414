"""
PawTrack - Reports Module
Stray report model, submission flow, and listing.
"""

from pawtrack.reports.models import (
    Report,
    ReportDraft,
    ReportStatus,
    AnimalType,
    SubmitterCategory,
    ViewMode,
    Coordinates,
    AddressComponents,
    ListingSnapshot,
)
from pawtrack.reports.submission import (
    ReportSubmitter,
    SubmissionResult,
    SubmissionStage,
)
from pawtrack.reports.listing import (
    ReportListing,
    ListingResult,
    build_snapshot,
    count_statuses,
    partition_by_category,
)

__all__ = [
    # Model
    "Report",
    "ReportDraft",
    "ReportStatus",
    "AnimalType",
    "SubmitterCategory",
    "ViewMode",
    "Coordinates",
    "AddressComponents",
    "ListingSnapshot",
    # Submission
    "ReportSubmitter",
    "SubmissionResult",
    "SubmissionStage",
    # Listing
    "ReportListing",
    "ListingResult",
    "build_snapshot",
    "count_statuses",
    "partition_by_category",
]
