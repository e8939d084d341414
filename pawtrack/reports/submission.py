"""
Report submission flow
Turns a draft into a persisted report: upload, geocode, identify, insert
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pawtrack.core.constants import UNKNOWN_LOCATION
from pawtrack.core.exceptions import (
    PawTrackError,
    ValidationError,
    UploadFailed,
    PersistenceFailed,
    NotAuthenticated,
    GeocodeError,
    StorageError,
    StoreError,
    CaptureError,
)
from pawtrack.reports.models import (
    Report,
    ReportDraft,
    Coordinates,
    AnimalType,
    ReportStatus,
    SubmitterCategory,
    is_member,
)

logger = logging.getLogger(__name__)


class SubmissionStage(Enum):
    """Pipeline stage, in execution order."""
    VALIDATE = "validate"
    UPLOAD = "upload"
    GEOCODE = "geocode"
    AUTHENTICATE = "authenticate"
    PERSIST = "persist"


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of one submission: a report, or the error and where it stopped."""
    report: Optional[Report] = None
    error: Optional[PawTrackError] = None
    stage: Optional[SubmissionStage] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.report is not None

    @classmethod
    def failed(cls, stage: SubmissionStage, error: PawTrackError) -> "SubmissionResult":
        return cls(error=error, stage=stage)


class ReportSubmitter:
    """
    Submits stray reports.

    Steps run strictly in order and stop at the first failure. A failure
    before the insert leaves nothing in the store; the insert itself is a
    single row write.
    """

    def __init__(self, storage, geolocation, identity, store):
        """
        Initialize submitter.

        Args:
            storage: Object storage client (upload / public_url)
            geolocation: Geolocation provider (reverse_geocode)
            identity: Identity provider (current_user)
            store: Report store (insert)
        """
        self.storage = storage
        self.geolocation = geolocation
        self.identity = identity
        self.store = store

    def submit(
        self,
        draft: ReportDraft,
        current_location: Optional[Coordinates],
        active_category: str,
    ) -> SubmissionResult:
        """
        Validate and persist a draft.

        Args:
            draft: Draft from the view state
            current_location: Device coordinates, None if not resolved
            active_category: Category the report is filed under

        Returns:
            SubmissionResult
        """
        try:
            self._validate(draft, current_location, active_category)
        except ValidationError as e:
            logger.info(f"Submission rejected: {e.message}")
            return SubmissionResult.failed(SubmissionStage.VALIDATE, e)

        try:
            photo_url = self._upload_photo(draft.photo)
        except UploadFailed as e:
            logger.error(f"Photo upload failed: {e.message}")
            return SubmissionResult.failed(SubmissionStage.UPLOAD, e)

        address = self._resolve_address(current_location)

        submitter_id = self.identity.current_user()
        if not submitter_id:
            logger.error("Submission aborted: no signed-in user")
            return SubmissionResult.failed(
                SubmissionStage.AUTHENTICATE,
                NotAuthenticated("You must be signed in to submit a report."),
            )

        report = Report(
            submitter_id=submitter_id,
            photo_url=photo_url,
            animal_type=draft.animal_type,
            description=draft.description.strip(),
            location_lat=current_location.lat,
            location_lng=current_location.lng,
            location_address=address,
            status=draft.status,
            submitter_category=active_category,
        )

        try:
            stored = self._persist(report)
        except PersistenceFailed as e:
            logger.error(f"Report insert failed: {e.message}")
            return SubmissionResult.failed(SubmissionStage.PERSIST, e)

        logger.info(
            f"Report submitted by {submitter_id} at "
            f"({report.location_lat}, {report.location_lng}) status={report.status}"
        )

        return SubmissionResult(report=stored)

    def _validate(
        self,
        draft: ReportDraft,
        current_location: Optional[Coordinates],
        active_category: str,
    ) -> None:
        if draft.photo is None:
            raise ValidationError("Please add a photo of the animal.", field="photo")

        if not (draft.description or "").strip():
            raise ValidationError("Please describe the animal.", field="description")

        if current_location is None:
            raise ValidationError("Location not available yet.", field="location")

        if not is_member(AnimalType, draft.animal_type):
            raise ValidationError(
                f"Unknown animal type: {draft.animal_type}", field="animal_type"
            )

        if not is_member(ReportStatus, draft.status):
            raise ValidationError(f"Unknown status: {draft.status}", field="status")

        if not is_member(SubmitterCategory, active_category):
            raise ValidationError(
                f"Unknown category: {active_category}", field="category"
            )

    def _upload_photo(self, photo) -> str:
        """Upload photo bytes and return the public URL."""
        try:
            data = photo.read_bytes()
        except (CaptureError, OSError) as e:
            raise UploadFailed(f"Could not read photo: {e}") from e

        try:
            key = self.storage.upload(data, photo.mime_type)
        except StorageError as e:
            raise UploadFailed(f"Photo upload failed: {e.message}") from e

        return self.storage.public_url(key)

    def _resolve_address(self, location: Coordinates) -> str:
        """Best-effort address. Falls back to the sentinel on any geocode failure."""
        try:
            address = self.geolocation.reverse_geocode(location).formatted
        except GeocodeError as e:
            logger.warning(f"Reverse geocoding failed, using sentinel address: {e}")
            return UNKNOWN_LOCATION

        return address or UNKNOWN_LOCATION

    def _persist(self, report: Report) -> Report:
        """Insert the row; return the stored version when the store echoes it."""
        try:
            row = self.store.insert(report.to_row())
        except StoreError as e:
            raise PersistenceFailed(f"Could not save report: {e.message}") from e

        if row:
            return Report.from_row(row)
        return report
