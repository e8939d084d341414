"""
Home screen controller
Owns the view state and runs the report flows on behalf of the UI
"""

import logging
import threading
from contextlib import contextmanager
from typing import Optional, Tuple, Iterator

from pawtrack.app import state as transitions
from pawtrack.app.state import ViewState
from pawtrack.core.exceptions import (
    PawTrackError,
    ValidationError,
    LocationError,
    CaptureError,
)
from pawtrack.reports.listing import ListingResult
from pawtrack.reports.models import Coordinates, Report
from pawtrack.reports.submission import SubmissionResult, SubmissionStage

logger = logging.getLogger(__name__)


class Busy(ValidationError):
    """Another request is still in flight."""


class HomeController:
    """
    Single owner of the home screen state.

    Every PawTrackError raised by a flow is caught here and recorded in
    `error_message`; other exceptions propagate. Results that arrive after
    `unmount()` are discarded instead of being applied.

    Safe to share between threads: state updates are serialized, `loading`
    stays set while any flow is in flight, and only one submission runs
    at a time.
    """

    def __init__(
        self,
        submitter,
        listing,
        geolocation,
        media,
        initial_state: Optional[ViewState] = None,
    ):
        """
        Initialize controller.

        Args:
            submitter: ReportSubmitter
            listing: ReportListing
            geolocation: GeolocationProvider
            media: Media capture provider
            initial_state: Starting state, defaults to ViewState()
        """
        self.submitter = submitter
        self.listing = listing
        self.geolocation = geolocation
        self.media = media

        self._state = initial_state or ViewState()
        self._mounted = False
        self._lock = threading.RLock()
        self._in_flight = 0

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def visible_reports(self) -> Tuple[Report, ...]:
        return self._state.visible_reports

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> ListingResult:
        """Screen shown: load reports."""
        self._mounted = True
        return self.refresh()

    def unmount(self) -> None:
        """Screen gone: later results are dropped."""
        self._mounted = False

    # ------------------------------------------------------------------
    # Pure transitions
    # ------------------------------------------------------------------

    def select_category(self, category: str) -> bool:
        return self._apply(transitions.select_category, category)

    def select_view_mode(self, mode: str) -> bool:
        return self._apply(transitions.select_view_mode, mode)

    def open_modal(self) -> None:
        self._set(transitions.open_modal)

    def close_modal(self) -> None:
        self._set(transitions.close_modal)

    def update_draft(
        self,
        animal_type: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> bool:
        return self._apply(
            transitions.update_draft,
            animal_type=animal_type,
            description=description,
            status=status,
        )

    def attach_photo(self, photo) -> None:
        self._set(transitions.attach_photo, photo)

    # ------------------------------------------------------------------
    # Flows
    # ------------------------------------------------------------------

    def refresh(self) -> ListingResult:
        """Re-fetch reports. On failure the previous snapshot stays on screen."""
        return self._refresh(keep_notice=False)

    def submit(self) -> SubmissionResult:
        """Submit the current draft, then reload the listing on success."""
        try:
            with self._loading(exclusive=True) as current:
                result = self.submitter.submit(
                    current.draft,
                    current.current_location,
                    current.active_category,
                )
        except Busy as e:
            self._set(transitions.report_error, e.message)
            return SubmissionResult.failed(SubmissionStage.VALIDATE, e)

        if self._discarded("submission"):
            return result

        if result.succeeded:
            self._set(transitions.submission_succeeded)
            # Success notice survives a failed reload
            self._refresh(keep_notice=True)
        else:
            self._set(transitions.report_error, result.error.message)

        return result

    def locate(self) -> Optional[Coordinates]:
        """Resolve the device position into the state."""
        try:
            with self._loading():
                coords = self.geolocation.current_coordinates()
        except LocationError as e:
            logger.warning(f"Location unavailable: {e}")
            if not self._discarded("location"):
                self._set(transitions.report_error, e.message)
            return None

        if self._discarded("location"):
            return None

        self._set(transitions.set_location, coords)
        return coords

    def capture_photo(self) -> bool:
        """Attach the latest camera capture to the draft."""
        try:
            photo = self.media.capture_from_camera()
        except CaptureError as e:
            self._set(transitions.report_error, e.message)
            return False

        self.attach_photo(photo)
        return True

    def pick_photo(self, path: str) -> bool:
        """Attach a gallery image to the draft."""
        try:
            photo = self.media.pick_from_gallery(path)
        except CaptureError as e:
            self._set(transitions.report_error, e.message)
            return False

        self.attach_photo(photo)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _refresh(self, keep_notice: bool) -> ListingResult:
        with self._loading():
            result = self.listing.refresh()

        if self._discarded("refresh"):
            return result

        with self._lock:
            self._state = transitions.apply_snapshot(self._state, result.snapshot)
            if result.error:
                self._state = transitions.report_error(
                    self._state, result.error.message, keep_notice=keep_notice
                )

        return result

    @contextmanager
    def _loading(self, exclusive: bool = False) -> Iterator[ViewState]:
        """
        Mark a flow as in flight and yield the state it starts from.

        `loading` is cleared only when the last in-flight flow finishes.
        An exclusive flow is refused with Busy while anything else runs.
        """
        with self._lock:
            if exclusive and self._state.loading:
                raise Busy("Please wait for the current request to finish.")
            self._in_flight += 1
            self._state = transitions.start_loading(self._state)
            started = self._state
        try:
            yield started
        finally:
            with self._lock:
                self._in_flight -= 1
                if not self._in_flight:
                    self._state = transitions.stop_loading(self._state)

    def _discarded(self, what: str) -> bool:
        if self._mounted:
            return False
        logger.warning(f"Screen unmounted, discarding {what} result")
        return True

    def _set(self, transition, *args, **kwargs) -> None:
        with self._lock:
            self._state = transition(self._state, *args, **kwargs)

    def _apply(self, transition, *args, **kwargs) -> bool:
        try:
            self._set(transition, *args, **kwargs)
        except PawTrackError as e:
            self._set(transitions.report_error, e.message)
            return False
        return True
