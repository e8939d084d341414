"""
Tests for the home screen controller and view state transitions
"""
import threading

import pytest
from unittest.mock import MagicMock

import sys
sys.path.insert(0, '.')

from pawtrack.app import state as transitions
from pawtrack.app.controller import HomeController
from pawtrack.app.state import ViewState
from pawtrack.backend import InMemoryObjectStorage
from pawtrack.core.exceptions import CaptureError, StoreError, ValidationError
from pawtrack.location import DeviceLocation, GeolocationProvider
from pawtrack.reports.listing import ReportListing
from pawtrack.reports.models import Coordinates, ReportDraft
from pawtrack.reports.submission import ReportSubmitter, SubmissionStage


class TestViewStateTransitions:
    """Test suite for the pure transition functions."""

    def test_defaults(self):
        """Test initial state."""
        state = ViewState()

        assert state.active_category == "community"
        assert state.view_mode == "map"
        assert state.modal_open is False
        assert state.loading is False
        assert state.draft == ReportDraft()
        assert state.visible_reports == ()

    def test_select_category_is_pure(self):
        """Test transitions return a new state and leave the old one alone."""
        state = ViewState()

        new_state = transitions.select_category(state, "rescuer")

        assert new_state.active_category == "rescuer"
        assert state.active_category == "community"

    def test_select_unknown_category(self):
        with pytest.raises(ValidationError):
            transitions.select_category(ViewState(), "shelter")

    def test_select_unknown_view_mode(self):
        with pytest.raises(ValidationError):
            transitions.select_view_mode(ViewState(), "grid")

    def test_close_modal_discards_draft(self, photo):
        """Test cancel resets the draft."""
        state = transitions.open_modal(ViewState())
        state = transitions.update_draft(state, animal_type="cat", description="Thin cat")
        state = transitions.attach_photo(state, photo)

        state = transitions.close_modal(state)

        assert state.modal_open is False
        assert state.draft == ReportDraft()

    def test_update_draft_keeps_unset_fields(self):
        state = transitions.update_draft(ViewState(), status="critical")
        state = transitions.update_draft(state, description="Hurt leg")

        assert state.draft.status == "critical"
        assert state.draft.description == "Hurt leg"
        assert state.draft.animal_type == "dog"

    def test_update_draft_rejects_unknown_values(self):
        with pytest.raises(ValidationError):
            transitions.update_draft(ViewState(), animal_type="horse")
        with pytest.raises(ValidationError):
            transitions.update_draft(ViewState(), status="adopted")

    def test_submission_succeeded(self, photo):
        """Test success closes the form with a fresh draft and a notice."""
        state = transitions.open_modal(ViewState())
        state = transitions.attach_photo(state, photo)

        state = transitions.submission_succeeded(state)

        assert state.modal_open is False
        assert state.draft == ReportDraft()
        assert state.notice
        assert state.error_message is None

    def test_to_dict(self, location):
        state = transitions.set_location(ViewState(), location)

        data = state.to_dict()

        assert data["current_location"] == {"lat": 10.0, "lng": 20.0}
        assert data["status_counts"] == {"pending": 0, "critical": 0, "rescued": 0, "missing": 0}
        assert data["visible_reports"] == []


class TestHomeController:
    """Test suite for HomeController."""

    @pytest.fixture(autouse=True)
    def setup(self, report_store, object_storage, identity, geolocation, photo, location):
        self.store = report_store
        self.storage = object_storage
        self.identity = identity
        self.geolocation = geolocation
        self.photo = photo
        self.location = location
        self.media = MagicMock()
        self.listing = ReportListing(report_store)
        self.submitter = ReportSubmitter(
            storage=object_storage,
            geolocation=geolocation,
            identity=identity,
            store=report_store,
        )

    def make_controller(self, **kwargs):
        return HomeController(
            kwargs.get("submitter", self.submitter),
            kwargs.get("listing", self.listing),
            kwargs.get("geolocation", self.geolocation),
            self.media,
            initial_state=kwargs.get("initial_state"),
        )

    def test_mount_loads_reports(self):
        """Test mount fetches the listing."""
        controller = self.make_controller()

        result = controller.mount()

        assert result.succeeded
        assert controller.mounted
        assert len(controller.visible_reports) == 3
        assert controller.state.loading is False
        assert controller.state.snapshot.status_counts["pending"] == 2

    def test_category_switch_uses_snapshot(self):
        """Test switching category does not refetch."""
        controller = self.make_controller()
        controller.mount()

        assert controller.select_category("rescuer")

        assert {r.id for r in controller.visible_reports} == {"r4", "r5"}
        self.store.list_all.assert_called_once()

    def test_invalid_category_recorded(self):
        """Test transition errors end up in error_message."""
        controller = self.make_controller()

        assert controller.select_category("shelter") is False

        assert controller.state.active_category == "community"
        assert "shelter" in controller.state.error_message

    def test_view_mode_switch(self):
        controller = self.make_controller()

        assert controller.select_view_mode("list")
        assert controller.state.view_mode == "list"

    def test_refresh_failure_keeps_reports(self):
        """Test a failed refresh keeps the previous reports visible."""
        controller = self.make_controller()
        controller.mount()
        self.store.list_all.side_effect = StoreError("connection reset")

        result = controller.refresh()

        assert not result.succeeded
        assert len(controller.visible_reports) == 3
        assert controller.state.error_message.startswith("Could not load reports")
        assert controller.state.loading is False

    def test_submit_flow(self):
        """Test submit closes the form and reloads the listing."""
        controller = self.make_controller()
        controller.mount()
        assert controller.locate() == self.location
        controller.open_modal()
        controller.attach_photo(self.photo)
        controller.update_draft(animal_type="cat", description="Kitten under a car", status="critical")

        result = controller.submit()

        assert result.succeeded
        state = controller.state
        assert state.modal_open is False
        assert state.draft == ReportDraft()
        assert state.notice
        assert state.loading is False
        assert len(controller.visible_reports) == 4
        assert controller.visible_reports[0].description == "Kitten under a car"
        assert controller.state.snapshot.status_counts["critical"] == 2
        assert self.store.list_all.call_count == 2

    def test_submit_uses_active_category(self):
        controller = self.make_controller()
        controller.mount()
        controller.locate()
        controller.select_category("rescuer")
        controller.attach_photo(self.photo)
        controller.update_draft(description="Dog with collar")

        result = controller.submit()

        assert result.report.submitter_category == "rescuer"
        assert len(controller.visible_reports) == 3

    def test_submit_failure_keeps_draft(self):
        """Test a failed submit keeps the form open with the draft."""
        controller = self.make_controller()
        controller.mount()
        controller.open_modal()
        controller.attach_photo(self.photo)
        controller.update_draft(description="Dog")

        result = controller.submit()

        assert result.stage == SubmissionStage.VALIDATE
        assert controller.state.modal_open is True
        assert controller.state.draft.description == "Dog"
        assert controller.state.error_message
        assert controller.state.loading is False
        self.storage.upload.assert_not_called()

    def test_submit_rejected_while_loading(self):
        """Test a second submission is refused while one is in flight."""
        submitter = MagicMock()
        controller = self.make_controller(
            submitter=submitter,
            initial_state=ViewState(loading=True),
        )

        result = controller.submit()

        assert not result.succeeded
        submitter.submit.assert_not_called()
        assert controller.state.error_message

    def test_loading_cleared_when_flow_raises(self):
        """Test loading is reset even if a collaborator raises."""
        listing = MagicMock()
        listing.refresh.side_effect = RuntimeError("boom")
        controller = self.make_controller(listing=listing)

        with pytest.raises(RuntimeError):
            controller.mount()

        assert controller.state.loading is False

    def test_results_discarded_after_unmount(self):
        """Test results arriving after unmount do not touch the state."""
        controller = self.make_controller()
        controller.mount()
        before = controller.state.snapshot

        def unmount_then_fetch(**kwargs):
            controller.unmount()
            return []

        self.store.list_all.side_effect = unmount_then_fetch

        controller.refresh()

        assert controller.state.snapshot is before
        assert controller.state.loading is False

    def test_submission_discarded_after_unmount(self):
        controller = self.make_controller()
        controller.mount()
        controller.locate()
        controller.open_modal()
        controller.attach_photo(self.photo)
        controller.update_draft(description="Dog")
        self.identity.sign_out()
        controller.unmount()

        controller.submit()

        assert controller.state.error_message is None
        assert controller.state.modal_open is True

    def test_locate_without_fix(self):
        """Test missing device location is reported."""
        geolocation = GeolocationProvider(DeviceLocation(), self.geolocation.geocoder)
        controller = self.make_controller(geolocation=geolocation)
        controller.mount()

        assert controller.locate() is None

        assert controller.state.current_location is None
        assert "location" in controller.state.error_message.lower()

    def test_capture_photo(self):
        self.media.capture_from_camera.return_value = self.photo
        controller = self.make_controller()

        assert controller.capture_photo()

        assert controller.state.draft.photo == self.photo

    def test_capture_photo_failure(self):
        self.media.capture_from_camera.side_effect = CaptureError("No photo captured yet.")
        controller = self.make_controller()

        assert controller.capture_photo() is False

        assert controller.state.draft.photo is None
        assert controller.state.error_message == "No photo captured yet."

    def test_pick_photo(self):
        self.media.pick_from_gallery.return_value = self.photo
        controller = self.make_controller()

        assert controller.pick_photo("/tmp/dog.jpg")

        self.media.pick_from_gallery.assert_called_once_with("/tmp/dog.jpg")
        assert controller.state.draft.photo == self.photo

    def test_notice_kept_when_reload_fails(self):
        """Test a saved report keeps its notice even if the reload fails."""
        controller = self.make_controller()
        controller.mount()
        controller.locate()
        controller.attach_photo(self.photo)
        controller.update_draft(description="Dog")
        self.store.list_all.side_effect = StoreError("connection reset")

        result = controller.submit()

        assert result.succeeded
        assert controller.state.notice
        assert controller.state.error_message.startswith("Could not load reports")

    def test_plain_refresh_error_clears_notice(self):
        controller = self.make_controller(initial_state=ViewState(notice="Report submitted."))
        controller.mount()
        self.store.list_all.side_effect = StoreError("connection reset")

        controller.refresh()

        assert controller.state.notice is None


class TestHomeControllerThreads:
    """Test suite for a controller shared between request threads."""

    @pytest.fixture(autouse=True)
    def setup(self, report_store, identity, geolocation, photo):
        self.store = report_store
        self.upload_started = threading.Event()
        self.release_upload = threading.Event()
        real_storage = InMemoryObjectStorage()

        def slow_upload(data, mime_type):
            self.upload_started.set()
            self.release_upload.wait(5)
            return real_storage.upload(data, mime_type)

        self.storage = MagicMock(wraps=real_storage)
        self.storage.upload.side_effect = slow_upload

        listing = ReportListing(report_store)
        submitter = ReportSubmitter(
            storage=self.storage,
            geolocation=geolocation,
            identity=identity,
            store=report_store,
        )
        self.controller = HomeController(submitter, listing, geolocation, MagicMock())
        self.controller.mount()
        self.controller.locate()
        self.controller.attach_photo(photo)
        self.controller.update_draft(description="Dog sleeping under a bench")

    def test_refresh_during_submission(self):
        """Test a refresh cannot clear loading while a submission runs."""
        results = []
        worker = threading.Thread(target=lambda: results.append(self.controller.submit()))
        worker.start()
        assert self.upload_started.wait(5)

        self.controller.refresh()
        loading_during_submit = self.controller.state.loading
        second = self.controller.submit()

        self.release_upload.set()
        worker.join(5)

        assert loading_during_submit is True
        assert not second.succeeded
        assert second.stage == SubmissionStage.VALIDATE
        assert results[0].succeeded
        assert self.storage.upload.call_count == 1
        assert self.store.insert.call_count == 1
        assert self.controller.state.loading is False
