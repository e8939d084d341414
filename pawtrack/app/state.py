"""
Home screen view state
Immutable state plus pure transition functions. Each transition returns a
new ViewState; nothing here performs I/O.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Dict, Any

from pawtrack.core.exceptions import ValidationError
from pawtrack.reports.models import (
    AnimalType,
    Coordinates,
    ListingSnapshot,
    Report,
    ReportDraft,
    ReportStatus,
    SubmitterCategory,
    ViewMode,
    is_member,
)


@dataclass(frozen=True)
class ViewState:
    """Everything the home screen renders from."""
    active_category: str = SubmitterCategory.COMMUNITY.value
    view_mode: str = ViewMode.MAP.value
    draft: ReportDraft = field(default_factory=ReportDraft)
    modal_open: bool = False
    loading: bool = False
    current_location: Optional[Coordinates] = None
    snapshot: ListingSnapshot = field(default_factory=ListingSnapshot)
    error_message: Optional[str] = None
    notice: Optional[str] = None

    @property
    def visible_reports(self) -> Tuple[Report, ...]:
        """Active category's partition of the last snapshot."""
        return self.snapshot.for_category(self.active_category)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active_category": self.active_category,
            "view_mode": self.view_mode,
            "draft": self.draft.to_dict(),
            "modal_open": self.modal_open,
            "loading": self.loading,
            "current_location": (
                self.current_location.to_dict() if self.current_location else None
            ),
            "status_counts": dict(self.snapshot.status_counts),
            "visible_reports": [r.to_dict() for r in self.visible_reports],
            "error_message": self.error_message,
            "notice": self.notice,
        }


def select_category(state: ViewState, category: str) -> ViewState:
    if not is_member(SubmitterCategory, category):
        raise ValidationError(f"Unknown category: {category}", field="category")
    return replace(state, active_category=category)


def select_view_mode(state: ViewState, mode: str) -> ViewState:
    if not is_member(ViewMode, mode):
        raise ValidationError(f"Unknown view mode: {mode}", field="view_mode")
    return replace(state, view_mode=mode)


def open_modal(state: ViewState) -> ViewState:
    return replace(state, modal_open=True, error_message=None, notice=None)


def close_modal(state: ViewState) -> ViewState:
    """Cancel: hide the form and discard the draft."""
    return replace(state, modal_open=False, draft=ReportDraft(), error_message=None)


def update_draft(
    state: ViewState,
    animal_type: Optional[str] = None,
    description: Optional[str] = None,
    status: Optional[str] = None,
) -> ViewState:
    """Change draft fields; None leaves a field as is."""
    changes: Dict[str, Any] = {}

    if animal_type is not None:
        if not is_member(AnimalType, animal_type):
            raise ValidationError(f"Unknown animal type: {animal_type}", field="animal_type")
        changes["animal_type"] = animal_type

    if status is not None:
        if not is_member(ReportStatus, status):
            raise ValidationError(f"Unknown status: {status}", field="status")
        changes["status"] = status

    if description is not None:
        changes["description"] = description

    return replace(state, draft=replace(state.draft, **changes))


def attach_photo(state: ViewState, photo) -> ViewState:
    return replace(state, draft=replace(state.draft, photo=photo), error_message=None)


def set_location(state: ViewState, location: Coordinates) -> ViewState:
    return replace(state, current_location=location)


def start_loading(state: ViewState) -> ViewState:
    return replace(state, loading=True, error_message=None)


def stop_loading(state: ViewState) -> ViewState:
    return replace(state, loading=False)


def apply_snapshot(state: ViewState, snapshot: ListingSnapshot) -> ViewState:
    return replace(state, snapshot=snapshot)


def report_error(state: ViewState, message: str, keep_notice: bool = False) -> ViewState:
    return replace(
        state,
        error_message=message,
        notice=state.notice if keep_notice else None,
    )


def submission_succeeded(state: ViewState) -> ViewState:
    return replace(
        state,
        modal_open=False,
        draft=ReportDraft(),
        error_message=None,
        notice="Report submitted. Thank you for helping!",
    )
