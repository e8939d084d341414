"""
PawTrack - REST API

FastAPI application hosting the home screen (report map/list, report
submission) and the account screens of the stray animal reporting app.

Run with: uvicorn pawtrack.api.main:app --reload
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional, List

from fastapi import FastAPI, HTTPException, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from pawtrack.accounts.auth_flow import SignUpForm, SignUpOutcome
from pawtrack.app.services import Services, build_services
from pawtrack.core.constants import STATUS_LABELS
from pawtrack.core.exceptions import (
    PawTrackError,
    ValidationError,
    AuthError,
    CaptureError,
    LocationError,
    UploadFailed,
    PersistenceFailed,
    FetchError,
)
from pawtrack.core.logging import setup_logging
from pawtrack.media.capture import LocalImageHandle
from pawtrack.visualization.map_generator import create_report_map

VERSION = "0.1.0"

logger = setup_logging()


# Global instance for the stateful home screen
_services: Services = build_services()


def get_services() -> Services:
    return _services


@asynccontextmanager
async def lifespan(app: FastAPI):
    services = get_services()
    services.home.mount()
    yield
    services.home.unmount()


app = FastAPI(
    title="PawTrack",
    description="Report and track stray animals on a map or list",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Pydantic Models
# ============================================================================

class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    version: str
    timestamp: str
    backend: str


class SignInRequest(BaseModel):
    email: str = ""
    password: str = ""


class SignUpRequest(BaseModel):
    email: str = ""
    password: str = ""
    full_name: str = ""
    phone: str = ""
    location: str = ""
    role: str = Field(default="community", pattern="^(community|rescuer)$")
    organization: Optional[str] = None


class PasswordResetRequest(BaseModel):
    email: str = ""


class SessionResponse(BaseModel):
    user_id: str
    email: Optional[str]


class MessageResponse(BaseModel):
    message: str


class SignUpResponse(BaseModel):
    outcome: str
    message: str


class CategoryRequest(BaseModel):
    category: str


class ViewModeRequest(BaseModel):
    view_mode: str


class LocationRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class DraftUpdateRequest(BaseModel):
    animal_type: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


class ReportResponse(BaseModel):
    """Stray report."""
    id: Optional[str]
    submitter_id: Optional[str]
    photo_url: Optional[str]
    animal_type: Optional[str]
    description: str
    location_lat: float
    location_lng: float
    location_address: str
    status: Optional[str]
    submitter_category: Optional[str]
    created_at: Optional[str]


class DraftResponse(BaseModel):
    photo: Optional[str]
    animal_type: str
    description: str
    status: str


class HomeStateResponse(BaseModel):
    """Home screen state."""
    active_category: str
    view_mode: str
    draft: DraftResponse
    modal_open: bool
    loading: bool
    current_location: Optional[dict]
    status_counts: dict
    visible_reports: List[ReportResponse]
    error_message: Optional[str]
    notice: Optional[str]


class ReportListResponse(BaseModel):
    count: int
    category: str
    status_counts: dict
    reports: List[ReportResponse]


class ReportStatsResponse(BaseModel):
    status_counts: dict
    labels: dict


# ============================================================================
# Helper Functions
# ============================================================================

def http_error(error: PawTrackError) -> HTTPException:
    """Map an application error onto an HTTP error."""
    if isinstance(error, ValidationError):
        status_code = 422
    elif isinstance(error, AuthError):
        status_code = 401
    elif isinstance(error, (CaptureError, LocationError)):
        status_code = 400
    elif isinstance(error, (UploadFailed, PersistenceFailed, FetchError)):
        status_code = 502
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail=error.message)


def home_state() -> HomeStateResponse:
    return HomeStateResponse.model_validate(get_services().home.state.to_dict())


def home_state_or_error(ok: bool, status_code: int = 422) -> HomeStateResponse:
    """Current state, or an error carrying the recorded message if the action failed."""
    if not ok:
        raise HTTPException(status_code=status_code, detail=get_services().home.state.error_message)
    return home_state()


# ============================================================================
# System Routes
# ============================================================================

@app.get("/", response_class=HTMLResponse)
async def root():
    """Welcome page."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>PawTrack</title>
        <style>
            body { font-family: Arial; max-width: 900px; margin: 50px auto; padding: 20px; background: #f4f7fb; color: #333; }
            h1 { color: #00a573; }
            code { background: #e0f7fa; padding: 2px 8px; border-radius: 4px; }
        </style>
    </head>
    <body>
        <h1>🐾 PawTrack</h1>
        <p>Helping animals find safety.</p>
        <ul>
            <li><a href="/docs">Swagger UI - Interactive API Documentation</a></li>
            <li><a href="/api/v1/map/reports">Report map</a></li>
            <li><a href="/health">Health Check</a></li>
        </ul>
    </body>
    </html>
    """


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check API health status."""
    backend = get_services().backend
    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        backend=type(backend.reports).__name__,
    )


# ============================================================================
# Account Routes
# ============================================================================

@app.post("/api/v1/auth/sign-in", response_model=SessionResponse, tags=["Accounts"])
def sign_in(request: SignInRequest):
    """Sign in and load reports."""
    services = get_services()
    try:
        session = services.accounts.sign_in(request.email, request.password)
    except PawTrackError as e:
        raise http_error(e)

    services.home.refresh()
    return SessionResponse(user_id=session.user_id, email=session.email)


@app.post("/api/v1/auth/sign-up", response_model=SignUpResponse, tags=["Accounts"])
def sign_up(request: SignUpRequest):
    """Create an account with its profile."""
    form = SignUpForm(**request.model_dump())
    try:
        outcome = get_services().accounts.sign_up(form)
    except PawTrackError as e:
        raise http_error(e)

    if outcome == SignUpOutcome.CONFIRMATION_REQUIRED:
        message = "Please check your email to confirm your account."
    else:
        message = "Account created successfully."
    return SignUpResponse(outcome=outcome.value, message=message)


@app.post("/api/v1/auth/password-reset", response_model=MessageResponse, tags=["Accounts"])
def password_reset(request: PasswordResetRequest):
    """Send a password reset link."""
    try:
        get_services().accounts.request_password_reset(request.email)
    except PawTrackError as e:
        raise http_error(e)

    return MessageResponse(
        message="If this email is registered, a password reset link has been sent."
    )


@app.post("/api/v1/auth/sign-out", response_model=MessageResponse, tags=["Accounts"])
def sign_out():
    get_services().accounts.sign_out()
    return MessageResponse(message="Signed out.")


# ============================================================================
# Home Routes
# ============================================================================

@app.get("/api/v1/home", response_model=HomeStateResponse, tags=["Home"])
def get_home():
    """Current home screen state."""
    return home_state()


@app.put("/api/v1/home/category", response_model=HomeStateResponse, tags=["Home"])
def set_category(request: CategoryRequest):
    """Switch between community and rescuer reports."""
    ok = get_services().home.select_category(request.category)
    return home_state_or_error(ok)


@app.put("/api/v1/home/view-mode", response_model=HomeStateResponse, tags=["Home"])
def set_view_mode(request: ViewModeRequest):
    """Switch between map and list."""
    ok = get_services().home.select_view_mode(request.view_mode)
    return home_state_or_error(ok)


@app.put("/api/v1/home/location", response_model=HomeStateResponse, tags=["Home"])
def set_location(request: LocationRequest):
    """Receive a device position fix."""
    services = get_services()
    try:
        services.geolocation.device.update(request.latitude, request.longitude)
    except LocationError as e:
        raise http_error(e)

    located = services.home.locate()
    return home_state_or_error(located is not None, status_code=400)


@app.post("/api/v1/home/modal", response_model=HomeStateResponse, tags=["Home"])
def open_report_form():
    get_services().home.open_modal()
    return home_state()


@app.delete("/api/v1/home/modal", response_model=HomeStateResponse, tags=["Home"])
def cancel_report_form():
    """Close the report form and discard the draft."""
    get_services().home.close_modal()
    return home_state()


@app.patch("/api/v1/home/draft", response_model=HomeStateResponse, tags=["Home"])
def update_draft(request: DraftUpdateRequest):
    ok = get_services().home.update_draft(
        animal_type=request.animal_type,
        description=request.description,
        status=request.status,
    )
    return home_state_or_error(ok)


@app.post("/api/v1/home/draft/photo", response_model=HomeStateResponse, tags=["Home"])
async def attach_draft_photo(photo: UploadFile = File(...)):
    """Attach an uploaded photo to the draft."""
    data = await photo.read()
    try:
        handle = LocalImageHandle.from_upload(photo.filename, data, photo.content_type)
    except CaptureError as e:
        raise http_error(e)

    get_services().home.attach_photo(handle)
    return home_state()


@app.post("/api/v1/home/draft/photo/camera", response_model=HomeStateResponse, tags=["Home"])
def attach_camera_photo():
    """Attach the latest camera capture to the draft."""
    ok = get_services().home.capture_photo()
    return home_state_or_error(ok, status_code=400)


@app.post("/api/v1/home/submit", response_model=ReportResponse, tags=["Home"])
def submit_report():
    """Submit the draft report."""
    result = get_services().home.submit()
    if not result.succeeded:
        raise http_error(result.error)
    return ReportResponse.model_validate(result.report.to_dict())


@app.post("/api/v1/home/refresh", response_model=HomeStateResponse, tags=["Home"])
def refresh_home():
    """
    Reload reports.

    A failed reload keeps the previous reports and sets error_message.
    """
    get_services().home.refresh()
    return home_state()


# ============================================================================
# Report Routes
# ============================================================================

@app.get("/api/v1/reports", response_model=ReportListResponse, tags=["Reports"])
def list_reports():
    """Reports of the active category, newest first."""
    state = get_services().home.state
    reports = state.visible_reports
    return ReportListResponse(
        count=len(reports),
        category=state.active_category,
        status_counts=dict(state.snapshot.status_counts),
        reports=[ReportResponse.model_validate(r.to_dict()) for r in reports],
    )


@app.get("/api/v1/reports/stats", response_model=ReportStatsResponse, tags=["Reports"])
def get_report_stats():
    """Status counters across all reports."""
    try:
        counts = get_services().listing.fetch_status_counts()
    except PawTrackError as e:
        raise http_error(e)

    return ReportStatsResponse(status_counts=dict(counts), labels=STATUS_LABELS)


# ============================================================================
# Map Routes
# ============================================================================

@app.get("/api/v1/map/reports", response_class=HTMLResponse, tags=["Map"])
def get_reports_map():
    """Map of the active category's reports."""
    state = get_services().home.state
    center = (
        (state.current_location.lat, state.current_location.lng)
        if state.current_location else None
    )
    report_map = create_report_map(
        list(state.visible_reports),
        center=center,
        title=f"PawTrack - {state.active_category.title()} Reports",
    )
    return report_map._repr_html_()


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    from pawtrack.core.config import settings

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
