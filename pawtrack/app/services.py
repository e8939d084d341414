"""
Service wiring
Builds the collaborators, flows, and controller from settings.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Any

from pawtrack.accounts.auth_flow import AccountService
from pawtrack.app.controller import HomeController
from pawtrack.backend import Backend, get_backend
from pawtrack.location import DeviceLocation, GeolocationProvider, NominatimGeocoder
from pawtrack.media.capture import FileMediaProvider
from pawtrack.reports.listing import ReportListing
from pawtrack.reports.models import Coordinates
from pawtrack.reports.submission import ReportSubmitter

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything one running app instance needs."""
    backend: Backend
    geolocation: GeolocationProvider
    media: FileMediaProvider
    accounts: AccountService
    listing: ReportListing
    submitter: ReportSubmitter
    home: HomeController


def build_services(
    settings: Optional[Any] = None,
    backend: Optional[Backend] = None,
    geocoder: Optional[Any] = None,
) -> Services:
    """
    Wire the application.

    Args:
        settings: Settings, defaults to the global instance
        backend: Backend collaborators, built from settings if None
        geocoder: Reverse geocoder, Nominatim if None
    """
    if settings is None:
        from pawtrack.core.config import settings

    backend = backend or get_backend(settings)

    initial_fix = None
    if settings.device_latitude is not None and settings.device_longitude is not None:
        initial_fix = Coordinates(settings.device_latitude, settings.device_longitude)

    geolocation = GeolocationProvider(
        device=DeviceLocation(initial_fix),
        geocoder=geocoder or NominatimGeocoder(
            base_url=settings.nominatim_url,
            user_agent=settings.geocoder_user_agent,
            timeout=settings.http_timeout_seconds,
        ),
    )
    media = FileMediaProvider(settings.camera_dir)

    listing = ReportListing(backend.reports)
    submitter = ReportSubmitter(
        storage=backend.storage,
        geolocation=geolocation,
        identity=backend.identity,
        store=backend.reports,
    )

    logger.info("Services initialized")

    return Services(
        backend=backend,
        geolocation=geolocation,
        media=media,
        accounts=AccountService(
            backend.identity,
            backend.profiles,
            password_reset_redirect_url=settings.password_reset_redirect_url,
        ),
        listing=listing,
        submitter=submitter,
        home=HomeController(submitter, listing, geolocation, media),
    )
