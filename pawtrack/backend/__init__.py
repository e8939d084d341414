"""
PawTrack - Backend Module
Adapters for the hosted backend (auth, relational storage, object storage).
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pawtrack.backend.auth_client import SupabaseAuthClient, Session
from pawtrack.backend.rest_client import ReportStore, ProfileStore, PostgrestTable
from pawtrack.backend.storage_client import SupabaseStorageClient
from pawtrack.backend.memory import (
    InMemoryIdentityProvider,
    InMemoryReportStore,
    InMemoryProfileStore,
    InMemoryObjectStorage,
)

logger = logging.getLogger(__name__)


@dataclass
class Backend:
    """The four backend collaborators, wired to one project."""
    identity: Any
    reports: Any
    profiles: Any
    storage: Any


def get_backend(settings: Optional[Any] = None) -> Backend:
    """
    Build backend collaborators.

    Returns the in-memory backend if Supabase is not configured.
    """
    if settings is None:
        from pawtrack.core.config import settings

    if not settings.supabase_configured:
        logger.warning("Supabase not configured, using in-memory backend")
        return Backend(
            identity=InMemoryIdentityProvider(),
            reports=InMemoryReportStore(settings.reports_table),
            profiles=InMemoryProfileStore(settings.profiles_table),
            storage=InMemoryObjectStorage(settings.storage_bucket),
        )

    common = {
        "timeout": settings.http_timeout_seconds,
    }
    identity = SupabaseAuthClient(settings.supabase_url, settings.supabase_anon_key, **common)

    def token() -> Optional[str]:
        return identity.access_token

    return Backend(
        identity=identity,
        reports=ReportStore(
            settings.supabase_url, settings.supabase_anon_key,
            table=settings.reports_table, session_provider=token, **common
        ),
        profiles=ProfileStore(
            settings.supabase_url, settings.supabase_anon_key,
            table=settings.profiles_table, session_provider=token, **common
        ),
        storage=SupabaseStorageClient(
            settings.supabase_url, settings.supabase_anon_key,
            bucket=settings.storage_bucket, session_provider=token, **common
        ),
    )


__all__ = [
    "Backend",
    "get_backend",
    # Supabase
    "SupabaseAuthClient",
    "Session",
    "ReportStore",
    "ProfileStore",
    "PostgrestTable",
    "SupabaseStorageClient",
    # In-memory
    "InMemoryIdentityProvider",
    "InMemoryReportStore",
    "InMemoryProfileStore",
    "InMemoryObjectStorage",
]
