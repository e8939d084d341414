"""
In-memory backend
Stands in for Supabase when it is not configured (local runs, tests).
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Tuple

from pawtrack.backend.auth_client import Session
from pawtrack.backend.storage_client import make_object_key
from pawtrack.core.exceptions import AuthError

logger = logging.getLogger(__name__)


class InMemoryIdentityProvider:
    """
    Identity provider keeping accounts in a dict.

    Accounts are confirmed immediately unless require_confirmation is set.
    """

    def __init__(self, require_confirmation: bool = False):
        self.require_confirmation = require_confirmation
        self._accounts: Dict[str, Tuple[str, str]] = {}
        self._session: Optional[Session] = None
        self.reset_requests: List[str] = []
        logger.info("In-memory identity provider initialized")

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    def current_user(self) -> Optional[str]:
        return self._session.user_id if self._session else None

    def sign_up(self, email: str, password: str) -> Optional[str]:
        if email in self._accounts:
            raise AuthError("User already registered")

        user_id = str(uuid.uuid4())
        self._accounts[email] = (password, user_id)

        if self.require_confirmation:
            return None

        self._session = self._new_session(user_id, email)
        return user_id

    def sign_in(self, email: str, password: str) -> Session:
        account = self._accounts.get(email)
        if account is None or account[0] != password:
            raise AuthError("Invalid login credentials")

        self._session = self._new_session(account[1], email)
        return self._session

    def request_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        self.reset_requests.append(email)
        logger.info(f"[MEMORY AUTH] Password reset for {email}")

    def sign_out(self) -> None:
        self._session = None

    def _new_session(self, user_id: str, email: str) -> Session:
        return Session(access_token=uuid.uuid4().hex, user_id=user_id, email=email)


class InMemoryTable:
    """Rows kept in insertion order; the store assigns id and created_at."""

    def __init__(self, table: str):
        self.table = table
        self.rows: List[Dict[str, Any]] = []

    def insert(self, row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.rows.append(stored)
        return dict(stored)


class InMemoryReportStore(InMemoryTable):
    """Report table with the same read contract as ReportStore."""

    def __init__(self, table: str = "reports"):
        super().__init__(table)

    def list_all(
        self,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        # Ties keep insertion order, newest insert first when descending
        indexed = list(enumerate(self.rows))
        indexed.sort(key=lambda item: (item[1].get(order_by) or "", item[0]), reverse=descending)
        return [dict(row) for _, row in indexed]

    def list_statuses(self) -> List[str]:
        return [row.get("status") for row in self.rows]


class InMemoryProfileStore(InMemoryTable):
    """Profile table."""

    def __init__(self, table: str = "profiles"):
        super().__init__(table)


class InMemoryObjectStorage:
    """Object storage keeping uploads in a dict."""

    def __init__(self, bucket: str = "report-photos"):
        self.bucket = bucket
        self.objects: Dict[str, Tuple[bytes, str]] = {}

    def upload(self, data: bytes, mime_type: str, object_key: Optional[str] = None) -> str:
        key = object_key or make_object_key(mime_type)
        self.objects[key] = (data, mime_type)
        return key

    def public_url(self, object_key: str) -> str:
        return f"memory://{self.bucket}/{object_key}"
