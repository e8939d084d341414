"""
Supabase Auth (GoTrue) client
Email/password sign-in, sign-up, password reset, and the current session
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

import httpx

from pawtrack.backend.base import SupabaseClient, error_message
from pawtrack.core.exceptions import AuthError

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Signed-in user session."""
    access_token: str
    user_id: str
    email: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def from_response(cls, body: Dict[str, Any]) -> "Session":
        user = body.get("user") or {}
        expires_in = body.get("expires_in")

        return cls(
            access_token=body["access_token"],
            user_id=user["id"],
            email=user.get("email"),
            refresh_token=body.get("refresh_token"),
            expires_at=(
                datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))
                if expires_in else None
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }


class SupabaseAuthClient(SupabaseClient):
    """
    Identity provider backed by Supabase Auth.

    Keeps the session of the signed-in user in memory.
    """

    def __init__(self, url: str, anon_key: str, **kwargs):
        super().__init__(url, anon_key, **kwargs)
        self._session: Optional[Session] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    def current_user(self) -> Optional[str]:
        """ID of the signed-in user, None when signed out."""
        return self._session.user_id if self._session else None

    def sign_in(self, email: str, password: str) -> Session:
        """
        Sign in with email and password.

        Raises:
            AuthError: credentials rejected or auth service unreachable
        """
        body = self._post(
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

        try:
            self._session = Session.from_response(body)
        except (KeyError, TypeError, ValueError) as e:
            raise AuthError(f"Unexpected sign-in response: {e}") from e

        logger.info(f"Signed in as {self._session.user_id}")
        return self._session

    def sign_up(self, email: str, password: str) -> Optional[str]:
        """
        Create an account.

        Returns:
            New user ID when a session was issued right away, None when
            the account is waiting for email confirmation
        """
        body = self._post(
            "/auth/v1/signup",
            json={"email": email, "password": password},
        )

        if not body.get("access_token"):
            logger.info(f"Sign-up for {email} pending email confirmation")
            return None

        try:
            self._session = Session.from_response(body)
        except (KeyError, TypeError, ValueError) as e:
            raise AuthError(f"Unexpected sign-up response: {e}") from e

        logger.info(f"Signed up {self._session.user_id}")
        return self._session.user_id

    def request_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Send a password reset link to the email, if registered."""
        params = {"redirect_to": redirect_to} if redirect_to else None
        self._post("/auth/v1/recover", params=params, json={"email": email})
        logger.info("Password reset requested")

    def sign_out(self) -> None:
        """Revoke the session server-side and forget it locally."""
        if not self._session:
            return

        try:
            self._post("/auth/v1/logout")
        except AuthError as e:
            logger.warning(f"Server-side sign-out failed: {e}")
        finally:
            self._session = None

    def _post(
        self,
        path: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            response = self._client.post(
                f"{self.url}{path}",
                params=params,
                json=json,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Auth service unreachable: {e}") from e

        if response.is_error:
            raise AuthError(error_message(response))

        if not response.content:
            return {}

        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
