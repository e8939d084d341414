"""
Account flows
Sign-in, sign-up with profile creation, and password reset
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any

from pawtrack.core.exceptions import (
    ValidationError,
    PersistenceFailed,
    StoreError,
)
from pawtrack.reports.models import SubmitterCategory, is_member

logger = logging.getLogger(__name__)


class SignUpOutcome(Enum):
    """What happened after a successful sign-up call."""
    CREATED = "created"
    CONFIRMATION_REQUIRED = "confirmation_required"


@dataclass
class SignUpForm:
    """Fields collected by the sign-up screen."""
    email: str
    password: str
    full_name: str
    phone: str
    location: str
    role: str = SubmitterCategory.COMMUNITY.value
    organization: Optional[str] = None

    def profile_row(self, user_id: str) -> Dict[str, Any]:
        """Profile row for a new account. Organization is kept for rescuers only."""
        return {
            "id": user_id,
            "full_name": self.full_name.strip(),
            "email": self.email.strip(),
            "phone": self.phone.strip(),
            "location": self.location.strip(),
            "role": self.role,
            "organization": (
                (self.organization or "").strip() or None
                if self.role == SubmitterCategory.RESCUER.value else None
            ),
        }


class AccountService:
    """
    Account flows on top of the identity provider.

    Input is checked before any provider call; provider failures surface
    as AuthError.
    """

    def __init__(self, identity, profiles, password_reset_redirect_url: Optional[str] = None):
        """
        Initialize account service.

        Args:
            identity: Identity provider
            profiles: Profile table (insert)
            password_reset_redirect_url: Link target in reset emails
        """
        self.identity = identity
        self.profiles = profiles
        self.password_reset_redirect_url = password_reset_redirect_url

    def sign_in(self, email: str, password: str):
        """
        Sign in with email and password.

        Returns:
            Session
        """
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError("Please enter email and password.")

        logger.info(f"Signing in {email}")
        return self.identity.sign_in(email, password)

    def sign_up(self, form: SignUpForm) -> SignUpOutcome:
        """
        Create an account and its profile row.

        The profile is only written when the provider returns a user ID
        right away; accounts awaiting email confirmation get none.
        """
        required = (form.email, form.password, form.full_name, form.phone, form.location)
        if not all((value or "").strip() for value in required):
            raise ValidationError("Please fill out all fields.")

        if not is_member(SubmitterCategory, form.role):
            raise ValidationError(f"Unknown role: {form.role}", field="role")

        user_id = self.identity.sign_up(form.email.strip(), form.password)

        if not user_id:
            logger.info(f"Account for {form.email} awaits email confirmation")
            return SignUpOutcome.CONFIRMATION_REQUIRED

        try:
            self.profiles.insert(form.profile_row(user_id))
        except StoreError as e:
            logger.error(f"Profile insert failed for {user_id}: {e}")
            raise PersistenceFailed(f"Profile error: {e.message}") from e

        logger.info(f"Account created: {user_id} ({form.role})")
        return SignUpOutcome.CREATED

    def request_password_reset(self, email: str) -> None:
        email = (email or "").strip()
        if not email:
            raise ValidationError("Please enter your email address.", field="email")

        self.identity.request_password_reset(email, self.password_reset_redirect_url)

    def sign_out(self) -> None:
        self.identity.sign_out()

    @property
    def current_user(self) -> Optional[str]:
        return self.identity.current_user()
