"""
PawTrack - Accounts Module
Sign-in, sign-up, and password reset.
"""

from pawtrack.accounts.auth_flow import (
    AccountService,
    SignUpForm,
    SignUpOutcome,
)

__all__ = [
    "AccountService",
    "SignUpForm",
    "SignUpOutcome",
]
