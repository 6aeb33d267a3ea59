"""Mini README: Identity provider boundary.

Structure:
    * AuthUser - the signed-in user as seen by the rest of the application.
    * AuthError / NotAuthenticatedError - failures carrying provider codes.
    * describe_auth_error - human readable message per known code.
    * IdentityProvider - abstract sign-in service the session wraps.

Providers report failures with ``auth/...`` codes. The web layer turns those
codes into messages through ``describe_auth_error`` which falls back to a
generic message for codes it does not know.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..store import Subscription

AUTH_ERROR_MESSAGES: Dict[str, str] = {
    "auth/invalid-email": "Please enter a valid email address.",
    "auth/user-not-found": "No account found with this email address.",
    "auth/wrong-password": "Incorrect password. Please try again.",
    "auth/email-already-in-use": "An account with this email already exists.",
    "auth/weak-password": "Password should be at least 6 characters.",
    "auth/password-too-long": "Password should be at most 72 bytes.",
    "auth/requires-recent-login": "Please sign in again before making this change.",
    "auth/too-many-requests": "Too many attempts. Please try again later.",
    "auth/network-request-failed": "Network error. Please check your connection.",
    "auth/no-current-user": "No user logged in.",
}
FALLBACK_AUTH_MESSAGE = "An unexpected error occurred. Please try again."


def describe_auth_error(code: Optional[str]) -> str:
    return AUTH_ERROR_MESSAGES.get(code or "", FALLBACK_AUTH_MESSAGE)


class AuthError(Exception):
    """Failure reported by the identity provider."""

    def __init__(self, code: str, detail: Optional[str] = None) -> None:
        super().__init__(detail or describe_auth_error(code))
        self.code = code

    @property
    def message(self) -> str:
        return describe_auth_error(self.code)

    @property
    def requires_recent_login(self) -> bool:
        return self.code == "auth/requires-recent-login"


class NotAuthenticatedError(AuthError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__("auth/no-current-user", detail)


@dataclass(frozen=True, slots=True)
class AuthUser:
    uid: str
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {
            "uid": self.uid,
            "email": self.email,
            "displayName": self.display_name,
            "photoURL": self.photo_url,
        }


AuthStateCallback = Callable[[Optional[AuthUser]], None]


class IdentityProvider(ABC):
    """Sign-in service consumed by ``Session``."""

    @property
    @abstractmethod
    def current_user(self) -> Optional[AuthUser]:
        """The signed-in user, if any."""

    @abstractmethod
    def on_auth_state_change(self, callback: AuthStateCallback) -> Subscription:
        """Deliver the current user now and after every sign-in or sign-out."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthUser:
        """Sign in with email and password."""

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> AuthUser:
        """Create an account and sign it in."""

    @abstractmethod
    async def sign_out(self) -> None:
        """Sign out the current user."""

    @abstractmethod
    async def update_profile(
        self, *, display_name: Optional[str] = None, photo_url: Optional[str] = None
    ) -> AuthUser:
        """Change display attributes of the current user."""

    @abstractmethod
    async def update_password(self, new_password: str) -> None:
        """Change the password; needs a recent sign-in."""

    @abstractmethod
    async def update_email(self, new_email: str) -> AuthUser:
        """Change the sign-in email; needs a recent sign-in."""

    @abstractmethod
    async def delete_account(self) -> None:
        """Delete the current account; needs a recent sign-in."""

    @abstractmethod
    async def reauthenticate(self, password: str) -> None:
        """Confirm the current user's password to refresh the sign-in time."""

    @abstractmethod
    async def send_password_reset(self, email: str) -> None:
        """Start the password reset flow for ``email``."""
