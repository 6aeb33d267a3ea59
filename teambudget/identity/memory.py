"""Mini README: In-process identity provider.

Structure:
    * InMemoryIdentityProvider - email/password accounts held in memory with
      bcrypt password hashes, lockout after repeated failures, a recent-login
      window for sensitive changes and a password-reset outbox.

The provider mirrors the behaviour the application expects from a hosted
identity service, including its error codes, so sessions and the web layer
can be exercised without network access.
"""

from __future__ import annotations

import re
import time
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional

import bcrypt

from ..logging_utils import get_logger
from ..store import Subscription
from .base import AuthError, AuthStateCallback, AuthUser, IdentityProvider, NotAuthenticatedError

LOGGER = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# bcrypt only reads the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


@dataclass(slots=True)
class _Account:
    user: AuthUser
    password_hash: bytes

    def set_password(self, password: str, rounds: int) -> None:
        self.password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))

    def check_password(self, password: str) -> bool:
        try:
            return bcrypt.checkpw((password or "").encode("utf-8"), self.password_hash)
        except ValueError:
            return False


class InMemoryIdentityProvider(IdentityProvider):
    """Email/password identity service held in process memory."""

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        recent_login_seconds: float = 300,
        min_password_length: int = 6,
        max_failed_attempts: int = 5,
        lockout_seconds: float = 60,
        bcrypt_rounds: int = 12,
    ) -> None:
        self._clock = clock
        self.recent_login_seconds = recent_login_seconds
        self.min_password_length = min_password_length
        self.max_failed_attempts = max_failed_attempts
        self.lockout_seconds = lockout_seconds
        self.bcrypt_rounds = bcrypt_rounds
        self._accounts: Dict[str, _Account] = {}
        self._current: Optional[_Account] = None
        self._signed_in_at = 0.0
        self._failures: Dict[str, List[float]] = {}
        self._listeners: Dict[int, AuthStateCallback] = {}
        self._listener_sequence = 0
        self.password_reset_outbox: List[str] = []

    # Helpers ---------------------------------------------------------
    @staticmethod
    def _normalise_email(email: str) -> str:
        normalised = (email or "").strip().lower()
        if not EMAIL_PATTERN.match(normalised):
            raise AuthError("auth/invalid-email")
        return normalised

    def _check_password_strength(self, password: str) -> None:
        if len(password or "") < self.min_password_length:
            raise AuthError("auth/weak-password")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise AuthError("auth/password-too-long")

    def _require_current(self) -> _Account:
        if self._current is None:
            raise NotAuthenticatedError()
        return self._current

    def _require_recent_login(self) -> _Account:
        account = self._require_current()
        if self._clock() - self._signed_in_at > self.recent_login_seconds:
            LOGGER.info("Sensitive change for %s needs a fresh sign-in", account.user.uid)
            raise AuthError("auth/requires-recent-login")
        return account

    def _record_failure(self, email: str) -> None:
        self._failures.setdefault(email, []).append(self._clock())

    def _check_lockout(self, email: str) -> None:
        window_start = self._clock() - self.lockout_seconds
        recent = [moment for moment in self._failures.get(email, []) if moment >= window_start]
        self._failures[email] = recent
        if len(recent) >= self.max_failed_attempts:
            raise AuthError("auth/too-many-requests")

    def _set_current(self, account: Optional[_Account]) -> None:
        self._current = account
        self._signed_in_at = self._clock() if account else 0.0
        user = account.user if account else None
        for callback in list(self._listeners.values()):
            callback(user)

    # Public API ------------------------------------------------------
    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._current.user if self._current else None

    def on_auth_state_change(self, callback: AuthStateCallback) -> Subscription:
        self._listener_sequence += 1
        listener_id = self._listener_sequence
        self._listeners[listener_id] = callback
        callback(self.current_user)
        return Subscription("auth", lambda: self._listeners.pop(listener_id, None))

    async def sign_up(self, email: str, password: str) -> AuthUser:
        normalised = self._normalise_email(email)
        if normalised in self._accounts:
            raise AuthError("auth/email-already-in-use")
        self._check_password_strength(password)
        account = _Account(user=AuthUser(uid=uuid.uuid4().hex, email=normalised), password_hash=b"")
        account.set_password(password, self.bcrypt_rounds)
        self._accounts[normalised] = account
        LOGGER.info("Created account %s", account.user.uid)
        self._set_current(account)
        return account.user

    async def sign_in(self, email: str, password: str) -> AuthUser:
        normalised = self._normalise_email(email)
        self._check_lockout(normalised)
        account = self._accounts.get(normalised)
        if account is None:
            raise AuthError("auth/user-not-found")
        if not account.check_password(password):
            self._record_failure(normalised)
            raise AuthError("auth/wrong-password")
        self._failures.pop(normalised, None)
        LOGGER.info("Signed in %s", account.user.uid)
        self._set_current(account)
        return account.user

    async def sign_out(self) -> None:
        if self._current is not None:
            LOGGER.info("Signed out %s", self._current.user.uid)
        self._set_current(None)

    async def update_profile(
        self, *, display_name: Optional[str] = None, photo_url: Optional[str] = None
    ) -> AuthUser:
        account = self._require_current()
        changes = {}
        if display_name is not None:
            changes["display_name"] = display_name.strip() or None
        if photo_url is not None:
            changes["photo_url"] = photo_url.strip() or None
        account.user = replace(account.user, **changes)
        return account.user

    async def update_password(self, new_password: str) -> None:
        account = self._require_recent_login()
        self._check_password_strength(new_password)
        account.set_password(new_password, self.bcrypt_rounds)
        LOGGER.info("Password changed for %s", account.user.uid)

    async def update_email(self, new_email: str) -> AuthUser:
        account = self._require_recent_login()
        normalised = self._normalise_email(new_email)
        if normalised == account.user.email:
            return account.user
        if normalised in self._accounts:
            raise AuthError("auth/email-already-in-use")
        del self._accounts[account.user.email]
        account.user = replace(account.user, email=normalised)
        self._accounts[normalised] = account
        LOGGER.info("Email changed for %s", account.user.uid)
        return account.user

    async def delete_account(self) -> None:
        account = self._require_recent_login()
        del self._accounts[account.user.email]
        LOGGER.info("Deleted account %s", account.user.uid)
        self._set_current(None)

    async def reauthenticate(self, password: str) -> None:
        account = self._require_current()
        if not account.check_password(password):
            raise AuthError("auth/wrong-password")
        self._signed_in_at = self._clock()

    async def send_password_reset(self, email: str) -> None:
        normalised = self._normalise_email(email)
        if normalised not in self._accounts:
            raise AuthError("auth/user-not-found")
        self.password_reset_outbox.append(normalised)
        LOGGER.info("Queued password reset email")
