"""Mini README: Signed-in session state shared by the application.

Structure:
    * Session - tracks the current user and a loading flag, forwards account
      operations to the identity provider and fans auth changes out to
      listeners such as the data state.

``loading`` stays true until the provider reports the initial auth state.
Provider failures are logged with their code and re-raised for the caller
to present.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, Optional, TypeVar

from ..logging_utils import get_logger
from ..store import Subscription
from .base import AuthError, AuthStateCallback, AuthUser, IdentityProvider, NotAuthenticatedError

LOGGER = get_logger(__name__)

T = TypeVar("T")


class Session:
    """Current-user state on top of an ``IdentityProvider``."""

    def __init__(self, provider: IdentityProvider) -> None:
        self.provider = provider
        self.current_user: Optional[AuthUser] = None
        self.loading = True
        self._listeners: Dict[int, AuthStateCallback] = {}
        self._listener_sequence = 0
        self._provider_subscription = provider.on_auth_state_change(self._handle_auth_state)

    def _handle_auth_state(self, user: Optional[AuthUser]) -> None:
        changed = user != self.current_user or self.loading
        self.current_user = user
        self.loading = False
        if not changed:
            return
        LOGGER.debug("Auth state changed: %s", user.uid if user else "signed out")
        for callback in list(self._listeners.values()):
            callback(user)

    def on_change(self, callback: AuthStateCallback) -> Subscription:
        """Register for auth changes; the callback fires at once when state is known."""

        self._listener_sequence += 1
        listener_id = self._listener_sequence
        self._listeners[listener_id] = callback
        if not self.loading:
            callback(self.current_user)
        return Subscription("session", lambda: self._listeners.pop(listener_id, None))

    def require_user(self) -> AuthUser:
        if self.current_user is None:
            raise NotAuthenticatedError()
        return self.current_user

    async def _forward(self, action: str, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await call()
        except AuthError as error:
            LOGGER.warning("%s failed with %s", action, error.code)
            raise

    async def signup(self, email: str, password: str) -> AuthUser:
        return await self._forward("Sign up", lambda: self.provider.sign_up(email, password))

    async def login(self, email: str, password: str) -> AuthUser:
        return await self._forward("Sign in", lambda: self.provider.sign_in(email, password))

    async def logout(self) -> None:
        await self._forward("Sign out", self.provider.sign_out)

    async def update_user_profile(
        self, *, display_name: Optional[str] = None, photo_url: Optional[str] = None
    ) -> AuthUser:
        self.require_user()
        user = await self._forward(
            "Profile update",
            lambda: self.provider.update_profile(display_name=display_name, photo_url=photo_url),
        )
        self.current_user = user
        return user

    async def update_user_password(self, new_password: str) -> None:
        self.require_user()
        await self._forward("Password update", lambda: self.provider.update_password(new_password))

    async def update_user_email(self, new_email: str) -> AuthUser:
        self.require_user()
        user = await self._forward("Email update", lambda: self.provider.update_email(new_email))
        self.current_user = user
        return user

    async def delete_user_account(self) -> None:
        self.require_user()
        await self._forward("Account deletion", self.provider.delete_account)

    async def reauthenticate_user(self, password: str) -> None:
        self.require_user()
        await self._forward("Re-authentication", lambda: self.provider.reauthenticate(password))

    async def reset_password(self, email: str) -> None:
        await self._forward("Password reset", lambda: self.provider.send_password_reset(email))

    def close(self) -> None:
        self._provider_subscription.unsubscribe()
        self._listeners.clear()
