"""Mini README: Identity subsystem.

``base`` defines the provider interface and error vocabulary, ``memory`` a
self-contained provider, and ``session`` the current-user state consumed by
the data state and the web layer.
"""

from .base import (
    AUTH_ERROR_MESSAGES,
    FALLBACK_AUTH_MESSAGE,
    AuthError,
    AuthUser,
    IdentityProvider,
    NotAuthenticatedError,
    describe_auth_error,
)
from .memory import InMemoryIdentityProvider
from .session import Session

__all__ = [
    "AUTH_ERROR_MESSAGES",
    "AuthError",
    "AuthUser",
    "FALLBACK_AUTH_MESSAGE",
    "IdentityProvider",
    "InMemoryIdentityProvider",
    "NotAuthenticatedError",
    "Session",
    "describe_auth_error",
]
