"""Mini README: Realtime document store package.

``base`` defines the store interface and snapshot types; ``memory`` provides
the in-process implementation used by the service and the test-suite.
"""

from .base import (
    DocumentStore,
    PermissionDeniedError,
    Snapshot,
    StoreError,
    Subscription,
    join_path,
    split_path,
)
from .memory import InMemoryDocumentStore, PushIdGenerator

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "PermissionDeniedError",
    "PushIdGenerator",
    "Snapshot",
    "StoreError",
    "Subscription",
    "join_path",
    "split_path",
]
