"""Mini README: Abstract interface of the realtime document store.

Structure:
    * StoreError / PermissionDeniedError - failures surfaced by store calls.
    * Snapshot - immutable view of the value at a path.
    * Subscription - idempotent unsubscribe handle for live listeners.
    * DocumentStore - abstract hierarchical key/value tree with live listeners.
    * split_path / join_path - path helpers shared by implementations.

The store holds a JSON-like tree addressed by slash separated paths. Writes
are coroutines and may fail; listeners receive the full value at their path
every time anything beneath (or above) it changes.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

_FORBIDDEN_KEY_CHARACTERS = set(".#$[]")


class StoreError(RuntimeError):
    """Raised when a store operation cannot be completed."""


class PermissionDeniedError(StoreError):
    """Raised when access rules reject a read or write."""

    def __init__(self, operation: str, path: str) -> None:
        super().__init__(f"Permission denied: {operation} at '{path}'")
        self.operation = operation
        self.path = path


def split_path(path: str) -> List[str]:
    """Split ``path`` into segments, rejecting keys the tree cannot hold."""

    segments = [segment for segment in path.strip("/").split("/") if segment]
    for segment in segments:
        if _FORBIDDEN_KEY_CHARACTERS & set(segment):
            raise ValueError(f"Invalid key '{segment}' in path '{path}'")
    return segments


def join_path(*parts: str) -> str:
    return "/".join(segment for part in parts for segment in split_path(part))


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Value stored at ``path`` when the snapshot was taken."""

    path: str
    value: Any

    @property
    def key(self) -> Optional[str]:
        segments = split_path(self.path)
        return segments[-1] if segments else None

    def exists(self) -> bool:
        return self.value is not None

    def val(self) -> Any:
        """Return a copy of the stored value so callers cannot mutate the snapshot."""

        return copy.deepcopy(self.value)

    def children(self) -> Dict[str, Any]:
        """Return child values keyed by id, preserving stored order."""

        if isinstance(self.value, Mapping):
            return {key: copy.deepcopy(child) for key, child in self.value.items()}
        return {}


ValueCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[Exception], None]


class Subscription:
    """Handle returned by ``subscribe``; calling it detaches the listener once."""

    def __init__(self, path: str, detach: Callable[[], None]) -> None:
        self.path = path
        self._detach: Optional[Callable[[], None]] = detach

    @property
    def active(self) -> bool:
        return self._detach is not None

    def unsubscribe(self) -> None:
        if self._detach is None:
            LOGGER.debug("Listener at '%s' already detached", self.path)
            return
        detach, self._detach = self._detach, None
        detach()
        LOGGER.debug("Detached listener at '%s'", self.path)

    __call__ = unsubscribe


class DocumentStore(ABC):
    """Hierarchical document tree with live listeners."""

    @abstractmethod
    async def get(self, path: str) -> Snapshot:
        """Read the value at ``path``."""

    @abstractmethod
    async def set(self, path: str, value: Any) -> None:
        """Replace the value at ``path``; ``None`` removes it."""

    @abstractmethod
    async def update(self, path: str, values: Mapping[str, Any]) -> None:
        """Merge ``values`` into the children of ``path``; ``None`` children are removed."""

    @abstractmethod
    async def remove(self, path: str) -> None:
        """Delete the value at ``path`` and everything beneath it."""

    @abstractmethod
    def push_key(self, path: str) -> str:
        """Generate a unique, chronologically ordered child key for ``path``."""

    @abstractmethod
    def subscribe(
        self,
        path: str,
        on_value: ValueCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        """Deliver the current value at ``path`` now and after every change."""
