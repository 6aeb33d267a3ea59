"""Mini README: In-process implementation of the realtime document store.

Structure:
    * PushIdGenerator - chronologically sortable, collision resistant keys.
    * InMemoryDocumentStore - dictionary backed tree with live listeners,
      optional access rules and an optional JSON snapshot on disk.

Listeners fire synchronously, on the caller's event loop, right after the
write that changed the value they watch. A listener that raises is logged
and handed its own error callback; the write and the other listeners are
unaffected. Each delivery is a deep copy of the full value at the listener
path, never a diff. When ``persist_path`` is set the whole tree is written
back to disk after each successful write so a restarted service picks up
where it left off.
"""

from __future__ import annotations

import copy
import json
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from .base import (
    DocumentStore,
    ErrorCallback,
    PermissionDeniedError,
    Snapshot,
    StoreError,
    Subscription,
    ValueCallback,
    split_path,
)
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"

AccessRule = Callable[[str, str], bool]
"""``(operation, path) -> allowed`` where operation is ``read`` or ``write``."""


class PushIdGenerator:
    """Generate 20 character keys that sort in creation order."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last_timestamp = 0
        self._last_random: List[int] = [0] * 12

    def __call__(self) -> str:
        timestamp = int(self._clock() * 1000)
        duplicate_time = timestamp <= self._last_timestamp
        if duplicate_time:
            timestamp = self._last_timestamp
            # Increment the random suffix so keys stay strictly increasing.
            index = 11
            while index >= 0 and self._last_random[index] == 63:
                self._last_random[index] = 0
                index -= 1
            if index < 0:
                raise StoreError("Push id space exhausted for this millisecond")
            self._last_random[index] += 1
        else:
            self._last_random = [secrets.randbelow(64) for _ in range(12)]
        self._last_timestamp = timestamp

        prefix_chars = []
        remaining = timestamp
        for _ in range(8):
            prefix_chars.append(PUSH_CHARS[remaining % 64])
            remaining //= 64
        prefix = "".join(reversed(prefix_chars))
        suffix = "".join(PUSH_CHARS[value] for value in self._last_random)
        return prefix + suffix


@dataclass(slots=True)
class _Listener:
    path: str
    segments: List[str]
    on_value: ValueCallback
    on_error: Optional[ErrorCallback]


def _overlaps(first: List[str], second: List[str]) -> bool:
    shortest = min(len(first), len(second))
    return first[:shortest] == second[:shortest]


def _prune(value: Any) -> Any:
    """Drop empty containers and ``None`` leaves the way the tree never stores them."""

    if isinstance(value, Mapping):
        pruned = {}
        for key, child in value.items():
            split_path(str(key))
            cleaned = _prune(child)
            if cleaned is not None:
                pruned[str(key)] = cleaned
        return pruned or None
    if isinstance(value, (list, tuple)):
        items = [_prune(item) for item in value]
        items = [item for item in items if item is not None]
        return items or None
    return value


class InMemoryDocumentStore(DocumentStore):
    """Realtime document tree kept in process memory."""

    def __init__(
        self,
        *,
        persist_path: Optional[Path] = None,
        access_rule: Optional[AccessRule] = None,
        push_id_generator: Optional[Callable[[], str]] = None,
    ) -> None:
        self._root: Dict[str, Any] = {}
        self._listeners: Dict[int, _Listener] = {}
        self._listener_sequence = 0
        self._access_rule = access_rule
        self._push_id = push_id_generator or PushIdGenerator()
        self.persist_path = persist_path
        if persist_path is not None and persist_path.exists():
            loaded = json.loads(persist_path.read_text(encoding="utf-8"))
            if not isinstance(loaded, dict):
                raise StoreError(f"Store snapshot {persist_path} does not hold an object")
            self._root = loaded
        LOGGER.debug(
            "In-memory store initialised (persist_path=%s, top-level keys=%s)",
            persist_path,
            len(self._root),
        )

    # Reading ---------------------------------------------------------
    def _check(self, operation: str, path: str) -> None:
        if self._access_rule is not None and not self._access_rule(operation, path):
            LOGGER.warning("Store rejected %s at '%s'", operation, path)
            raise PermissionDeniedError(operation, path)

    def _read(self, segments: List[str]) -> Any:
        node: Any = self._root
        for segment in segments:
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        return node

    async def get(self, path: str) -> Snapshot:
        segments = split_path(path)
        self._check("read", path)
        return Snapshot(path="/".join(segments), value=copy.deepcopy(self._read(segments)))

    # Writing ---------------------------------------------------------
    def _write(self, segments: List[str], value: Any) -> None:
        if not segments:
            self._root = value if isinstance(value, dict) else {}
            return
        node = self._root
        parents: List[Dict[str, Any]] = []
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                if value is None:
                    return
                child = {}
                node[segment] = child
            parents.append(node)
            node = child
        if value is None:
            node.pop(segments[-1], None)
        else:
            node[segments[-1]] = value
        # Remove parents left empty by a deletion.
        for depth in range(len(segments) - 2, -1, -1):
            container = parents[depth]
            key = segments[depth]
            if container.get(key) == {}:
                del container[key]
            else:
                break

    def _apply(self, path: str, changes: Dict[str, Any]) -> None:
        """Apply ``{absolute_path: value}`` changes and notify affected listeners."""

        self._check("write", path)
        touched = [split_path(change_path) for change_path in changes]
        affected = [
            (listener_id, listener)
            for listener_id, listener in self._listeners.items()
            if any(_overlaps(listener.segments, segments) for segments in touched)
        ]
        before = {
            listener_id: copy.deepcopy(self._read(listener.segments))
            for listener_id, listener in affected
        }
        for change_path, segments in zip(changes, touched):
            self._write(segments, copy.deepcopy(_prune(changes[change_path])))
        self._persist()
        for listener_id, listener in affected:
            if listener_id not in self._listeners:
                continue
            current = self._read(listener.segments)
            if current == before[listener_id]:
                continue
            LOGGER.debug("Notifying listener at '%s'", listener.path)
            try:
                listener.on_value(Snapshot(path=listener.path, value=copy.deepcopy(current)))
            except Exception as exc:
                # The write is committed; remaining listeners are still notified.
                LOGGER.exception("Listener at '%s' failed: %s", listener.path, exc)
                if listener.on_error is not None:
                    listener.on_error(exc)

    async def set(self, path: str, value: Any) -> None:
        segments = split_path(path)
        self._apply(path, {"/".join(segments): value})

    async def update(self, path: str, values: Mapping[str, Any]) -> None:
        base = split_path(path)
        changes: Dict[str, Any] = {}
        for child_path, value in values.items():
            changes["/".join(base + split_path(child_path))] = value
        if changes:
            self._apply(path, changes)

    async def remove(self, path: str) -> None:
        await self.set(path, None)

    def push_key(self, path: str) -> str:
        split_path(path)
        return self._push_id()

    def _persist(self) -> None:
        if self.persist_path is None:
            return
        self.persist_path.parent.mkdir(parents=True, exist_ok=True)
        self.persist_path.write_text(
            json.dumps(self._root, indent=2, ensure_ascii=False), encoding="utf-8"
        )

    # Listening -------------------------------------------------------
    def subscribe(
        self,
        path: str,
        on_value: ValueCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        segments = split_path(path)
        normalised = "/".join(segments)
        try:
            self._check("read", normalised)
        except PermissionDeniedError as error:
            if on_error is None:
                raise
            on_error(error)
            return Subscription(normalised, lambda: None)

        self._listener_sequence += 1
        listener_id = self._listener_sequence
        self._listeners[listener_id] = _Listener(normalised, segments, on_value, on_error)
        LOGGER.debug("Attached listener %s at '%s'", listener_id, normalised)

        def detach() -> None:
            self._listeners.pop(listener_id, None)

        on_value(Snapshot(path=normalised, value=copy.deepcopy(self._read(segments))))
        return Subscription(normalised, detach)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
