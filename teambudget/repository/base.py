"""Mini README: Generic per-user collection adapter over the document store.

Structure:
    * EntityNotFoundError - raised when updating a row that does not exist.
    * ChangeCallback - receives the full keyed collection on every change.
    * CollectionAPI - create/get/query/subscribe/update/delete for one
      collection under ``users/{uid}/{collection}``.

Subclasses customise writes through ``_prepare_create`` and
``_prepare_update``. Server-owned fields (``id``, ``createdAt``,
``updatedAt``) are always stamped here and never taken from callers.
Failures from the store are logged and re-raised unchanged.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, Mapping, Optional

from ..constants import USERS_ROOT, Collection
from ..logging_utils import get_logger
from ..store import DocumentStore, Snapshot, StoreError, Subscription, join_path
from ..utils.timestamps import now_millis

LOGGER = get_logger(__name__)

ChangeCallback = Callable[[Dict[str, Dict[str, Any]]], None]
ErrorCallback = Callable[[Exception], None]

SERVER_FIELDS = frozenset({"id", "createdAt", "updatedAt"})


class EntityNotFoundError(KeyError):
    """Raised when an update targets a missing row."""

    def __init__(self, collection: str, entity_id: str) -> None:
        super().__init__(f"{collection} entry {entity_id} not found")
        self.collection = collection
        self.entity_id = entity_id


def _keyed_rows(snapshot: Snapshot) -> Dict[str, Dict[str, Any]]:
    rows: Dict[str, Dict[str, Any]] = {}
    for key, value in snapshot.children().items():
        if isinstance(value, dict):
            rows[key] = value
    return rows


class CollectionAPI:
    """CRUD and live queries for one per-user collection."""

    collection: ClassVar[Collection]

    def __init__(self, store: DocumentStore, *, clock: Callable[[], int] = now_millis) -> None:
        self.store = store
        self.clock = clock

    @property
    def name(self) -> str:
        return self.collection.value

    def path(self, owner_id: str, entity_id: Optional[str] = None) -> str:
        if not owner_id:
            raise ValueError("An owner id is required for every data operation")
        parts = [USERS_ROOT, owner_id, self.name]
        if entity_id is not None:
            if not entity_id:
                raise ValueError(f"A {self.name} id is required")
            parts.append(entity_id)
        return join_path(*parts)

    # Hooks -------------------------------------------------------------
    def _prepare_create(self, data: Dict[str, Any], now: int) -> Dict[str, Any]:
        return data

    def _prepare_update(
        self, current: Mapping[str, Any], updates: Dict[str, Any], now: int
    ) -> Dict[str, Any]:
        return updates

    # Writes ------------------------------------------------------------
    async def create(self, owner_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Store ``data`` under a new id and return the stored entity."""

        collection_path = self.path(owner_id)
        entity_id = self.store.push_key(collection_path)
        now = self.clock()
        payload = {key: value for key, value in data.items() if key not in SERVER_FIELDS}
        payload = self._prepare_create(payload, now)
        payload.update({"id": entity_id, "createdAt": now, "updatedAt": now})
        LOGGER.info("Creating %s entry %s for owner %s", self.name, entity_id, owner_id)
        try:
            await self.store.set(self.path(owner_id, entity_id), payload)
        except StoreError:
            LOGGER.error("Failed to create %s entry for owner %s", self.name, owner_id)
            raise
        return payload

    async def update(self, owner_id: str, entity_id: str, updates: Mapping[str, Any]) -> None:
        """Merge ``updates`` into an existing row and stamp ``updatedAt``."""

        current = await self.get(owner_id, entity_id)
        if current is None:
            raise EntityNotFoundError(self.name, entity_id)
        now = self.clock()
        changes = {key: value for key, value in updates.items() if key not in SERVER_FIELDS}
        changes = self._prepare_update(current, changes, now)
        changes["updatedAt"] = now
        LOGGER.info("Updating %s entry %s (%s)", self.name, entity_id, ", ".join(sorted(changes)))
        try:
            await self.store.update(self.path(owner_id, entity_id), changes)
        except StoreError:
            LOGGER.error("Failed to update %s entry %s", self.name, entity_id)
            raise

    async def delete(self, owner_id: str, entity_id: str) -> None:
        """Remove a row; deleting a missing row is a no-op."""

        path = self.path(owner_id, entity_id)
        LOGGER.info("Deleting %s entry %s", self.name, entity_id)
        try:
            await self.store.remove(path)
        except StoreError:
            LOGGER.error("Failed to delete %s entry %s", self.name, entity_id)
            raise

    # Reads -------------------------------------------------------------
    async def get(self, owner_id: str, entity_id: str) -> Optional[Dict[str, Any]]:
        snapshot = await self.store.get(self.path(owner_id, entity_id))
        value = snapshot.val()
        if not isinstance(value, dict):
            return None
        value["id"] = entity_id
        return value

    async def fetch_all(self, owner_id: str) -> Dict[str, Dict[str, Any]]:
        return _keyed_rows(await self.store.get(self.path(owner_id)))

    async def fetch_where(self, owner_id: str, field: str, value: Any) -> Dict[str, Dict[str, Any]]:
        """Equality query on a child field, in stored order."""

        rows = await self.fetch_all(owner_id)
        return {key: row for key, row in rows.items() if row.get(field) == value}

    def subscribe(
        self,
        owner_id: str,
        on_change: ChangeCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        """Deliver the whole keyed collection now and after every change."""

        path = self.path(owner_id)
        LOGGER.debug("Setting up %s listener at '%s'", self.name, path)

        def handle(snapshot: Snapshot) -> None:
            rows = _keyed_rows(snapshot)
            LOGGER.debug("%s snapshot received - count: %s", self.name.capitalize(), len(rows))
            on_change(rows)

        return self.store.subscribe(path, handle, on_error)

    def subscribe_where(
        self,
        owner_id: str,
        field: str,
        value: Any,
        on_change: ChangeCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        """Live equality query; the callback receives only matching rows."""

        def handle(rows: Dict[str, Dict[str, Any]]) -> None:
            on_change({key: row for key, row in rows.items() if row.get(field) == value})

        return self.subscribe(owner_id, handle, on_error)
