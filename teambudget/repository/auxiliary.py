"""Mini README: Placeholder collections kept for parity with the data tree.

Structure:
    * SettingsAPI - a single per-user settings document.
    * AttendanceAPI - attendance rows stamped with ``recordedAt``.

Neither collection feeds the dashboards yet; they exist so the tree layout
``users/{uid}/{attendance,settings}`` stays reserved and usable.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from ..constants import USERS_ROOT, Collection
from ..logging_utils import get_logger
from ..store import DocumentStore, Snapshot, Subscription, join_path
from ..utils.timestamps import now_millis
from .base import CollectionAPI

LOGGER = get_logger(__name__)


class SettingsAPI:
    """Read and replace the per-user settings document."""

    def __init__(self, store: DocumentStore, *, clock: Callable[[], int] = now_millis) -> None:
        self.store = store
        self.clock = clock

    def path(self, owner_id: str) -> str:
        if not owner_id:
            raise ValueError("An owner id is required for every data operation")
        return join_path(USERS_ROOT, owner_id, Collection.SETTINGS.value)

    async def save(self, owner_id: str, settings: Mapping[str, Any]) -> Dict[str, Any]:
        payload = {**settings, "updatedAt": self.clock()}
        LOGGER.info("Saving settings for owner %s", owner_id)
        await self.store.set(self.path(owner_id), payload)
        return payload

    async def get(self, owner_id: str) -> Dict[str, Any]:
        value = (await self.store.get(self.path(owner_id))).val()
        return value if isinstance(value, dict) else {}

    def subscribe(self, owner_id: str, on_change: Callable[[Dict[str, Any]], None]) -> Subscription:
        def handle(snapshot: Snapshot) -> None:
            value = snapshot.val()
            on_change(value if isinstance(value, dict) else {})

        return self.store.subscribe(self.path(owner_id), handle)


class AttendanceAPI(CollectionAPI):
    collection = Collection.ATTENDANCE

    def _prepare_create(self, data: Dict[str, Any], now: int) -> Dict[str, Any]:
        data["recordedAt"] = now
        return data

    async def record(self, owner_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        return await self.create(owner_id, data)

    async def fetch_by_player(self, owner_id: str, player_id: str) -> Dict[str, Dict[str, Any]]:
        return await self.fetch_where(owner_id, "playerId", player_id)
