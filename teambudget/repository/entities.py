"""Mini README: Typed adapters for teams, players, expenses and payments.

Structure:
    * TeamsAPI - team rows plus a by-sport query.
    * PlayersAPI - roster rows, ``isActive`` defaulting and roster queries.
    * ExpensesAPI - expense rows whose ``total``/``perPerson`` are always
      recomputed from the sport registry on write.
    * PaymentsAPI - payment rows with status defaults and ``paidAt`` handling.

Team deletion never touches dependent players, expenses or payments; those
rows stay queryable by ``teamId``.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from ..constants import Collection, PaymentStatus
from ..finance.calculations import coerce_count, compute_expense_totals, is_collected, normalise_expense
from ..logging_utils import get_logger
from ..sports import REGISTRY, SportRegistry, coerce_amount
from ..store import DocumentStore, Subscription
from ..utils.timestamps import now_millis
from .base import ChangeCallback, CollectionAPI

LOGGER = get_logger(__name__)


class TeamsAPI(CollectionAPI):
    collection = Collection.TEAMS

    async def fetch_by_sport(self, owner_id: str, sport_type: str) -> Dict[str, Dict[str, Any]]:
        return await self.fetch_where(owner_id, "sportType", sport_type)


class PlayersAPI(CollectionAPI):
    collection = Collection.PLAYERS

    def _prepare_create(self, data: Dict[str, Any], now: int) -> Dict[str, Any]:
        data.setdefault("isActive", True)
        return data

    async def fetch_by_team(self, owner_id: str, team_id: str) -> Dict[str, Dict[str, Any]]:
        return await self.fetch_where(owner_id, "teamId", team_id)

    def subscribe_by_team(self, owner_id: str, team_id: str, on_change: ChangeCallback) -> Subscription:
        return self.subscribe_where(owner_id, "teamId", team_id, on_change)

    def subscribe_active(self, owner_id: str, on_change: ChangeCallback) -> Subscription:
        return self.subscribe_where(owner_id, "isActive", True, on_change)


class ExpensesAPI(CollectionAPI):
    """Expense rows with derived totals."""

    collection = Collection.EXPENSES

    def __init__(
        self,
        store: DocumentStore,
        *,
        registry: SportRegistry = REGISTRY,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        super().__init__(store, clock=clock)
        self.registry = registry

    def _prepare_create(self, data: Dict[str, Any], now: int) -> Dict[str, Any]:
        config = self.registry.get_config(data.get("sport"))
        data.setdefault("sport", config.key)
        data.setdefault("playersCount", 0)
        for cost_field in config.expense_fields:
            data.setdefault(cost_field.key, 0.0)
        prepared = normalise_expense(data, config)
        prepared.update(compute_expense_totals(prepared, config).as_fields())
        return prepared

    def _prepare_update(
        self, current: Mapping[str, Any], updates: Dict[str, Any], now: int
    ) -> Dict[str, Any]:
        merged = {**current, **updates}
        config = self.registry.get_config(merged.get("sport"))
        changes = normalise_expense(updates, config)
        merged.update(changes)
        changes.update(compute_expense_totals(merged, config).as_fields())
        return changes

    async def fetch_by_period(self, owner_id: str, month: str, year: int) -> Dict[str, Dict[str, Any]]:
        rows = await self.fetch_where(owner_id, "month", month)
        return {key: row for key, row in rows.items() if row.get("year") == int(year)}


class PaymentsAPI(CollectionAPI):
    """Payment rows; ``paidAt`` is only set for collected statuses."""

    collection = Collection.PAYMENTS

    def _prepare_create(self, data: Dict[str, Any], now: int) -> Dict[str, Any]:
        data["amount"] = coerce_amount(data.get("amount"))
        if data.get("year") not in (None, ""):
            data["year"] = coerce_count(data["year"])
        data["status"] = data.get("status") or PaymentStatus.PENDING.value
        if is_collected(data["status"]):
            data["paidAt"] = data.get("paidAt") or now
        else:
            data.pop("paidAt", None)
        return data

    def _prepare_update(
        self, current: Mapping[str, Any], updates: Dict[str, Any], now: int
    ) -> Dict[str, Any]:
        if "amount" in updates:
            updates["amount"] = coerce_amount(updates["amount"])
        if updates.get("year") not in (None, ""):
            updates["year"] = coerce_count(updates["year"])
        if "status" in updates:
            if is_collected(updates["status"]):
                updates["paidAt"] = updates.get("paidAt") or current.get("paidAt") or now
            else:
                updates["paidAt"] = None
        return updates

    async def fetch_by_player(self, owner_id: str, player_id: str) -> Dict[str, Dict[str, Any]]:
        return await self.fetch_where(owner_id, "playerId", player_id)

    async def fetch_by_status(self, owner_id: str, status: str) -> Dict[str, Dict[str, Any]]:
        return await self.fetch_where(owner_id, "status", status)

    def subscribe_by_player(self, owner_id: str, player_id: str, on_change: ChangeCallback) -> Subscription:
        return self.subscribe_where(owner_id, "playerId", player_id, on_change)

    def subscribe_by_status(self, owner_id: str, status: str, on_change: ChangeCallback) -> Subscription:
        return self.subscribe_where(owner_id, "status", status, on_change)
