"""Mini README: Reactive application state for the signed-in user.

Structure:
    * TeamDataState - owns one live subscription per collection, keeps the
      in-memory lists, the current team and sport selection, and exposes
      the create/update/delete actions that write through to the store.

Only this object mutates collections. Readers use the properties, writers
call the actions; the store pushes every change back through the
subscriptions so the in-memory lists always mirror the latest snapshot.

Selection rules:
    * A teams snapshot keeps the current team when it is still present,
      otherwise it restores the saved preference, otherwise the first team.
    * Snapshots are applied in arrival order and always win.
    * Switching to a team that is not in the latest snapshot selects the
      first team of that snapshot instead.
    * With no team selected the filtered views return every row.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from ..configuration import ExpenseSportPolicy
from ..identity import AuthUser, NotAuthenticatedError, Session
from ..logging_utils import get_logger
from ..preferences import CURRENT_SPORT_KEY, CURRENT_TEAM_KEY, PreferenceStore
from ..repository import CollectionAPI, EntityNotFoundError, TeamBudgetRepository
from ..sports import REGISTRY, SportRegistry
from ..store import Subscription
from ..validation import (
    ValidationResult,
    validate_expense,
    validate_payment,
    validate_player,
    validate_team,
)

LOGGER = get_logger(__name__)

Row = Dict[str, Any]
StateListener = Callable[["TeamDataState"], None]

COLLECTIONS = ("teams", "players", "expenses", "payments")


def _as_list(rows: Mapping[str, Mapping[str, Any]]) -> List[Row]:
    """Convert a keyed snapshot into a list in stored order with ids attached."""

    return [{**row, "id": key} for key, row in rows.items()]


class TeamDataState:
    """Live per-user collections plus the actions that modify them."""

    def __init__(
        self,
        session: Session,
        repository: TeamBudgetRepository,
        preferences: Optional[PreferenceStore] = None,
        *,
        default_sport: str = "badminton",
        expense_sport_policy: ExpenseSportPolicy = ExpenseSportPolicy.CURRENT_SPORT,
        registry: SportRegistry = REGISTRY,
    ) -> None:
        self.session = session
        self.repository = repository
        self.preferences = preferences or PreferenceStore()
        self.registry = registry
        self.expense_sport_policy = ExpenseSportPolicy(expense_sport_policy)

        self.teams: List[Row] = []
        self.all_players: List[Row] = []
        self.all_expenses: List[Row] = []
        self.all_payments: List[Row] = []
        self.current_team_id: Optional[str] = None
        self.current_sport = self.preferences.get(CURRENT_SPORT_KEY) or default_sport
        self.loading = True

        self._user: Optional[AuthUser] = None
        self._generation = 0
        self._subscriptions: List[Subscription] = []
        self._listeners: Dict[int, StateListener] = {}
        self._listener_sequence = 0
        self._session_subscription = session.on_change(self._handle_user)

    # Session lifecycle -------------------------------------------------
    def _handle_user(self, user: Optional[AuthUser]) -> None:
        if user is not None and self._user is not None and user.uid == self._user.uid:
            self._user = user
            return
        self._teardown()
        self._user = user
        if user is None:
            self.loading = False
            self._notify()
            return
        self.loading = True
        self._generation += 1
        generation = self._generation
        LOGGER.info("Loading data for user %s", user.uid)
        for name in COLLECTIONS:
            api: CollectionAPI = getattr(self.repository, name)
            subscription = api.subscribe(
                user.uid,
                self._snapshot_handler(name, generation),
                self._error_handler(name),
            )
            self._subscriptions.append(subscription)

    def _teardown(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []
        self._generation += 1
        self.teams = []
        self.all_players = []
        self.all_expenses = []
        self.all_payments = []
        self.current_team_id = None

    def _snapshot_handler(self, name: str, generation: int) -> Callable[[Dict[str, Row]], None]:
        def handle(rows: Dict[str, Row]) -> None:
            if generation != self._generation:
                LOGGER.debug("Ignoring stale %s snapshot", name)
                return
            if name == "teams":
                self._apply_teams(_as_list(rows))
            else:
                setattr(self, f"all_{name}", _as_list(rows))
                LOGGER.debug("%s loaded: %s", name.capitalize(), len(rows))
            self._notify()

        return handle

    def _error_handler(self, name: str) -> Callable[[Exception], None]:
        def handle(error: Exception) -> None:
            LOGGER.error("Live %s listener failed: %s", name, error)
            if name == "teams":
                self.loading = False
                self._notify()

        return handle

    def _apply_teams(self, teams: List[Row]) -> None:
        self.teams = teams
        self.loading = False
        ids = [team["id"] for team in teams]
        if self.current_team_id in ids:
            return
        saved = self.preferences.get(CURRENT_TEAM_KEY)
        if saved in ids:
            self.current_team_id = saved
            LOGGER.info("Restored team %s from preferences", saved)
        elif ids:
            self.current_team_id = ids[0]
            LOGGER.info("Selected first team %s", ids[0])
        else:
            self.current_team_id = None

    def close(self) -> None:
        """Detach from the session and drop every live subscription."""

        self._session_subscription.unsubscribe()
        self._teardown()
        self._user = None
        self._listeners.clear()

    # Listeners ---------------------------------------------------------
    def add_listener(self, callback: StateListener) -> Subscription:
        """Call ``callback`` after every state change until unsubscribed."""

        self._listener_sequence += 1
        listener_id = self._listener_sequence
        self._listeners[listener_id] = callback
        return Subscription("state", lambda: self._listeners.pop(listener_id, None))

    def _notify(self) -> None:
        for callback in list(self._listeners.values()):
            callback(self)

    # Derived views -----------------------------------------------------
    @property
    def user(self) -> Optional[AuthUser]:
        return self._user

    @property
    def current_team(self) -> Optional[Row]:
        for team in self.teams:
            if team["id"] == self.current_team_id:
                return team
        return None

    def _for_current_team(self, rows: List[Row]) -> List[Row]:
        if self.current_team_id is None:
            return list(rows)
        return [row for row in rows if row.get("teamId") == self.current_team_id]

    @property
    def players(self) -> List[Row]:
        return self._for_current_team(self.all_players)

    @property
    def expenses(self) -> List[Row]:
        return self._for_current_team(self.all_expenses)

    @property
    def payments(self) -> List[Row]:
        return self._for_current_team(self.all_payments)

    @property
    def currency(self) -> str:
        team = self.current_team
        return str(team.get("currency") or "USD") if team else "USD"

    # Selection ---------------------------------------------------------
    def set_current_team(self, team_id: Optional[str]) -> Optional[Row]:
        """Select ``team_id``; unknown ids fall back to the first team."""

        if team_id is None:
            self.current_team_id = None
            self.preferences.remove(CURRENT_TEAM_KEY)
        elif any(team["id"] == team_id for team in self.teams):
            self.current_team_id = team_id
            self.preferences.set(CURRENT_TEAM_KEY, team_id)
        else:
            fallback = self.teams[0]["id"] if self.teams else None
            LOGGER.warning("Team %s is not available; selecting %s", team_id, fallback)
            self.current_team_id = fallback
        LOGGER.info("Current team is now %s", self.current_team_id)
        self._notify()
        return self.current_team

    def set_current_sport(self, sport: Optional[str]) -> str:
        """Remember the sport used for new expenses."""

        if sport:
            self.current_sport = sport
            self.preferences.set(CURRENT_SPORT_KEY, sport)
        else:
            self.current_sport = self.registry.default_key
            self.preferences.remove(CURRENT_SPORT_KEY)
        LOGGER.info("Current sport is now %s", self.current_sport)
        self._notify()
        return self.current_sport

    # Helpers -----------------------------------------------------------
    def _owner(self) -> str:
        if self._user is None:
            raise NotAuthenticatedError("No user logged in")
        return self._user.uid

    @staticmethod
    def _find(rows: List[Row], entity_id: str) -> Optional[Row]:
        for row in rows:
            if row["id"] == entity_id:
                return row
        return None

    def _with_team(self, data: Mapping[str, Any]) -> Row:
        payload = dict(data)
        if not payload.get("teamId") and self.current_team_id is not None:
            payload["teamId"] = self.current_team_id
        return payload

    def _validate_update(
        self,
        rows: List[Row],
        entity_id: str,
        updates: Mapping[str, Any],
        validator: Callable[..., ValidationResult],
        **options: Any,
    ) -> None:
        current = self._find(rows, entity_id)
        if current is None:
            validator(updates, partial=True, **options).raise_for_errors()
        else:
            validator({**current, **updates}, **options).raise_for_errors()

    # Teams -------------------------------------------------------------
    async def create_team(self, data: Mapping[str, Any]) -> Row:
        owner = self._owner()
        validate_team(data).raise_for_errors()
        team = await self.repository.teams.create(owner, data)
        self.set_current_team(team["id"])
        return team

    async def update_team(self, team_id: str, updates: Mapping[str, Any]) -> None:
        owner = self._owner()
        self._validate_update(self.teams, team_id, updates, validate_team)
        await self.repository.teams.update(owner, team_id, updates)
        if team_id == self.current_team_id:
            self._notify()

    async def delete_team(self, team_id: str) -> None:
        """Delete a team; its players, expenses and payments are left in place."""

        owner = self._owner()
        await self.repository.teams.delete(owner, team_id)
        if team_id == self.current_team_id:
            remaining = [team["id"] for team in self.teams if team["id"] != team_id]
            self.current_team_id = remaining[0] if remaining else None
            self._notify()

    # Players -----------------------------------------------------------
    async def create_player(self, data: Mapping[str, Any]) -> Row:
        owner = self._owner()
        payload = self._with_team(data)
        validate_player(payload).raise_for_errors()
        return await self.repository.players.create(owner, payload)

    async def update_player(self, player_id: str, updates: Mapping[str, Any]) -> None:
        owner = self._owner()
        self._validate_update(self.all_players, player_id, updates, validate_player)
        await self.repository.players.update(owner, player_id, updates)

    async def delete_player(self, player_id: str) -> None:
        await self.repository.players.delete(self._owner(), player_id)

    # Expenses ----------------------------------------------------------
    def _expense_sport(self, payload: Mapping[str, Any]) -> str:
        if payload.get("sport"):
            return str(payload["sport"])
        if self.expense_sport_policy is ExpenseSportPolicy.TEAM_SPORT:
            team = self._find(self.teams, str(payload.get("teamId") or ""))
            if team and team.get("sportType"):
                return str(team["sportType"])
        return self.current_sport

    async def create_expense(self, data: Mapping[str, Any]) -> Row:
        owner = self._owner()
        payload = self._with_team(data)
        payload["sport"] = self._expense_sport(payload)
        validate_expense(payload, registry=self.registry).raise_for_errors()
        return await self.repository.expenses.create(owner, payload)

    async def update_expense(self, expense_id: str, updates: Mapping[str, Any]) -> None:
        owner = self._owner()
        self._validate_update(
            self.all_expenses, expense_id, updates, validate_expense, registry=self.registry
        )
        await self.repository.expenses.update(owner, expense_id, updates)

    async def delete_expense(self, expense_id: str) -> None:
        await self.repository.expenses.delete(self._owner(), expense_id)

    # Payments ----------------------------------------------------------
    async def create_payment(self, data: Mapping[str, Any]) -> Row:
        owner = self._owner()
        payload = self._with_team(data)
        validate_payment(payload).raise_for_errors()
        duplicate = self.find_duplicate_payment(
            str(payload["playerId"]), str(payload["month"]), payload["year"]
        )
        if duplicate is not None:
            LOGGER.warning(
                "Player %s already has payment %s for %s %s",
                payload["playerId"],
                duplicate["id"],
                payload["month"],
                payload["year"],
            )
        return await self.repository.payments.create(owner, payload)

    async def update_payment(self, payment_id: str, updates: Mapping[str, Any]) -> None:
        owner = self._owner()
        self._validate_update(self.all_payments, payment_id, updates, validate_payment)
        await self.repository.payments.update(owner, payment_id, updates)

    async def delete_payment(self, payment_id: str) -> None:
        await self.repository.payments.delete(self._owner(), payment_id)

    def find_duplicate_payment(
        self,
        player_id: str,
        month: str,
        year: Any,
        exclude_id: Optional[str] = None,
    ) -> Optional[Row]:
        """Return an existing payment for the same player and period, if any."""

        for payment in self.all_payments:
            if payment["id"] == exclude_id:
                continue
            if (
                payment.get("playerId") == player_id
                and payment.get("month") == month
                and str(payment.get("year")) == str(year)
            ):
                return payment
        return None

    def get_entity(self, collection: str, entity_id: str) -> Row:
        """Look up a loaded row, raising ``EntityNotFoundError`` when absent."""

        rows = self.teams if collection == "teams" else getattr(self, f"all_{collection}")
        row = self._find(rows, entity_id)
        if row is None:
            raise EntityNotFoundError(collection, entity_id)
        return row
