"""Mini README: Store adapter package.

Bundles the typed collection adapters into ``TeamBudgetRepository`` so the
application state can be handed a single object per document store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..sports import REGISTRY, SportRegistry
from ..store import DocumentStore
from ..utils.timestamps import now_millis
from .auxiliary import AttendanceAPI, SettingsAPI
from .base import CollectionAPI, EntityNotFoundError
from .entities import ExpensesAPI, PaymentsAPI, PlayersAPI, TeamsAPI


@dataclass(slots=True)
class TeamBudgetRepository:
    """All collection adapters sharing one store."""

    teams: TeamsAPI
    players: PlayersAPI
    expenses: ExpensesAPI
    payments: PaymentsAPI
    settings: SettingsAPI
    attendance: AttendanceAPI

    @classmethod
    def from_store(
        cls,
        store: DocumentStore,
        *,
        registry: SportRegistry = REGISTRY,
        clock: Callable[[], int] = now_millis,
    ) -> "TeamBudgetRepository":
        return cls(
            teams=TeamsAPI(store, clock=clock),
            players=PlayersAPI(store, clock=clock),
            expenses=ExpensesAPI(store, registry=registry, clock=clock),
            payments=PaymentsAPI(store, clock=clock),
            settings=SettingsAPI(store, clock=clock),
            attendance=AttendanceAPI(store, clock=clock),
        )


__all__ = [
    "AttendanceAPI",
    "CollectionAPI",
    "EntityNotFoundError",
    "ExpensesAPI",
    "PaymentsAPI",
    "PlayersAPI",
    "SettingsAPI",
    "TeamBudgetRepository",
    "TeamsAPI",
]
