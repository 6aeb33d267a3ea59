"""Mini README: Wiring of the application services.

Structure:
    * AppContainer - the settings plus every long-lived service the web layer
      needs: document store, identity provider, session, repository,
      preferences and the reactive data state.
    * build_container - build a container from settings.

The container represents a single signed-in workspace, mirroring a browser
tab of the hosted app: one session and one data state per process.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..configuration import TeamBudgetSettings, get_settings
from ..identity import IdentityProvider, InMemoryIdentityProvider, Session
from ..logging_utils import get_logger
from ..preferences import PreferenceStore
from ..repository import TeamBudgetRepository
from ..sports import REGISTRY, SportRegistry
from ..store import DocumentStore, InMemoryDocumentStore
from .data_state import TeamDataState

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class AppContainer:
    """Long-lived services shared by request handlers."""

    settings: TeamBudgetSettings
    store: DocumentStore
    identity: IdentityProvider
    session: Session
    repository: TeamBudgetRepository
    preferences: PreferenceStore
    registry: SportRegistry
    state: TeamDataState

    def close(self) -> None:
        self.state.close()
        self.session.close()


def build_container(
    settings: Optional[TeamBudgetSettings] = None,
    *,
    store: Optional[DocumentStore] = None,
    identity: Optional[IdentityProvider] = None,
    preferences: Optional[PreferenceStore] = None,
    registry: SportRegistry = REGISTRY,
) -> AppContainer:
    """Create the services for one workspace, using in-memory backends by default."""

    settings = settings or get_settings()
    store = store or InMemoryDocumentStore(persist_path=settings.store_file)
    identity = identity or InMemoryIdentityProvider(
        recent_login_seconds=settings.recent_login_seconds
    )
    preferences = preferences or PreferenceStore(settings.preferences_path)
    session = Session(identity)
    repository = TeamBudgetRepository.from_store(store, registry=registry)
    state = TeamDataState(
        session,
        repository,
        preferences,
        default_sport=settings.default_sport,
        expense_sport_policy=settings.expense_sport_policy,
        registry=registry,
    )
    LOGGER.info(
        "Container ready (environment=%s, store=%s)",
        settings.environment,
        type(store).__name__,
    )
    return AppContainer(
        settings=settings,
        store=store,
        identity=identity,
        session=session,
        repository=repository,
        preferences=preferences,
        registry=registry,
        state=state,
    )
