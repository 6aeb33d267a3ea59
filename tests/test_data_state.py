"""Mini README: Tests for the reactive per-user data state.

Structure:
    * Session lifecycle - loading flag, per-user subscriptions and teardown.
    * Team selection - first-team default, preference restore and fallback
      when switching to a team that is no longer present.
    * Actions - validation, current team defaults, sport policy and the
      duplicate payment check.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from teambudget.configuration import ExpenseSportPolicy
from teambudget.identity import InMemoryIdentityProvider, NotAuthenticatedError, Session
from teambudget.preferences import CURRENT_SPORT_KEY, CURRENT_TEAM_KEY, PreferenceStore
from teambudget.repository import TeamBudgetRepository
from teambudget.state import TeamDataState
from teambudget.store import InMemoryDocumentStore
from teambudget.validation import ValidationError

TEAM = {"name": "Smashers", "sportType": "badminton", "currency": "USD"}


def build_state(
    preferences: Optional[PreferenceStore] = None,
    **options: Any,
) -> Tuple[TeamDataState, Session, InMemoryDocumentStore]:
    store = InMemoryDocumentStore()
    session = Session(InMemoryIdentityProvider(bcrypt_rounds=4))
    state = TeamDataState(
        session,
        TeamBudgetRepository.from_store(store),
        preferences or PreferenceStore(),
        **options,
    )
    return state, session, store


def sign_up(session: Session, email: str = "coach@example.com") -> None:
    asyncio.run(session.signup(email, "secret1"))


def test_signed_out_state_is_not_loading() -> None:
    """Without a user nothing is subscribed and nothing is loading."""

    state, _, store = build_state()

    assert state.loading is False
    assert state.teams == []
    assert store.listener_count == 0


def test_sign_in_subscribes_each_collection() -> None:
    """Signing in attaches one live listener per collection."""

    state, session, store = build_state()

    sign_up(session)

    assert store.listener_count == 4
    assert state.loading is False
    assert state.current_team is None


def test_actions_need_a_signed_in_user() -> None:
    """Writes without a user raise before touching the store."""

    state, _, _ = build_state()

    with pytest.raises(NotAuthenticatedError):
        asyncio.run(state.create_team(TEAM))


def test_creating_team_selects_it_and_saves_preference() -> None:
    """A new team becomes current and is remembered."""

    preferences = PreferenceStore()
    state, session, _ = build_state(preferences)
    sign_up(session)

    async def scenario() -> Dict[str, Any]:
        await state.create_team(TEAM)
        return await state.create_team({**TEAM, "name": "Shuttlers"})

    second = asyncio.run(scenario())

    assert [team["name"] for team in state.teams] == ["Smashers", "Shuttlers"]
    assert state.current_team_id == second["id"]
    assert preferences.get(CURRENT_TEAM_KEY) == second["id"]


def test_switching_to_unknown_team_falls_back_to_first_team() -> None:
    """Unknown team ids resolve to the first available team."""

    state, session, _ = build_state()
    sign_up(session)

    async def scenario() -> List[Dict[str, Any]]:
        return [await state.create_team(TEAM), await state.create_team({**TEAM, "name": "Shuttlers"})]

    first, second = asyncio.run(scenario())
    assert state.current_team_id == second["id"]

    selected = state.set_current_team("vanished-team")

    assert selected is not None
    assert selected["id"] == first["id"]


def test_views_filter_by_current_team() -> None:
    """Views only return rows of the selected team."""

    state, session, _ = build_state()
    sign_up(session)

    async def scenario() -> List[Dict[str, Any]]:
        first = await state.create_team(TEAM)
        await state.create_player({"name": "Asha"})
        second = await state.create_team({**TEAM, "name": "Shuttlers"})
        await state.create_player({"name": "Ben"})
        return [first, second]

    first, second = asyncio.run(scenario())

    assert [player["name"] for player in state.players] == ["Ben"]
    state.set_current_team(first["id"])
    assert [player["name"] for player in state.players] == ["Asha"]
    state.set_current_team(None)
    assert [player["name"] for player in state.players] == ["Asha", "Ben"]
    assert all(player["teamId"] in {first["id"], second["id"]} for player in state.all_players)


def test_deleting_current_team_selects_remaining_team_and_keeps_players() -> None:
    """Deleting the current team moves selection on and leaves players in place."""

    state, session, _ = build_state()
    sign_up(session)

    async def scenario() -> List[Dict[str, Any]]:
        first = await state.create_team(TEAM)
        second = await state.create_team({**TEAM, "name": "Shuttlers"})
        await state.create_player({"name": "Ben"})
        await state.delete_team(second["id"])
        return [first, second]

    first, second = asyncio.run(scenario())

    assert state.current_team_id == first["id"]
    assert [player["teamId"] for player in state.all_players] == [second["id"]]


def test_preference_restores_team_for_next_session(tmp_path: Path) -> None:
    """The saved team id is restored on the next sign-in."""

    preferences_file = tmp_path / "prefs" / "preferences.json"
    store = InMemoryDocumentStore()
    provider = InMemoryIdentityProvider(bcrypt_rounds=4)
    repository = TeamBudgetRepository.from_store(store)
    first_session = Session(provider)
    state = TeamDataState(first_session, repository, PreferenceStore(preferences_file))
    sign_up(first_session)

    async def scenario() -> Dict[str, Any]:
        await state.create_team(TEAM)
        return await state.create_team({**TEAM, "name": "Shuttlers"})

    second = asyncio.run(scenario())
    state.close()
    first_session.close()

    restored = TeamDataState(Session(provider), repository, PreferenceStore(preferences_file))

    assert restored.current_team_id == second["id"]


def test_logout_clears_collections_and_subscriptions() -> None:
    """Logging out empties every collection and detaches listeners."""

    state, session, store = build_state()
    sign_up(session)
    asyncio.run(state.create_team(TEAM))
    changes: List[int] = []
    state.add_listener(lambda current: changes.append(len(current.teams)))

    asyncio.run(session.logout())

    assert state.teams == []
    assert state.current_team_id is None
    assert store.listener_count == 0
    assert changes == [0]


def test_users_only_see_their_own_rows() -> None:
    """Rows are scoped to the signed-in owner."""

    state, session, _ = build_state()
    sign_up(session, "first@example.com")
    asyncio.run(state.create_team(TEAM))
    asyncio.run(session.logout())

    sign_up(session, "second@example.com")

    assert state.teams == []


def test_close_drops_subscriptions_and_listeners() -> None:
    """Closing the state releases all store listeners."""

    state, session, store = build_state()
    sign_up(session)
    calls: List[TeamDataState] = []
    state.add_listener(calls.append)

    state.close()
    asyncio.run(session.logout())

    assert store.listener_count == 0
    assert calls == []


def test_create_validates_before_writing() -> None:
    """Invalid input raises a field map and writes nothing."""

    state, session, store = build_state()
    sign_up(session)

    with pytest.raises(ValidationError) as error:
        asyncio.run(state.create_team({"name": "X"}))

    assert set(error.value.errors) == {"name", "sportType", "currency"}
    assert state.teams == []


def test_expense_sport_follows_current_sport_by_default() -> None:
    """New expenses take the globally selected sport."""

    preferences = PreferenceStore()
    state, session, _ = build_state(preferences)
    sign_up(session)
    asyncio.run(state.create_team({**TEAM, "sportType": "cricket"}))

    state.set_current_sport("tennis")
    expense = asyncio.run(
        state.create_expense({"month": "May", "year": 2024, "court": 40, "balls": 8, "playersCount": 4})
    )

    assert expense["sport"] == "tennis"
    assert expense["total"] == pytest.approx(48)
    assert expense["teamId"] == state.current_team_id
    assert preferences.get(CURRENT_SPORT_KEY) == "tennis"


def test_expense_sport_can_follow_team_sport() -> None:
    """The team policy uses the current team's sport instead."""

    state, session, _ = build_state(expense_sport_policy=ExpenseSportPolicy.TEAM_SPORT)
    sign_up(session)
    asyncio.run(state.create_team({**TEAM, "sportType": "cricket"}))

    async def scenario() -> List[Dict[str, Any]]:
        return [
            await state.create_expense({"month": "May", "year": 2024, "ground": 100, "playersCount": 10}),
            await state.create_expense(
                {"sport": "football", "month": "May", "year": 2024, "field": 50, "playersCount": 5}
            ),
        ]

    team_sport, explicit = asyncio.run(scenario())

    assert team_sport["sport"] == "cricket"
    assert team_sport["perPerson"] == pytest.approx(10)
    assert explicit["sport"] == "football"


def test_expense_update_validates_merged_row() -> None:
    """Edits are validated against the full merged expense."""

    state, session, _ = build_state()
    sign_up(session)
    expense = asyncio.run(state.create_expense({"month": "May", "year": 2024, "indoor": 30}))

    with pytest.raises(ValidationError):
        asyncio.run(state.update_expense(expense["id"], {"indoor": 0}))

    asyncio.run(state.update_expense(expense["id"], {"playersCount": 3}))
    (stored,) = state.expenses
    assert stored["perPerson"] == pytest.approx(10)


def test_duplicate_payment_check_is_advisory() -> None:
    """A repeated player and period is reported but still saved."""

    state, session, _ = build_state()
    sign_up(session)
    payment = {
        "playerId": "p1",
        "month": "May",
        "year": 2024,
        "amount": 20,
        "status": "paid",
        "paymentMethod": "zelle",
    }

    async def scenario() -> List[Dict[str, Any]]:
        return [await state.create_payment(payment), await state.create_payment(payment)]

    first, second = asyncio.run(scenario())

    assert len(state.payments) == 2
    assert state.find_duplicate_payment("p1", "May", "2024")["id"] == first["id"]
    assert state.find_duplicate_payment("p1", "May", 2024, exclude_id=first["id"])["id"] == second["id"]
    assert state.find_duplicate_payment("p1", "June", 2024) is None


def test_stale_snapshot_from_previous_session_is_ignored() -> None:
    """Deliveries for an earlier session do not leak into the current one."""

    state, session, _ = build_state()
    sign_up(session)
    handler = state._snapshot_handler("teams", state._generation - 1)

    handler({"t1": {"name": "Ghost"}})

    assert state.teams == []
