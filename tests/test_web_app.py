"""Mini README: Tests for the JSON service routes and error mapping.

Each test builds an isolated container with in-memory backends and drives
the FastAPI application through ``TestClient``.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from teambudget.configuration import TeamBudgetSettings
from teambudget.identity import InMemoryIdentityProvider
from teambudget.interface import create_application
from teambudget.state import build_container
from teambudget.store import InMemoryDocumentStore

CREDENTIALS = {"email": "coach@example.com", "password": "secret1"}
TEAM = {"name": "Smashers", "sportType": "badminton", "currency": "USD"}


@pytest.fixture()
def client(tmp_path: Path) -> TestClient:
    settings = TeamBudgetSettings(data_directory=tmp_path, recent_activity_limit=3)
    container = build_container(
        settings,
        store=InMemoryDocumentStore(),
        identity=InMemoryIdentityProvider(bcrypt_rounds=4),
    )
    return TestClient(create_application(container))


@pytest.fixture()
def signed_in(client: TestClient) -> TestClient:
    response = client.post("/auth/signup", json=CREDENTIALS)
    assert response.status_code == 201
    return client


def test_data_routes_require_sign_in(client: TestClient) -> None:
    """Data routes answer 401 without a session."""

    response = client.get("/teams")

    assert response.status_code == 401
    assert response.json()["code"] == "auth/no-current-user"


def test_login_errors_map_to_messages(client: TestClient) -> None:
    """Auth failures return the friendly message and code."""

    response = client.post("/auth/login", json=CREDENTIALS)

    assert response.status_code == 401
    assert response.json() == {
        "detail": "No account found with this email address.",
        "code": "auth/user-not-found",
    }


def test_account_lifecycle(signed_in: TestClient) -> None:
    """Profile, logout, login and password reset work through the auth routes."""

    me = signed_in.get("/auth/me").json()["user"]
    assert me["email"] == "coach@example.com"

    profile = signed_in.patch("/auth/profile", json={"displayName": "Coach Kim"})
    assert profile.json()["user"]["displayName"] == "Coach Kim"

    assert signed_in.post("/auth/logout").json() == {"user": None}
    assert signed_in.get("/auth/me").status_code == 401
    assert signed_in.post("/auth/login", json=CREDENTIALS).status_code == 200
    assert signed_in.post("/auth/password-reset", json={"email": "coach@example.com"}).json() == {"sent": True}


def test_sports_routes(client: TestClient) -> None:
    """Sport listings and schemas are public."""

    listing = client.get("/sports").json()
    assert [sport["key"] for sport in listing["sports"]][:2] == ["badminton", "cricket"]
    assert listing["current"] == "badminton"

    cricket = client.get("/sports/cricket").json()
    assert cricket["expenseFields"]["custom"]["type"] == "custom-expense"
    assert client.get("/sports/unknown").json()["key"] == "badminton"

    assert client.post("/sports/current", json={"sport": "tennis"}).json() == {"current": "tennis"}


def test_team_crud_and_selection(signed_in: TestClient) -> None:
    """Teams can be created, updated, selected and deleted."""

    created = signed_in.post("/teams", json=TEAM)
    assert created.status_code == 201
    team_id = created.json()["team"]["id"]

    updated = signed_in.patch(f"/teams/{team_id}", json={"location": "Hall 2"})
    assert updated.json()["team"]["location"] == "Hall 2"

    listing = signed_in.get("/teams").json()
    assert listing["currentTeamId"] == team_id

    fallback = signed_in.post("/teams/current", json={"teamId": "missing"}).json()
    assert fallback["currentTeam"]["id"] == team_id

    deleted = signed_in.delete(f"/teams/{team_id}").json()
    assert deleted == {"deleted": team_id, "currentTeamId": None}


def test_validation_errors_return_field_map(signed_in: TestClient) -> None:
    """Validation failures answer 422 with a field map."""

    response = signed_in.post("/teams", json={"name": "X", "currency": "USD"})

    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"name", "sportType"}


def test_updating_missing_row_returns_not_found(signed_in: TestClient) -> None:
    """Unknown ids answer 404."""

    response = signed_in.patch("/players/nope", json={"notes": "hello"})

    assert response.status_code == 404


def test_players_filters_and_balance(signed_in: TestClient) -> None:
    """Player filters and balances are served per player."""

    signed_in.post("/teams", json=TEAM)
    asha = signed_in.post("/players", json={"name": "Asha", "email": "asha@example.com"}).json()["player"]
    signed_in.post("/players", json={"name": "Ben", "isActive": False})

    active = signed_in.get("/players", params={"status": "active"}).json()["players"]
    assert [player["name"] for player in active] == ["Asha"]
    assert signed_in.get("/players", params={"status": "retired"}).status_code == 400

    signed_in.post("/expenses", json={"month": "May", "year": 2024, "indoor": 40, "shuttlecock": 10, "playersCount": 5})
    signed_in.post(
        "/payments",
        json={
            "playerId": asha["id"],
            "month": "May",
            "year": 2024,
            "amount": 4,
            "status": "paid",
            "paymentMethod": "cash",
        },
    )

    balance = signed_in.get(f"/players/{asha['id']}/balance").json()
    assert balance["totalDue"] == pytest.approx(10)
    assert balance["balance"] == pytest.approx(-6)
    assert balance["status"] == "unpaid"
    assert signed_in.get("/players/ghost/balance").status_code == 404


def test_expense_routes_recompute_totals(signed_in: TestClient) -> None:
    """Expense routes always return server-computed totals."""

    signed_in.post("/teams", json={**TEAM, "sportType": "cricket"})
    created = signed_in.post(
        "/expenses",
        json={
            "sport": "cricket",
            "month": "June",
            "year": 2024,
            "ground": 120,
            "custom": {"name": "Scorer", "amount": 30},
            "playersCount": 10,
            "total": 1,
        },
    ).json()["expense"]
    assert created["total"] == pytest.approx(150)
    assert created["perPerson"] == pytest.approx(15)

    updated = signed_in.patch(f"/expenses/{created['id']}", json={"umpire": 50}).json()["expense"]
    assert updated["total"] == pytest.approx(200)

    listing = signed_in.get("/expenses", params={"month": "June", "year": 2024}).json()["expenses"]
    assert [expense["id"] for expense in listing] == [created["id"]]
    assert signed_in.get("/expenses", params={"month": "July"}).json()["expenses"] == []

    table = signed_in.get("/expenses/table", params={"sport": "cricket"}).json()
    assert table["totals"]["total"] == pytest.approx(200)
    assert table["categories"]["personnel"] == pytest.approx(50)

    assert signed_in.delete(f"/expenses/{created['id']}").json() == {"deleted": created["id"]}
    assert signed_in.get("/expenses").json()["expenses"] == []


def test_payment_routes_and_duplicate_check(signed_in: TestClient) -> None:
    """Payments stamp ``paidAt`` and support the duplicate lookup."""

    payment = {
        "playerId": "p1",
        "month": "May",
        "year": 2024,
        "amount": 20,
        "status": "pending",
        "paymentMethod": "venmo",
    }
    created = signed_in.post("/payments", json=payment).json()["payment"]
    assert "paidAt" not in created

    duplicate = signed_in.get(
        "/payments/duplicate", params={"playerId": "p1", "month": "May", "year": 2024}
    ).json()
    assert duplicate["duplicate"]["id"] == created["id"]

    updated = signed_in.patch(f"/payments/{created['id']}", json={"status": "paid"}).json()["payment"]
    assert updated["paidAt"] is not None

    listing = signed_in.get("/payments", params={"status": "paid"}).json()
    assert listing["totals"]["paid"] == pytest.approx(20)

    invalid = signed_in.post("/payments", json={**payment, "amount": -5})
    assert invalid.status_code == 422
    assert "amount" in invalid.json()["errors"]


def test_non_finite_amounts_are_rejected_before_storage(signed_in: TestClient) -> None:
    """Infinite or NaN amounts return field errors and never reach the dashboard."""

    signed_in.post("/teams", json=TEAM)

    infinite = signed_in.post("/expenses", json={"month": "May", "year": 2024, "indoor": "inf"})
    not_a_number = signed_in.post("/expenses", json={"month": "May", "year": 2024, "indoor": 10, "other": "nan"})
    payment = signed_in.post(
        "/payments",
        json={"playerId": "p1", "month": "May", "year": 2024, "amount": "inf", "status": "paid", "paymentMethod": "cash"},
    )

    assert infinite.status_code == 422
    assert "indoor" in infinite.json()["errors"]
    assert not_a_number.status_code == 422
    assert "other" in not_a_number.json()["errors"]
    assert payment.status_code == 422
    assert payment.json()["errors"] == {"amount": "Please enter a valid amount"}
    assert signed_in.get("/expenses").json()["expenses"] == []
    assert signed_in.get("/dashboard").status_code == 200


def test_dashboard_summarises_current_team(signed_in: TestClient) -> None:
    """The dashboard reports the current team's numbers."""

    signed_in.post("/teams", json={**TEAM, "currency": "EUR"})
    signed_in.post("/players", json={"name": "Asha"})
    signed_in.post("/expenses", json={"month": "May", "year": 2024, "indoor": 100, "playersCount": 4})
    signed_in.post(
        "/payments",
        json={"playerId": "p1", "month": "May", "year": 2024, "amount": 100, "status": "paid", "paymentMethod": "cash"},
    )
    signed_in.post(
        "/payments",
        json={"playerId": "p2", "month": "May", "year": 2024, "amount": 50, "status": "pending", "paymentMethod": "cash"},
    )

    dashboard = signed_in.get("/dashboard").json()

    assert dashboard["overview"]["totalCollected"] == pytest.approx(100)
    assert dashboard["overview"]["outstanding"] == 0
    assert dashboard["overview"]["outstandingLabel"] == "All payments collected"
    assert dashboard["overview"]["collectionRate"] == pytest.approx(100)
    assert [card["name"] for card in dashboard["stats"]][4] == "All payments collected"
    assert dashboard["stats"][2]["value"] == "€100.00"
    assert len(dashboard["recentActivity"]) == 3
