"""Mini README: FastAPI-powered JSON service for Team Budget.

Structure:
    * create_application - application factory wiring routes, error
      handlers and the shared ``AppContainer``.
    * Account routes - sign up, sign in, sign out, profile and password reset.
    * Sport, team, player, expense and payment routes - thin wrappers over
      ``TeamDataState`` actions and the pure finance helpers.
    * Dashboard route - stat cards, financial overview and recent activity.

Handlers never mutate collections directly: writes go through the data state
actions and reads use its team-filtered views. Domain exceptions are mapped
to HTTP responses in one place so every route reports failures the same way.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..finance import (
    category_breakdown,
    dashboard_stats,
    expense_table,
    financial_overview,
    payment_status_totals,
    player_balance,
    recent_activity,
)
from ..identity import AuthError, AuthUser
from ..logging_utils import get_logger
from ..state import AppContainer, build_container
from ..store import StoreError
from ..utils import filter_by_period, filter_players, sort_by_property
from ..validation import ValidationError
from .schemas import (
    Credentials,
    EmailBody,
    ExpensePayload,
    PasswordBody,
    PaymentPayload,
    PlayerPayload,
    ProfileUpdate,
    SportSelection,
    TeamPayload,
    TeamSelection,
)

LOGGER = get_logger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save changes"


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_failed(request: Request, error: ValidationError) -> JSONResponse:
        LOGGER.info("Rejected %s %s: %s", request.method, request.url.path, error.errors)
        return JSONResponse(status_code=422, content={"detail": "Invalid data", "errors": error.errors})

    @app.exception_handler(AuthError)
    async def auth_failed(request: Request, error: AuthError) -> JSONResponse:
        status_code = 403 if error.requires_recent_login else 401
        return JSONResponse(status_code=status_code, content={"detail": error.message, "code": error.code})

    @app.exception_handler(StoreError)
    async def store_failed(request: Request, error: StoreError) -> JSONResponse:
        LOGGER.error("Store failure during %s %s: %s", request.method, request.url.path, error)
        return JSONResponse(status_code=502, content={"detail": SAVE_FAILED_MESSAGE})

    @app.exception_handler(KeyError)
    async def not_found(request: Request, error: KeyError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(error.args[0]) if error.args else "Not found"})

    @app.exception_handler(ValueError)
    async def bad_request(request: Request, error: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(error)})


def create_application(container: Optional[AppContainer] = None) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    container = container or build_container()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        LOGGER.info("Shutting down; detaching live listeners")
        container.close()

    app = FastAPI(title="Team Budget", version=__version__, lifespan=lifespan)
    app.state.container = container
    state = container.state
    registry = container.registry
    _register_error_handlers(app)

    def signed_in() -> AuthUser:
        return container.session.require_user()

    # Accounts ------------------------------------------------------------
    @app.post("/auth/signup", status_code=201)
    async def signup(body: Credentials) -> JSONResponse:
        user = await container.session.signup(body.email, body.password)
        return JSONResponse(status_code=201, content={"user": user.as_dict()})

    @app.post("/auth/login")
    async def login(body: Credentials) -> JSONResponse:
        user = await container.session.login(body.email, body.password)
        return JSONResponse({"user": user.as_dict()})

    @app.post("/auth/logout")
    async def logout() -> JSONResponse:
        await container.session.logout()
        return JSONResponse({"user": None})

    @app.get("/auth/me")
    async def me(user: AuthUser = Depends(signed_in)) -> JSONResponse:
        return JSONResponse({"user": user.as_dict(), "loading": container.session.loading})

    @app.patch("/auth/profile", dependencies=[Depends(signed_in)])
    async def update_profile(body: ProfileUpdate) -> JSONResponse:
        session = container.session
        if body.display_name is not None or body.photo_url is not None:
            await session.update_user_profile(display_name=body.display_name, photo_url=body.photo_url)
        if body.email is not None:
            await session.update_user_email(body.email)
        if body.password is not None:
            await session.update_user_password(body.password)
        return JSONResponse({"user": session.require_user().as_dict()})

    @app.post("/auth/reauthenticate", dependencies=[Depends(signed_in)])
    async def reauthenticate(body: PasswordBody) -> JSONResponse:
        await container.session.reauthenticate_user(body.password)
        return JSONResponse({"reauthenticated": True})

    @app.post("/auth/password-reset")
    async def password_reset(body: EmailBody) -> JSONResponse:
        await container.session.reset_password(body.email)
        return JSONResponse({"sent": True})

    @app.delete("/auth/account", dependencies=[Depends(signed_in)])
    async def delete_account() -> JSONResponse:
        await container.session.delete_user_account()
        return JSONResponse({"deleted": True})

    # Sports --------------------------------------------------------------
    @app.get("/sports")
    async def list_sports() -> JSONResponse:
        return JSONResponse(
            {
                "sports": registry.sports_list(),
                "current": state.current_sport,
                "categories": registry.categories(),
            }
        )

    @app.get("/sports/{key}")
    async def sport_config(key: str) -> JSONResponse:
        return JSONResponse(registry.get_config(key).describe())

    @app.post("/sports/current")
    async def select_sport(body: SportSelection) -> JSONResponse:
        return JSONResponse({"current": state.set_current_sport(body.sport)})

    # Teams ---------------------------------------------------------------
    @app.get("/teams", dependencies=[Depends(signed_in)])
    async def list_teams() -> JSONResponse:
        return JSONResponse({"teams": state.teams, "currentTeamId": state.current_team_id})

    @app.post("/teams", status_code=201, dependencies=[Depends(signed_in)])
    async def create_team(body: TeamPayload) -> JSONResponse:
        team = await state.create_team(body.payload())
        return JSONResponse(status_code=201, content={"team": team})

    @app.patch("/teams/{team_id}", dependencies=[Depends(signed_in)])
    async def update_team(team_id: str, body: TeamPayload) -> JSONResponse:
        await state.update_team(team_id, body.payload())
        return JSONResponse({"team": state.get_entity("teams", team_id)})

    @app.delete("/teams/{team_id}", dependencies=[Depends(signed_in)])
    async def delete_team(team_id: str) -> JSONResponse:
        await state.delete_team(team_id)
        return JSONResponse({"deleted": team_id, "currentTeamId": state.current_team_id})

    @app.post("/teams/current", dependencies=[Depends(signed_in)])
    async def select_team(body: TeamSelection) -> JSONResponse:
        team = state.set_current_team(body.team_id)
        return JSONResponse({"currentTeam": team})

    # Players -------------------------------------------------------------
    @app.get("/players", dependencies=[Depends(signed_in)])
    async def list_players(
        search: str = "",
        status: str = "all",
        team: Optional[str] = None,
    ) -> JSONResponse:
        source = state.all_players if team else state.players
        players = filter_players(source, search=search, status=status, team_id=team)
        return JSONResponse({"players": sort_by_property(players, "name")})

    @app.post("/players", status_code=201, dependencies=[Depends(signed_in)])
    async def create_player(body: PlayerPayload) -> JSONResponse:
        player = await state.create_player(body.payload())
        return JSONResponse(status_code=201, content={"player": player})

    @app.patch("/players/{player_id}", dependencies=[Depends(signed_in)])
    async def update_player(player_id: str, body: PlayerPayload) -> JSONResponse:
        await state.update_player(player_id, body.payload())
        return JSONResponse({"player": state.get_entity("players", player_id)})

    @app.delete("/players/{player_id}", dependencies=[Depends(signed_in)])
    async def delete_player(player_id: str) -> JSONResponse:
        await state.delete_player(player_id)
        return JSONResponse({"deleted": player_id})

    @app.get("/players/{player_id}/balance", dependencies=[Depends(signed_in)])
    async def balance(player_id: str) -> JSONResponse:
        state.get_entity("players", player_id)
        result = player_balance(player_id, state.expenses, state.payments)
        return JSONResponse({**result.as_dict(), "currency": state.currency})

    # Expenses ------------------------------------------------------------
    @app.get("/expenses", dependencies=[Depends(signed_in)])
    async def list_expenses(month: Optional[str] = None, year: Optional[int] = None) -> JSONResponse:
        return JSONResponse({"expenses": filter_by_period(state.expenses, month, year)})

    @app.get("/expenses/table", dependencies=[Depends(signed_in)])
    async def table(
        sport: Optional[str] = None,
        month: Optional[str] = None,
        year: Optional[int] = None,
    ) -> JSONResponse:
        expenses = filter_by_period(state.expenses, month, year)
        layout = expense_table(expenses, sport or state.current_sport, registry=registry)
        return JSONResponse(
            {**layout.as_dict(), "categories": category_breakdown(expenses, registry=registry)}
        )

    @app.post("/expenses", status_code=201, dependencies=[Depends(signed_in)])
    async def create_expense(body: ExpensePayload) -> JSONResponse:
        expense = await state.create_expense(body.payload())
        return JSONResponse(status_code=201, content={"expense": expense})

    @app.patch("/expenses/{expense_id}", dependencies=[Depends(signed_in)])
    async def update_expense(expense_id: str, body: ExpensePayload) -> JSONResponse:
        await state.update_expense(expense_id, body.payload())
        return JSONResponse({"expense": state.get_entity("expenses", expense_id)})

    @app.delete("/expenses/{expense_id}", dependencies=[Depends(signed_in)])
    async def delete_expense(expense_id: str) -> JSONResponse:
        await state.delete_expense(expense_id)
        return JSONResponse({"deleted": expense_id})

    # Payments ------------------------------------------------------------
    @app.get("/payments", dependencies=[Depends(signed_in)])
    async def list_payments(
        month: Optional[str] = None,
        year: Optional[int] = None,
        status: Optional[str] = None,
    ) -> JSONResponse:
        payments = filter_by_period(state.payments, month, year)
        if status:
            payments = [payment for payment in payments if payment.get("status") == status]
        return JSONResponse({"payments": payments, "totals": payment_status_totals(payments)})

    @app.get("/payments/duplicate", dependencies=[Depends(signed_in)])
    async def duplicate_payment(
        player_id: str = Query(..., alias="playerId"),
        month: str = Query(...),
        year: int = Query(...),
        exclude_id: Optional[str] = Query(None, alias="excludeId"),
    ) -> JSONResponse:
        duplicate = state.find_duplicate_payment(player_id, month, year, exclude_id)
        return JSONResponse({"duplicate": duplicate})

    @app.post("/payments", status_code=201, dependencies=[Depends(signed_in)])
    async def create_payment(body: PaymentPayload) -> JSONResponse:
        payment = await state.create_payment(body.payload())
        return JSONResponse(status_code=201, content={"payment": payment})

    @app.patch("/payments/{payment_id}", dependencies=[Depends(signed_in)])
    async def update_payment(payment_id: str, body: PaymentPayload) -> JSONResponse:
        await state.update_payment(payment_id, body.payload())
        return JSONResponse({"payment": state.get_entity("payments", payment_id)})

    @app.delete("/payments/{payment_id}", dependencies=[Depends(signed_in)])
    async def delete_payment(payment_id: str) -> JSONResponse:
        await state.delete_payment(payment_id)
        return JSONResponse({"deleted": payment_id})

    # Dashboard -----------------------------------------------------------
    @app.get("/dashboard", dependencies=[Depends(signed_in)])
    async def dashboard() -> JSONResponse:
        """Summarise the current team for the dashboard view."""

        currency = state.currency
        overview = financial_overview(state.expenses, state.payments, currency=currency)
        stats = dashboard_stats(state.teams, state.players, state.expenses, state.payments, currency=currency)
        activity = recent_activity(
            state.players,
            state.expenses,
            state.payments,
            container.settings.recent_activity_limit,
            currency=currency,
        )
        LOGGER.debug(
            "Dashboard metrics -> expenses: %.2f collected: %.2f rate: %.1f",
            overview.total_expenses,
            overview.total_collected,
            overview.collection_rate,
        )
        return JSONResponse(
            {
                "loading": state.loading,
                "currentTeam": state.current_team,
                "currentSport": state.current_sport,
                "stats": [card.as_dict() for card in stats],
                "overview": overview.as_dict(),
                "recentActivity": [item.as_dict() for item in activity],
            }
        )

    return app
