"""Mini README: Derived money fields for expenses and player balances.

Structure:
    * round_currency - half-up rounding to cents.
    * ExpenseTotals / compute_expense_totals - ``total`` and ``perPerson``
      derived from a sport's counted cost fields.
    * normalise_expense - coerce cost fields, ``playersCount`` and ``year``.
    * PlayerBalance / player_balance - what a player owes versus has paid.

Everything here is pure and side-effect free. The repository calls
``normalise_expense`` and ``compute_expense_totals`` on every expense write
so stored totals can never drift from their components.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Mapping

from ..constants import COLLECTED_STATUSES
from ..sports import SportConfig, coerce_amount

_CENT = Decimal("0.01")


def round_currency(value: float) -> float:
    """Round to two decimals, halves away from zero."""

    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def coerce_count(value: Any) -> int:
    """Interpret a head-count field; blanks mean zero."""

    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError("Player counts must be whole numbers")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Player counts must be whole numbers, got {value}")
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError as error:
        raise ValueError(f"Invalid player count: {value!r}") from error


@dataclass(frozen=True, slots=True)
class ExpenseTotals:
    """Derived totals stored alongside an expense."""

    total: float
    per_person: float

    def as_fields(self) -> Dict[str, float]:
        return {"total": self.total, "perPerson": self.per_person}


def compute_expense_totals(expense: Mapping[str, Any], config: SportConfig) -> ExpenseTotals:
    """Sum the sport's counted fields and split the result across ``playersCount``."""

    total = round_currency(
        sum(expense_field.amount_from(expense) for expense_field in config.total_fields)
    )
    players_count = coerce_count(expense.get("playersCount"))
    per_person = round_currency(total / players_count) if players_count > 0 else 0.0
    return ExpenseTotals(total=total, per_person=per_person)


def normalise_expense(expense: Mapping[str, Any], config: SportConfig) -> Dict[str, Any]:
    """Return a copy with cost fields, ``playersCount`` and ``year`` coerced.

    Only keys already present are touched so the helper is safe for partial
    updates.
    """

    normalised = dict(expense)
    for expense_field in config.expense_fields:
        if expense_field.key in normalised:
            normalised[expense_field.key] = expense_field.normalise(normalised[expense_field.key])
    if "playersCount" in normalised:
        normalised["playersCount"] = coerce_count(normalised["playersCount"])
    if normalised.get("year") not in (None, ""):
        normalised["year"] = coerce_count(normalised["year"])
    return normalised


def is_collected(status: Any) -> bool:
    """Whether a payment status counts toward collected money."""

    return str(status or "").lower() in COLLECTED_STATUSES


@dataclass(frozen=True, slots=True)
class PlayerBalance:
    """Amount a player owes across expenses versus collected payments."""

    player_id: str
    total_due: float
    total_paid: float

    @property
    def balance(self) -> float:
        return round_currency(self.total_paid - self.total_due)

    @property
    def status(self) -> str:
        return "paid" if self.balance >= 0 else "unpaid"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "playerId": self.player_id,
            "totalDue": self.total_due,
            "totalPaid": self.total_paid,
            "balance": self.balance,
            "status": self.status,
        }


def player_balance(
    player_id: str,
    expenses: Iterable[Mapping[str, Any]],
    payments: Iterable[Mapping[str, Any]],
) -> PlayerBalance:
    """Compute a player's share of ``expenses`` against their collected payments.

    Each expense is split evenly across the ``playersCount`` recorded on it,
    not the live roster size. Expenses without players are skipped.
    """

    total_due = 0.0
    for expense in expenses:
        players_count = coerce_count(expense.get("playersCount"))
        if players_count > 0:
            total_due += coerce_amount(expense.get("total")) / players_count
    total_paid = sum(
        coerce_amount(payment.get("amount"))
        for payment in payments
        if payment.get("playerId") == player_id and is_collected(payment.get("status"))
    )
    return PlayerBalance(
        player_id=player_id,
        total_due=round_currency(total_due),
        total_paid=round_currency(total_paid),
    )
