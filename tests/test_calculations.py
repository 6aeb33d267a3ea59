"""Mini README: Tests covering derived expense numbers and dashboard maths.

Structure:
    * Expense totals - stored ``total``/``perPerson`` recomputation rules.
    * Collection maths - collected amounts, outstanding sign and labels.
    * Player balance - even split over the recorded ``playersCount``.
"""

from __future__ import annotations

import pytest

from teambudget.finance import (
    collection_rate,
    collection_tone,
    compute_expense_totals,
    financial_overview,
    normalise_expense,
    outstanding,
    outstanding_label,
    payment_status_totals,
    player_balance,
    round_currency,
    total_collected,
    total_expenses,
)
from teambudget.sports import REGISTRY

BADMINTON = REGISTRY.get_config("badminton")


def test_expense_total_and_per_person_split() -> None:
    """Counted fields sum into the total which is split across players."""

    expense = {"indoor": 40, "shuttlecock": 10, "equipment": 0, "other": 0, "playersCount": 5}

    totals = compute_expense_totals(expense, BADMINTON)

    assert totals.total == pytest.approx(50)
    assert totals.per_person == pytest.approx(10.00)


def test_zero_players_keeps_per_person_at_zero() -> None:
    """Without a head count the per-person share stays at zero."""

    totals = compute_expense_totals({"indoor": 20, "playersCount": 0}, BADMINTON)

    assert totals.total == pytest.approx(20)
    assert totals.per_person == 0


def test_per_person_rounds_to_cents() -> None:
    """Shares are rounded half-up to the cent."""

    totals = compute_expense_totals({"indoor": 100, "playersCount": 3}, BADMINTON)

    assert totals.per_person == pytest.approx(33.33)
    assert round_currency(2.675) == pytest.approx(2.68)


def test_normalise_expense_only_touches_present_keys() -> None:
    """Partial updates keep the keys they did not send."""

    normalised = normalise_expense({"indoor": "12.5", "year": "2024"}, BADMINTON)

    assert normalised == {"indoor": 12.5, "year": 2024}


def test_collected_payments_drive_outstanding_and_rate() -> None:
    """Pending payments do not count; a fully paid period is settled."""

    expenses = [{"total": 100}]
    payments = [{"amount": 100, "status": "paid"}, {"amount": 50, "status": "pending"}]

    expenses_total = total_expenses(expenses)
    collected = total_collected(payments)

    assert collected == pytest.approx(100)
    assert outstanding(expenses_total, collected) == 0
    assert collection_rate(expenses_total, collected) == pytest.approx(100)
    assert outstanding_label(0) == "All payments collected"


def test_legacy_statuses_count_as_collected() -> None:
    """Older ``completed`` and ``confirmed`` rows still count as money in."""

    payments = [
        {"amount": 10, "status": "completed"},
        {"amount": 15, "status": "confirmed"},
        {"amount": 99, "status": "partial"},
    ]

    assert total_collected(payments) == pytest.approx(25)


def test_collection_rate_is_zero_without_expenses() -> None:
    """No expenses means a zero rate rather than a division error."""

    assert collection_rate(0, 250) == 0


def test_outstanding_sign_selects_label() -> None:
    """The sign of the outstanding amount picks the label and tone."""

    assert outstanding_label(outstanding(100, 40)) == "Amount Due"
    assert outstanding_label(outstanding(100, 140)) == "Overpaid"
    assert collection_tone(85) == "good"
    assert collection_tone(60) == "fair"
    assert collection_tone(10) == "low"


def test_financial_overview_reports_progress() -> None:
    """The overview combines totals, outstanding and collection rate."""

    overview = financial_overview(
        [{"total": 200}], [{"amount": 150, "status": "paid"}], currency="GBP"
    )

    exported = overview.as_dict()
    assert exported["outstandingLabel"] == "Amount Due"
    assert exported["outstandingDisplay"] == "£50.00"
    assert exported["collectionRate"] == pytest.approx(75)


def test_player_balance_uses_recorded_players_count() -> None:
    """Each expense is split by the head count stored on it."""

    expenses = [
        {"total": 100, "playersCount": 4},
        {"total": 60, "playersCount": 0},
        {"total": 30, "playersCount": 3},
    ]
    payments = [
        {"playerId": "p1", "amount": 20, "status": "paid"},
        {"playerId": "p1", "amount": 50, "status": "pending"},
        {"playerId": "p2", "amount": 100, "status": "paid"},
    ]

    balance = player_balance("p1", expenses, payments)

    assert balance.total_due == pytest.approx(35)
    assert balance.total_paid == pytest.approx(20)
    assert balance.balance == pytest.approx(-15)
    assert balance.status == "unpaid"


def test_payment_status_totals_groups_amounts() -> None:
    """Amounts are summed per payment status."""

    totals = payment_status_totals(
        [{"amount": 10, "status": "paid"}, {"amount": 5, "status": "pending"}]
    )

    assert totals["total"] == pytest.approx(15)
    assert totals["paid"] == pytest.approx(10)
    assert totals["pending"] == pytest.approx(5)
