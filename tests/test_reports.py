"""Mini README: Tests for the dashboard feed, stat cards and expense table.

Structure:
    * Recent activity - newest first, limited, untimed rows excluded.
    * Dashboard stats - card order and labels.
    * Expense table - registry driven columns and totals.
"""

from __future__ import annotations

import pytest

from teambudget.finance import (
    ActivityKind,
    category_breakdown,
    dashboard_stats,
    expense_table,
    recent_activity,
)


def test_recent_activity_merges_sorts_and_limits() -> None:
    """Expenses and payments are merged newest first and capped."""

    players = [
        {"id": "p1", "name": "Asha", "createdAt": 1_700_000_000_000},
        {"id": "p2", "name": "No Time"},
    ]
    expenses = [{"id": "e1", "total": 50, "month": "May", "year": 2024, "createdAt": 1_700_000_300_000}]
    payments = [
        {"id": "pay1", "amount": 10, "status": "paid", "createdAt": 1_700_000_200_000},
        {"id": "pay2", "amount": 5, "status": "pending", "createdAt": "2023-11-14T22:15:00Z"},
    ]

    items = recent_activity(players, expenses, payments, 3)

    assert [item.entity_id for item in items] == ["e1", "pay1", "pay2"]
    assert items[0].kind is ActivityKind.EXPENSE_RECORDED
    assert items[0].message == "Recorded $50.00 expense for May 2024"
    assert items[1].kind is ActivityKind.PAYMENT_RECEIVED
    assert items[2].kind is ActivityKind.PAYMENT_RECORDED


def test_recent_activity_excludes_untimed_rows() -> None:
    """Rows without a timestamp are left out of the feed."""

    items = recent_activity([{"id": "p1", "name": "Ghost", "createdAt": None}], [], [], 5)

    assert items == []


def test_recent_activity_with_non_positive_limit_is_empty() -> None:
    """A zero or negative limit yields no items."""

    players = [{"id": "p1", "name": "Asha", "createdAt": 1_700_000_000_000}]

    assert recent_activity(players, [], [], 0) == []


def test_dashboard_stats_cards() -> None:
    """The dashboard cards carry formatted values and tones."""

    teams = [{"id": "t1"}]
    players = [{"isActive": True}, {"isActive": False}, {"isActive": True}]
    expenses = [{"total": 100}]
    payments = [{"amount": 40, "status": "paid"}]

    cards = dashboard_stats(teams, players, expenses, payments, currency="USD")

    assert [card.name for card in cards] == [
        "Active Teams",
        "Active Players",
        "Total Expenses",
        "Total Collected",
        "Amount Due",
        "Collection Rate",
    ]
    assert cards[1].value == "2"
    assert cards[4].value == "$60.00"
    assert cards[5].value == "40.0%"


def test_expense_table_uses_sport_columns() -> None:
    """Table columns come from the selected sport."""

    expenses = [
        {"id": "e1", "month": "March", "year": 2024, "court": 80, "balls": 20, "total": 100, "playersCount": 4, "perPerson": 25},
        {"id": "e2", "month": "April", "year": 2024, "court": 60, "total": 60, "playersCount": 0, "perPerson": 0},
    ]

    table = expense_table(expenses, "tennis")

    assert [column["key"] for column in table.columns] == [
        "period",
        "court",
        "balls",
        "racket",
        "other",
        "total",
        "playersCount",
        "perPerson",
    ]
    assert table.rows[0]["period"] == "March 2024"
    assert table.totals["court"] == pytest.approx(140)
    assert table.totals["total"] == pytest.approx(160)


def test_category_breakdown_respects_each_expense_sport() -> None:
    """Each expense is categorised with its own sport's fields."""

    expenses = [
        {"sport": "badminton", "indoor": 40, "shuttlecock": 10},
        {"sport": "football", "field": 100, "referee": 25},
    ]

    breakdown = category_breakdown(expenses)

    assert breakdown == {"venue": 140.0, "equipment": 10.0, "personnel": 25.0, "misc": 0.0}
