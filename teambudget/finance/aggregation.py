"""Mini README: Dashboard aggregation over in-memory collections.

Structure:
    * total_expenses / total_collected / outstanding / collection_rate -
      the headline numbers.
    * outstanding_label / collection_tone - presentation hints derived from
      those numbers.
    * FinancialOverview / financial_overview - the overview widget payload.
    * StatCard / dashboard_stats - the stat card strip.
    * payment_status_totals - per-status sums for the payment table footer.

Functions take plain lists of records and return numbers or small value
objects. They never read the store or the application state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from ..constants import PaymentStatus
from ..sports import coerce_amount
from ..utils.formatting import format_currency
from .calculations import is_collected, round_currency

AMOUNT_DUE_LABEL = "Amount Due"
OVERPAID_LABEL = "Overpaid"
SETTLED_LABEL = "All payments collected"


def total_expenses(expenses: Iterable[Mapping[str, Any]]) -> float:
    return round_currency(sum(coerce_amount(expense.get("total")) for expense in expenses))


def total_collected(payments: Iterable[Mapping[str, Any]]) -> float:
    """Sum payment amounts whose status counts as collected."""

    return round_currency(
        sum(
            coerce_amount(payment.get("amount"))
            for payment in payments
            if is_collected(payment.get("status"))
        )
    )


def outstanding(expenses_total: float, collected_total: float) -> float:
    """Positive when money is still owed, negative when players overpaid."""

    return round_currency(expenses_total - collected_total)


def collection_rate(expenses_total: float, collected_total: float) -> float:
    """Percentage of expenses collected; zero when there are no expenses."""

    if expenses_total == 0:
        return 0.0
    return collected_total / expenses_total * 100


def outstanding_label(amount: float) -> str:
    if amount > 0:
        return AMOUNT_DUE_LABEL
    if amount < 0:
        return OVERPAID_LABEL
    return SETTLED_LABEL


def collection_tone(rate: float) -> str:
    """Bucket a collection rate for colouring progress bars."""

    if rate >= 80:
        return "good"
    if rate >= 50:
        return "fair"
    return "low"


@dataclass(frozen=True, slots=True)
class FinancialOverview:
    """Numbers behind the financial overview widget."""

    total_expenses: float
    total_collected: float
    outstanding: float
    collection_rate: float
    currency: str = "USD"

    @property
    def outstanding_label(self) -> str:
        return outstanding_label(self.outstanding)

    @property
    def progress(self) -> float:
        """Collection rate clamped to the 0-100 range of a progress bar."""

        return min(max(self.collection_rate, 0.0), 100.0)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "totalExpenses": self.total_expenses,
            "totalCollected": self.total_collected,
            "outstanding": self.outstanding,
            "outstandingLabel": self.outstanding_label,
            "outstandingDisplay": format_currency(abs(self.outstanding), self.currency),
            "collectionRate": round(self.collection_rate, 2),
            "collectionRateDisplay": f"{self.collection_rate:.1f}%",
            "collectionTone": collection_tone(self.collection_rate),
            "progress": self.progress,
            "currency": self.currency,
        }


def financial_overview(
    expenses: Sequence[Mapping[str, Any]],
    payments: Sequence[Mapping[str, Any]],
    *,
    currency: str = "USD",
) -> FinancialOverview:
    expenses_total = total_expenses(expenses)
    collected_total = total_collected(payments)
    return FinancialOverview(
        total_expenses=expenses_total,
        total_collected=collected_total,
        outstanding=outstanding(expenses_total, collected_total),
        collection_rate=collection_rate(expenses_total, collected_total),
        currency=currency,
    )


@dataclass(frozen=True, slots=True)
class StatCard:
    """One tile of the dashboard stat strip."""

    name: str
    value: str
    trend: str = "neutral"

    def as_dict(self) -> Dict[str, str]:
        return {"name": self.name, "value": self.value, "trend": self.trend}


def dashboard_stats(
    teams: Sequence[Mapping[str, Any]],
    players: Sequence[Mapping[str, Any]],
    expenses: Sequence[Mapping[str, Any]],
    payments: Sequence[Mapping[str, Any]],
    *,
    currency: str = "USD",
) -> List[StatCard]:
    overview = financial_overview(expenses, payments, currency=currency)
    active_players = sum(1 for player in players if player.get("isActive"))
    rate_trend = "up" if overview.collection_rate >= 80 else "down"
    return [
        StatCard("Active Teams", str(len(teams))),
        StatCard("Active Players", str(active_players)),
        StatCard("Total Expenses", format_currency(overview.total_expenses, currency)),
        StatCard("Total Collected", format_currency(overview.total_collected, currency), "up"),
        StatCard(
            overview.outstanding_label,
            format_currency(abs(overview.outstanding), currency),
            "up" if overview.outstanding > 0 else "down",
        ),
        StatCard("Collection Rate", f"{overview.collection_rate:.1f}%", rate_trend),
    ]


def payment_status_totals(payments: Iterable[Mapping[str, Any]]) -> Dict[str, float]:
    """Sum amounts overall and per known status."""

    totals: Dict[str, float] = {"total": 0.0}
    totals.update({status.value: 0.0 for status in PaymentStatus})
    for payment in payments:
        amount = coerce_amount(payment.get("amount"))
        totals["total"] += amount
        status = str(payment.get("status") or "")
        if status in totals:
            totals[status] += amount
    return {key: round_currency(value) for key, value in totals.items()}
