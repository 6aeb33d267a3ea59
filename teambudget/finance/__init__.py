"""Mini README: Finance utilities for team budgets.

Pure helpers turning in-memory expense and payment records into derived
numbers: stored expense totals, player balances, dashboard aggregates, the
recent-activity feed and registry driven expense tables.
"""

from .activity import ActivityItem, ActivityKind, recent_activity
from .aggregation import (
    FinancialOverview,
    StatCard,
    collection_rate,
    collection_tone,
    dashboard_stats,
    financial_overview,
    outstanding,
    outstanding_label,
    payment_status_totals,
    total_collected,
    total_expenses,
)
from .calculations import (
    ExpenseTotals,
    PlayerBalance,
    coerce_count,
    compute_expense_totals,
    is_collected,
    normalise_expense,
    player_balance,
    round_currency,
)
from .reports import ExpenseTable, category_breakdown, expense_table

__all__ = [
    "ActivityItem",
    "ActivityKind",
    "ExpenseTable",
    "ExpenseTotals",
    "FinancialOverview",
    "PlayerBalance",
    "StatCard",
    "category_breakdown",
    "coerce_count",
    "collection_rate",
    "collection_tone",
    "compute_expense_totals",
    "dashboard_stats",
    "expense_table",
    "financial_overview",
    "is_collected",
    "normalise_expense",
    "outstanding",
    "outstanding_label",
    "payment_status_totals",
    "player_balance",
    "recent_activity",
    "round_currency",
    "total_collected",
    "total_expenses",
]
