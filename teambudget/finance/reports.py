"""Mini README: Registry driven expense reports.

Structure:
    * ExpenseTable / expense_table - columns, rows and footer totals for a
      sport's expense table.
    * category_breakdown - spend per reporting category across expenses.

Column sets come from the sport registry; nothing here names a cost field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..sports import REGISTRY, SportRegistry, coerce_amount
from .calculations import round_currency


@dataclass(slots=True)
class ExpenseTable:
    """Tabular view of expenses for one sport."""

    sport: str
    columns: List[Dict[str, str]]
    rows: List[Dict[str, Any]] = field(default_factory=list)
    totals: Dict[str, float] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "sport": self.sport,
            "columns": self.columns,
            "rows": self.rows,
            "totals": self.totals,
        }


def expense_table(
    expenses: Iterable[Mapping[str, Any]],
    sport_key: Optional[str],
    *,
    registry: SportRegistry = REGISTRY,
) -> ExpenseTable:
    """Lay out ``expenses`` using the columns of ``sport_key``."""

    config = registry.get_config(sport_key)
    cost_fields = config.ordered_fields
    columns = [{"key": "period", "label": "Month/Year"}]
    columns.extend({"key": cost_field.key, "label": cost_field.label} for cost_field in cost_fields)
    columns.extend(
        [
            {"key": "total", "label": "Total"},
            {"key": "playersCount", "label": "Players"},
            {"key": "perPerson", "label": "Per Person"},
        ]
    )

    totals = {cost_field.key: 0.0 for cost_field in cost_fields}
    totals["total"] = 0.0
    rows: List[Dict[str, Any]] = []
    for expense in expenses:
        row: Dict[str, Any] = {
            "id": expense.get("id"),
            "period": f"{expense.get('month', '')} {expense.get('year', '')}".strip(),
        }
        for cost_field in cost_fields:
            amount = cost_field.amount_from(expense)
            row[cost_field.key] = amount
            totals[cost_field.key] += amount
        row["total"] = coerce_amount(expense.get("total"))
        row["playersCount"] = expense.get("playersCount", 0)
        row["perPerson"] = coerce_amount(expense.get("perPerson"))
        row["notes"] = expense.get("notes", "")
        totals["total"] += row["total"]
        rows.append(row)

    return ExpenseTable(
        sport=config.key,
        columns=columns,
        rows=rows,
        totals={key: round_currency(value) for key, value in totals.items()},
    )


def category_breakdown(
    expenses: Iterable[Mapping[str, Any]], *, registry: SportRegistry = REGISTRY
) -> Dict[str, float]:
    """Sum category totals over expenses, each read with its own sport schema."""

    breakdown: Dict[str, float] = {category: 0.0 for category in registry.categories()}
    for expense in expenses:
        for category, amount in registry.category_totals(expense).items():
            breakdown[category] += amount
    return {category: round_currency(amount) for category, amount in breakdown.items()}
