"""Mini README: Descriptor types for sport-specific expense schemas.

Structure:
    * FieldKind - how an expense field is entered and stored.
    * ExpenseCategory - reporting buckets (venue, equipment, ...).
    * ExpenseField - one cost input of a sport.
    * DynamicField - informational selector that never affects totals.
    * SportConfig - complete descriptor for a sport.

Descriptors are immutable so the registry can hand the same instances to
every caller. A descriptor knows how to read its own amount out of a stored
expense, which keeps knowledge of field shapes in one place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple


class FieldKind(str, Enum):
    """Input kinds supported by expense and dynamic fields."""

    NUMBER = "number"
    CUSTOM_EXPENSE = "custom-expense"
    SELECT = "select"
    MULTI_SELECT = "multi-select"


class ExpenseCategory(str, Enum):
    """Reporting buckets that cost fields roll up into."""

    VENUE = "venue"
    EQUIPMENT = "equipment"
    PERSONNEL = "personnel"
    MISC = "misc"


CATEGORY_DETAILS: Dict[ExpenseCategory, Dict[str, str]] = {
    ExpenseCategory.VENUE: {
        "label": "Venue Costs",
        "description": "Court rentals, field fees, facility costs",
    },
    ExpenseCategory.EQUIPMENT: {
        "label": "Equipment",
        "description": "Balls, gear, maintenance, supplies",
    },
    ExpenseCategory.PERSONNEL: {
        "label": "Personnel",
        "description": "Umpire fees, referee costs, staff payments",
    },
    ExpenseCategory.MISC: {
        "label": "Miscellaneous",
        "description": "Other expenses, custom costs",
    },
}


def coerce_amount(value: Any) -> float:
    """Convert a stored or submitted amount to a finite ``float``; blanks count as zero."""

    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise ValueError("Amounts must be numeric, not booleans")
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return 0.0
        try:
            amount = float(text)
        except ValueError as error:
            raise ValueError(f"Invalid amount: {value!r}") from error
    if not math.isfinite(amount):
        raise ValueError(f"Amounts must be finite: {value!r}")
    return amount


@dataclass(frozen=True, slots=True)
class ExpenseField:
    """A cost input belonging to a sport."""

    key: str
    label: str
    category: ExpenseCategory = ExpenseCategory.MISC
    kind: FieldKind = FieldKind.NUMBER
    counts_toward_total: bool = True

    def amount_from(self, expense: Mapping[str, Any]) -> float:
        """Read this field's amount from an expense payload."""

        raw = expense.get(self.key)
        if self.kind is FieldKind.CUSTOM_EXPENSE and isinstance(raw, Mapping):
            raw = raw.get("amount")
        return coerce_amount(raw)

    def normalise(self, value: Any) -> Any:
        """Return the value in its stored shape with the amount coerced."""

        if self.kind is FieldKind.CUSTOM_EXPENSE and isinstance(value, Mapping):
            return {
                "name": str(value.get("name") or "").strip(),
                "amount": coerce_amount(value.get("amount")),
            }
        return coerce_amount(value)

    def describe(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "category": self.category.value,
            "type": self.kind.value,
            "countsTowardTotal": self.counts_toward_total,
        }


@dataclass(frozen=True, slots=True)
class DynamicField:
    """Selector recorded alongside an expense purely for tracking."""

    key: str
    label: str
    kind: FieldKind = FieldKind.SELECT
    options: Tuple[str, ...] = ()

    def describe(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "type": self.kind.value,
            "options": list(self.options),
        }


@dataclass(frozen=True, slots=True)
class SportConfig:
    """Complete expense schema for one sport."""

    key: str
    name: str
    icon: str
    expense_fields: Tuple[ExpenseField, ...]
    dynamic_fields: Tuple[DynamicField, ...] = ()
    default_field_order: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        keys = [expense_field.key for expense_field in self.expense_fields]
        if len(keys) != len(set(keys)):
            raise ValueError(f"Sport '{self.key}' declares duplicate expense fields")
        unknown = set(self.default_field_order) - set(keys)
        if unknown:
            raise ValueError(
                f"Sport '{self.key}' orders unknown fields: {', '.join(sorted(unknown))}"
            )

    @property
    def ordered_fields(self) -> List[ExpenseField]:
        """Expense fields in display order; unordered fields follow declaration order."""

        by_key = {expense_field.key: expense_field for expense_field in self.expense_fields}
        ordered = [by_key[key] for key in self.default_field_order]
        ordered.extend(
            expense_field
            for expense_field in self.expense_fields
            if expense_field.key not in self.default_field_order
        )
        return ordered

    @property
    def total_fields(self) -> List[ExpenseField]:
        return [expense_field for expense_field in self.ordered_fields if expense_field.counts_toward_total]

    def get_field(self, key: str) -> ExpenseField:
        for expense_field in self.expense_fields:
            if expense_field.key == key:
                return expense_field
        raise KeyError(f"Sport '{self.key}' has no expense field '{key}'")

    def describe(self) -> Dict[str, Any]:
        """Export the descriptor for JSON responses."""

        return {
            "key": self.key,
            "name": self.name,
            "icon": self.icon,
            "expenseFields": {
                expense_field.key: expense_field.describe() for expense_field in self.ordered_fields
            },
            "dynamicFields": {
                dynamic_field.key: dynamic_field.describe() for dynamic_field in self.dynamic_fields
            },
            "defaultFieldOrder": [expense_field.key for expense_field in self.ordered_fields],
        }
