"""Mini README: Built-in sport descriptors.

Registers badminton, cricket, football, basketball and tennis with the
shared ``REGISTRY`` on import. New sports follow the same pattern: build a
``SportConfig`` and call ``REGISTRY.register``.
"""

from __future__ import annotations

from .base import DynamicField, ExpenseCategory, ExpenseField, FieldKind, SportConfig
from .registry import REGISTRY

VENUE = ExpenseCategory.VENUE
EQUIPMENT = ExpenseCategory.EQUIPMENT
PERSONNEL = ExpenseCategory.PERSONNEL
MISC = ExpenseCategory.MISC

BADMINTON = SportConfig(
    key="badminton",
    name="Badminton",
    icon="🏸",
    expense_fields=(
        ExpenseField("indoor", "Indoor Court Fee", VENUE),
        ExpenseField("shuttlecock", "Shuttlecock Cost", EQUIPMENT),
        ExpenseField("equipment", "Equipment Cost", EQUIPMENT),
        ExpenseField("other", "Other Expenses", MISC),
    ),
    dynamic_fields=(
        DynamicField(
            "shuttlecockUsed",
            "Shuttlecocks Used",
            FieldKind.MULTI_SELECT,
            (
                "Aeroplane",
                "Ling-Mei",
                "Yonex AS-50",
                "Yonex AS-40",
                "Victor Gold",
                "Li-Ning A+600",
                "Custom",
            ),
        ),
    ),
    default_field_order=("indoor", "shuttlecock", "equipment", "other"),
)

CRICKET = SportConfig(
    key="cricket",
    name="Cricket",
    icon="🏏",
    expense_fields=(
        ExpenseField("ground", "Ground Rental", VENUE),
        ExpenseField("indoor", "Indoor Facility Fee", VENUE),
        ExpenseField("tournaments", "Tournament Fees", VENUE),
        ExpenseField("ball", "Cricket Balls", EQUIPMENT),
        ExpenseField("batting", "Batting Gear", EQUIPMENT),
        ExpenseField("protective", "Protective Gear", EQUIPMENT),
        ExpenseField("umpire", "Umpire Fees", PERSONNEL),
        ExpenseField("custom", "Custom Expense", MISC, FieldKind.CUSTOM_EXPENSE),
        ExpenseField("other", "Other Expenses", MISC),
    ),
    dynamic_fields=(
        DynamicField("ballType", "Ball Type", FieldKind.SELECT, ("Leather", "Tennis", "Plastic", "Other")),
    ),
    default_field_order=(
        "ground",
        "indoor",
        "tournaments",
        "ball",
        "batting",
        "protective",
        "umpire",
        "custom",
        "other",
    ),
)

FOOTBALL = SportConfig(
    key="football",
    name="Football",
    icon="⚽",
    expense_fields=(
        ExpenseField("field", "Field Rental", VENUE),
        ExpenseField("balls", "Football Cost", EQUIPMENT),
        ExpenseField("jersey", "Jersey Cost", EQUIPMENT),
        ExpenseField("referee", "Referee Fees", PERSONNEL),
        ExpenseField("other", "Other Expenses", MISC),
    ),
    default_field_order=("field", "balls", "jersey", "referee", "other"),
)

BASKETBALL = SportConfig(
    key="basketball",
    name="Basketball",
    icon="🏀",
    expense_fields=(
        ExpenseField("court", "Court Rental", VENUE),
        ExpenseField("balls", "Basketball Cost", EQUIPMENT),
        ExpenseField("jersey", "Jersey Cost", EQUIPMENT),
        ExpenseField("other", "Other Expenses", MISC),
    ),
    default_field_order=("court", "balls", "jersey", "other"),
)

TENNIS = SportConfig(
    key="tennis",
    name="Tennis",
    icon="🎾",
    expense_fields=(
        ExpenseField("court", "Court Rental", VENUE),
        ExpenseField("balls", "Tennis Balls", EQUIPMENT),
        ExpenseField("racket", "Racket Maintenance", EQUIPMENT),
        ExpenseField("other", "Other Expenses", MISC),
    ),
    dynamic_fields=(
        DynamicField(
            "ballType", "Ball Type", FieldKind.SELECT, ("Regular", "Championship", "Practice", "Other")
        ),
    ),
    default_field_order=("court", "balls", "racket", "other"),
)

for _config in (BADMINTON, CRICKET, FOOTBALL, BASKETBALL, TENNIS):
    REGISTRY.register(_config)
