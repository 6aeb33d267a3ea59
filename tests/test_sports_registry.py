"""Mini README: Tests for the sport registry and built-in descriptors.

Ensures the built-in sports register on import, unknown keys fall back to
the default sport and registry driven helpers read custom expense fields.
"""

from __future__ import annotations

import pytest

from teambudget.sports import (
    REGISTRY,
    ExpenseCategory,
    ExpenseField,
    SportConfig,
    SportRegistry,
    coerce_amount,
)


def test_registry_contains_builtin_sports() -> None:
    """All built-in sports register on import."""

    assert list(REGISTRY.available_sports()) == [
        "badminton",
        "cricket",
        "football",
        "basketball",
        "tennis",
    ]


def test_unknown_sport_falls_back_to_badminton() -> None:
    """Unknown keys resolve to the default sport."""

    assert REGISTRY.get_config("curling").key == "badminton"
    assert REGISTRY.get_config(None).key == "badminton"
    assert REGISTRY.get_config("CRICKET").key == "cricket"


def test_describe_exports_camel_case_schema() -> None:
    """The exported schema uses camelCase keys."""

    described = REGISTRY.get_config("badminton").describe()

    assert described["defaultFieldOrder"] == ["indoor", "shuttlecock", "equipment", "other"]
    assert described["expenseFields"]["indoor"]["countsTowardTotal"] is True
    assert described["dynamicFields"]["shuttlecockUsed"]["type"] == "multi-select"


def test_category_totals_reads_custom_expense_mapping() -> None:
    """Custom expenses contribute their nested amount."""

    expense = {
        "sport": "cricket",
        "ground": 100,
        "umpire": 30,
        "custom": {"name": "Scorer", "amount": "15.50"},
    }

    totals = REGISTRY.category_totals(expense)

    assert totals[ExpenseCategory.VENUE.value] == pytest.approx(100)
    assert totals[ExpenseCategory.PERSONNEL.value] == pytest.approx(30)
    assert totals[ExpenseCategory.MISC.value] == pytest.approx(15.5)


def test_new_sport_only_needs_registration() -> None:
    """Registering a descriptor is enough to add a sport."""

    registry = SportRegistry(default_key="hockey")
    registry.register(
        SportConfig(
            key="hockey",
            name="Hockey",
            icon="🏑",
            expense_fields=(
                ExpenseField("rink", "Rink Rental", ExpenseCategory.VENUE),
                ExpenseField("deposit", "Refundable Deposit", counts_toward_total=False),
            ),
        )
    )

    assert registry.total_fields("hockey") == ["rink"]
    assert registry.sports_list() == [{"key": "hockey", "name": "Hockey", "icon": "🏑"}]


def test_registry_without_default_raises() -> None:
    """A registry missing its default sport fails loudly."""

    with pytest.raises(KeyError):
        SportRegistry().get_config("anything")


def test_descriptor_rejects_unknown_field_order() -> None:
    """Field order may only name declared fields."""

    with pytest.raises(ValueError):
        SportConfig(
            key="broken",
            name="Broken",
            icon="?",
            expense_fields=(ExpenseField("court", "Court"),),
            default_field_order=("court", "ghost"),
        )


def test_coerce_amount_handles_blank_and_formatted_values() -> None:
    """Blanks are zero, separators are accepted and non-finite values raise."""

    assert coerce_amount(None) == 0.0
    assert coerce_amount("") == 0.0
    assert coerce_amount("1,250.75") == pytest.approx(1250.75)
    with pytest.raises(ValueError):
        coerce_amount("twelve")
    with pytest.raises(ValueError):
        coerce_amount(True)
    with pytest.raises(ValueError):
        coerce_amount("-inf")
