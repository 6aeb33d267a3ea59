"""Mini README: Sport registry resolving sport keys to expense schemas.

Structure:
    * SportRegistry - manages registration and lookup of ``SportConfig``
      descriptors, with a designated fallback sport for unknown keys.

The registry is the only place that knows which cost fields exist for a
sport. Expense validation, total calculation and the expense table all
consult it, so adding a sport means registering one more descriptor.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from .base import CATEGORY_DETAILS, ExpenseCategory, SportConfig
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class SportRegistry:
    """Simple registry mapping sport keys to descriptors."""

    def __init__(self, *, default_key: str = "badminton") -> None:
        self._sports: Dict[str, SportConfig] = {}
        self.default_key = default_key.lower()

    def register(self, config: SportConfig) -> None:
        """Register (or replace) the descriptor for ``config.key``."""

        identifier = config.key.lower()
        LOGGER.debug("Registering sport '%s'", identifier)
        self._sports[identifier] = config

    def available_sports(self) -> Iterable[str]:
        """Return sport keys in registration order."""

        return list(self._sports.keys())

    def has_sport(self, key: Optional[str]) -> bool:
        return bool(key) and key.lower() in self._sports

    def get_config(self, key: Optional[str]) -> SportConfig:
        """Return the descriptor for ``key``, falling back to the default sport."""

        if key and key.lower() in self._sports:
            return self._sports[key.lower()]
        if self.default_key not in self._sports:
            raise KeyError(f"Default sport '{self.default_key}' is not registered")
        if key:
            LOGGER.debug("Unknown sport '%s'; using '%s'", key, self.default_key)
        return self._sports[self.default_key]

    def sports_list(self) -> List[Dict[str, str]]:
        """Return ``{key, name, icon}`` entries for sport pickers."""

        return [
            {"key": key, "name": config.name, "icon": config.icon}
            for key, config in self._sports.items()
        ]

    def total_fields(self, key: Optional[str]) -> List[str]:
        """Keys of the cost fields that sum into an expense total."""

        return [expense_field.key for expense_field in self.get_config(key).total_fields]

    def category_totals(self, expense: Mapping[str, Any]) -> Dict[str, float]:
        """Sum an expense's counted fields per reporting category."""

        totals = {category.value: 0.0 for category in ExpenseCategory}
        for expense_field in self.get_config(expense.get("sport")).total_fields:
            totals[expense_field.category.value] += expense_field.amount_from(expense)
        return totals

    @staticmethod
    def categories() -> Dict[str, Dict[str, str]]:
        return {category.value: dict(details) for category, details in CATEGORY_DETAILS.items()}


REGISTRY = SportRegistry()
