"""Mini README: Shared constants for teams, payments and reporting periods.

Structure:
    * MONTHS - English month names used as the ``month`` field of records.
    * CURRENCIES - supported currency codes with display symbols.
    * PAYMENT_METHODS / PaymentStatus - payment vocabularies.
    * COLLECTED_STATUSES - statuses whose amounts count as collected.
    * DEFAULT_TEAM_SETTINGS - defaults offered when creating a team.
    * Collection - names of the per-user collections in the document tree.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, List


MONTHS: List[str] = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

MIN_RECORD_YEAR = 2020
MAX_RECORD_YEAR = 2030

CURRENCIES: Dict[str, Dict[str, str]] = {
    "USD": {"symbol": "$", "name": "US Dollar"},
    "CAD": {"symbol": "$", "name": "Canadian Dollar"},
    "EUR": {"symbol": "€", "name": "Euro"},
    "GBP": {"symbol": "£", "name": "British Pound"},
    "AUD": {"symbol": "$", "name": "Australian Dollar"},
    "JPY": {"symbol": "¥", "name": "Japanese Yen"},
}

PAYMENT_METHODS: Dict[str, str] = {
    "zelle": "Zelle",
    "venmo": "Venmo",
    "paypal": "PayPal",
    "cash": "Cash",
    "bank_transfer": "Bank Transfer",
    "other": "Other",
}


class PaymentStatus(str, Enum):
    """Statuses a payment can be recorded with."""

    PAID = "paid"
    PENDING = "pending"
    PARTIAL = "partial"
    UNPAID = "unpaid"


# ``completed`` and ``confirmed`` are never offered for new payments but rows
# written by older clients still carry them.
COLLECTED_STATUSES: FrozenSet[str] = frozenset({"paid", "completed", "confirmed"})

DEFAULT_TEAM_SETTINGS: Dict[str, str] = {
    "currency": "USD",
    "sportType": "badminton",
    "paymentMethod": "zelle",
}


class Collection(str, Enum):
    """Per-user collections stored under ``users/{uid}``."""

    TEAMS = "teams"
    PLAYERS = "players"
    EXPENSES = "expenses"
    PAYMENTS = "payments"
    ATTENDANCE = "attendance"
    SETTINGS = "settings"


USERS_ROOT = "users"
