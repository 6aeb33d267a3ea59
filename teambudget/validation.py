"""Mini README: Input validation for team, player, expense and payment forms.

Structure:
    * ValidationError - ``ValueError`` carrying a ``{field: message}`` map.
    * ValidationResult - outcome of a validator call.
    * validate_team / validate_player / validate_expense / validate_payment.

Validators run before any write. With ``partial=True`` only the supplied
fields are checked, which is how updates are validated when the full record
is not known. Expense cost fields come from the sport registry.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from .constants import CURRENCIES, MAX_RECORD_YEAR, MIN_RECORD_YEAR, MONTHS, PAYMENT_METHODS, PaymentStatus
from .finance.calculations import coerce_count
from .sports import REGISTRY, SportRegistry, coerce_amount

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")


class ValidationError(ValueError):
    """Raised when submitted data fails validation."""

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        summary = "; ".join(f"{key}: {message}" for key, message in self.errors.items())
        super().__init__(summary or "Invalid data")


@dataclass(slots=True)
class ValidationResult:
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)


def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and bool(EMAIL_PATTERN.match(email))


def is_valid_phone(phone: Any) -> bool:
    if not phone:
        return True
    cleaned = re.sub(r"[\s\-()]", "", str(phone))
    return bool(PHONE_PATTERN.match(cleaned))


def _checks(data: Mapping[str, Any], key: str, partial: bool) -> bool:
    return not partial or key in data


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_name(errors: Dict[str, str], value: Any, noun: str) -> None:
    if _blank(value):
        errors["name"] = f"{noun} name is required"
    elif len(str(value).strip()) < 2:
        errors["name"] = f"{noun} name must be at least 2 characters"


def _check_period(errors: Dict[str, str], data: Mapping[str, Any], partial: bool) -> None:
    if _checks(data, "month", partial):
        if _blank(data.get("month")):
            errors["month"] = "Month is required"
        elif data.get("month") not in MONTHS:
            errors["month"] = "Please choose a valid month"
    if _checks(data, "year", partial):
        year = data.get("year")
        if _blank(year):
            errors["year"] = "Year is required"
        else:
            try:
                year_value = coerce_count(year)
            except ValueError:
                year_value = None
            if year_value is None or not MIN_RECORD_YEAR <= year_value <= MAX_RECORD_YEAR:
                errors["year"] = "Please enter a valid year"


def validate_team(data: Mapping[str, Any], *, partial: bool = False) -> ValidationResult:
    errors: Dict[str, str] = {}
    if _checks(data, "name", partial):
        _check_name(errors, data.get("name"), "Team")
    if _checks(data, "sportType", partial) and _blank(data.get("sportType")):
        errors["sportType"] = "Sport type is required"
    if _checks(data, "currency", partial):
        currency = data.get("currency")
        if _blank(currency):
            errors["currency"] = "Currency is required"
        elif str(currency).upper() not in CURRENCIES:
            errors["currency"] = "Unsupported currency"
    return ValidationResult(errors)


def validate_player(data: Mapping[str, Any], *, partial: bool = False) -> ValidationResult:
    errors: Dict[str, str] = {}
    if _checks(data, "name", partial):
        _check_name(errors, data.get("name"), "Player")
    if data.get("email") and not is_valid_email(data.get("email")):
        errors["email"] = "Please enter a valid email address"
    if not is_valid_phone(data.get("phone")):
        errors["phone"] = "Please enter a valid phone number"
    return ValidationResult(errors)


def validate_expense(
    data: Mapping[str, Any],
    *,
    partial: bool = False,
    registry: SportRegistry = REGISTRY,
) -> ValidationResult:
    """Validate an expense against the cost fields of its sport."""

    errors: Dict[str, str] = {}
    _check_period(errors, data, partial)

    config = registry.get_config(data.get("sport"))
    amounts: Dict[str, float] = {}
    for cost_field in config.expense_fields:
        if cost_field.key not in data:
            continue
        try:
            amount = cost_field.amount_from(data)
        except ValueError:
            errors[cost_field.key] = f"{cost_field.label} must be a number"
            continue
        if amount < 0:
            errors[cost_field.key] = f"{cost_field.label} cannot be negative"
        amounts[cost_field.key] = amount
    counted = [cost_field.key for cost_field in config.total_fields]
    touches_costs = any(key in data for key in counted)
    if (not partial or touches_costs) and sum(amounts.get(key, 0.0) for key in counted) <= 0:
        errors.setdefault("total", "At least one expense amount must be greater than 0")

    if "playersCount" in data:
        try:
            players_count = coerce_count(data.get("playersCount"))
        except ValueError:
            errors["playersCount"] = "Number of players must be a whole number"
        else:
            if players_count < 0:
                errors["playersCount"] = "Number of players cannot be negative"
    return ValidationResult(errors)


def validate_payment(data: Mapping[str, Any], *, partial: bool = False) -> ValidationResult:
    errors: Dict[str, str] = {}
    _check_period(errors, data, partial)
    if _checks(data, "playerId", partial) and _blank(data.get("playerId")):
        errors["playerId"] = "Player is required"
    if _checks(data, "amount", partial):
        try:
            amount = coerce_amount(data.get("amount"))
        except ValueError:
            errors["amount"] = "Please enter a valid amount"
        else:
            if _blank(data.get("amount")) and not partial:
                errors["amount"] = "Amount is required"
            elif amount <= 0:
                errors["amount"] = "Amount must be greater than 0"
    if _checks(data, "status", partial):
        statuses = {status.value for status in PaymentStatus}
        if _blank(data.get("status")):
            errors["status"] = "Status is required"
        elif data.get("status") not in statuses:
            errors["status"] = "Unknown payment status"
    if _checks(data, "paymentMethod", partial):
        if _blank(data.get("paymentMethod")):
            errors["paymentMethod"] = "Payment method is required"
        elif data.get("paymentMethod") not in PAYMENT_METHODS:
            errors["paymentMethod"] = "Unknown payment method"
    return ValidationResult(errors)
