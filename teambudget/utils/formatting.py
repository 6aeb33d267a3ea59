"""Mini README: Display formatting helpers.

Structure:
    * format_currency - amount with the team's currency symbol.
    * format_date / format_datetime - human friendly timestamps.
    * get_initials - avatar initials for player cards.
"""

from __future__ import annotations

from typing import Any, Optional

from ..constants import CURRENCIES
from .timestamps import parse_timestamp


def format_currency(amount: Optional[float], currency: str = "USD") -> str:
    """Format ``amount`` with two decimals and the currency symbol."""

    value = float(amount or 0)
    details = CURRENCIES.get(currency.upper()) if currency else None
    symbol = details["symbol"] if details else f"{currency} "
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_date(timestamp: Any) -> str:
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return "N/A"
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_datetime(timestamp: Any) -> str:
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return "N/A"
    return f"{parsed:%b} {parsed.day}, {parsed.year}, {parsed:%I:%M %p}"


def get_initials(name: Optional[str]) -> str:
    """Return up to two upper-case initials, ``?`` for blank names."""

    if not name or not name.strip():
        return "?"
    return "".join(part[0].upper() for part in name.split() if part)[:2]
