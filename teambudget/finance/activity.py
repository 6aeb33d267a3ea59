"""Mini README: Recent activity feed for the dashboard.

Structure:
    * ActivityKind - event types shown in the feed.
    * ActivityItem - one feed entry with its timestamp.
    * recent_activity - merge player, expense and payment events newest first.

Entries without a usable ``createdAt`` are left out entirely rather than
being pushed to either end of the feed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..sports import coerce_amount
from ..utils.formatting import format_currency
from ..utils.timestamps import parse_timestamp
from .calculations import is_collected


class ActivityKind(str, Enum):
    PLAYER_ADDED = "player_added"
    EXPENSE_RECORDED = "expense_recorded"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_RECORDED = "payment_recorded"


@dataclass(frozen=True, slots=True)
class ActivityItem:
    kind: ActivityKind
    message: str
    timestamp: datetime
    entity_id: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "entityId": self.entity_id,
        }


def _player_events(players: Iterable[Mapping[str, Any]]) -> Iterable[ActivityItem]:
    for player in players:
        timestamp = parse_timestamp(player.get("createdAt"))
        if timestamp is None:
            continue
        name = player.get("name") or "a player"
        yield ActivityItem(
            ActivityKind.PLAYER_ADDED, f"Added {name} to the team", timestamp, player.get("id")
        )


def _expense_events(expenses: Iterable[Mapping[str, Any]], currency: str) -> Iterable[ActivityItem]:
    for expense in expenses:
        timestamp = parse_timestamp(expense.get("createdAt"))
        if timestamp is None:
            continue
        amount = format_currency(coerce_amount(expense.get("total")), currency)
        period = " ".join(str(part) for part in (expense.get("month"), expense.get("year")) if part)
        message = f"Recorded {amount} expense" + (f" for {period}" if period else "")
        yield ActivityItem(ActivityKind.EXPENSE_RECORDED, message, timestamp, expense.get("id"))


def _payment_events(payments: Iterable[Mapping[str, Any]], currency: str) -> Iterable[ActivityItem]:
    for payment in payments:
        timestamp = parse_timestamp(payment.get("createdAt"))
        if timestamp is None:
            continue
        amount = format_currency(coerce_amount(payment.get("amount")), currency)
        if is_collected(payment.get("status")):
            kind, message = ActivityKind.PAYMENT_RECEIVED, f"Received {amount} payment"
        else:
            status = payment.get("status") or "pending"
            kind, message = ActivityKind.PAYMENT_RECORDED, f"Recorded {amount} {status} payment"
        yield ActivityItem(kind, message, timestamp, payment.get("id"))


def recent_activity(
    players: Iterable[Mapping[str, Any]],
    expenses: Iterable[Mapping[str, Any]],
    payments: Iterable[Mapping[str, Any]],
    limit: int = 5,
    *,
    currency: str = "USD",
) -> List[ActivityItem]:
    """Return the ``limit`` newest events across all three collections."""

    if limit <= 0:
        return []
    events = [
        *_player_events(players),
        *_expense_events(expenses, currency),
        *_payment_events(payments, currency),
    ]
    events.sort(key=lambda item: item.timestamp, reverse=True)
    return events[:limit]
