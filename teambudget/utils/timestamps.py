"""Mini README: Timestamp helpers shared by the store, repository and reports.

Records carry epoch milliseconds, matching what the realtime tree stores.
Older rows may hold ISO strings instead, so readers go through
``parse_timestamp`` which accepts either form and returns ``None`` when the
value cannot be interpreted.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Optional


def now_millis() -> int:
    """Return the current time as integer epoch milliseconds."""

    return int(time.time() * 1000)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Interpret millisecond epochs, ISO strings or datetimes as aware datetimes."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        if value <= 0:
            return None
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None
