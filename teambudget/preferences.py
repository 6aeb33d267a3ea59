"""Mini README: Local preference store for UI restore hints.

Structure:
    * PreferenceStore - tiny JSON backed key/value store.

Holds the last selected team id and sport key. Values are hints only: the
data state always checks them against live data before using them. Without
a path the store lives purely in memory.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .logging_utils import get_logger

LOGGER = get_logger(__name__)

CURRENT_TEAM_KEY = "currentTeamId"
CURRENT_SPORT_KEY = "currentSport"


class PreferenceStore:
    """Persist small string preferences between runs."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path
        self._values: Dict[str, Any] = {}
        if path is not None and path.exists():
            try:
                loaded = json.loads(path.read_text(encoding="utf-8"))
            except json.JSONDecodeError:
                LOGGER.warning("Ignoring unreadable preference file %s", path)
                loaded = {}
            if isinstance(loaded, dict):
                self._values = loaded

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._values.get(key, default)
        return value if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._save()

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._values, indent=2), encoding="utf-8")
