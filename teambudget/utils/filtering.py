"""Mini README: Client-side filtering and ordering helpers.

Structure:
    * filter_players - search/status/team filters used by the roster view.
    * filter_by_period - month/year filter for expenses and payments.
    * sort_by_property / group_by - generic list helpers for tables.

All helpers are pure: they never mutate the input records.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional


def filter_players(
    players: Iterable[Mapping[str, Any]],
    *,
    search: str = "",
    status: str = "all",
    team_id: Optional[str] = None,
) -> List[Mapping[str, Any]]:
    """Filter players by name/email substring, active flag and team."""

    if status not in {"all", "active", "inactive"}:
        raise ValueError(f"Unsupported player status filter: {status}")
    needle = search.strip().lower()
    matches: List[Mapping[str, Any]] = []
    for player in players:
        if needle:
            name = str(player.get("name") or "").lower()
            email = str(player.get("email") or "").lower()
            if needle not in name and needle not in email:
                continue
        active = bool(player.get("isActive"))
        if status == "active" and not active:
            continue
        if status == "inactive" and active:
            continue
        if team_id is not None and player.get("teamId") != team_id:
            continue
        matches.append(player)
    return matches


def filter_by_period(
    records: Iterable[Mapping[str, Any]], month: Optional[str], year: Optional[int]
) -> List[Mapping[str, Any]]:
    """Keep records matching ``month`` and ``year``; ``None`` disables a criterion."""

    selected: List[Mapping[str, Any]] = []
    for record in records:
        if month is not None and record.get("month") != month:
            continue
        if year is not None:
            try:
                record_year = int(record.get("year"))
            except (TypeError, ValueError):
                continue
            if record_year != int(year):
                continue
        selected.append(record)
    return selected


def sort_by_property(
    records: Iterable[Mapping[str, Any]], prop: str, *, ascending: bool = True
) -> List[Mapping[str, Any]]:
    """Stable sort on ``prop``; records missing the property go last."""

    items = list(records)
    present = [record for record in items if record.get(prop) is not None]
    missing = [record for record in items if record.get(prop) is None]
    ordered = sorted(present, key=lambda record: record[prop], reverse=not ascending)
    return ordered + missing


def group_by(records: Iterable[Mapping[str, Any]], prop: str) -> Dict[Any, List[Mapping[str, Any]]]:
    groups: Dict[Any, List[Mapping[str, Any]]] = {}
    for record in records:
        groups.setdefault(record.get(prop), []).append(record)
    return groups
