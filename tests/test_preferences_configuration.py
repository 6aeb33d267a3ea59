"""Mini README: Tests for local preferences and environment driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from teambudget.configuration import ExpenseSportPolicy, TeamBudgetSettings
from teambudget.preferences import CURRENT_TEAM_KEY, PreferenceStore


def test_preferences_round_trip_through_file(tmp_path: Path) -> None:
    """Saved preferences are read back by a new store."""

    path = tmp_path / "nested" / "preferences.json"
    store = PreferenceStore(path)

    store.set(CURRENT_TEAM_KEY, "team-1")

    assert PreferenceStore(path).get(CURRENT_TEAM_KEY) == "team-1"
    store.remove(CURRENT_TEAM_KEY)
    assert PreferenceStore(path).get(CURRENT_TEAM_KEY) is None


def test_unreadable_preferences_start_empty(tmp_path: Path) -> None:
    """A corrupt preference file is ignored."""

    path = tmp_path / "preferences.json"
    path.write_text("{not json", encoding="utf-8")

    assert PreferenceStore(path).get(CURRENT_TEAM_KEY, "fallback") == "fallback"


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Settings pick up ``TEAMBUDGET_`` variables."""

    monkeypatch.setenv("TEAMBUDGET_DATA_DIRECTORY", str(tmp_path / "data"))
    monkeypatch.setenv("TEAMBUDGET_EXPENSE_SPORT_POLICY", "team_sport")
    monkeypatch.setenv("TEAMBUDGET_INTERFACE_PORT", "9100")

    settings = TeamBudgetSettings()

    assert settings.expense_sport_policy is ExpenseSportPolicy.TEAM_SPORT
    assert settings.interface_port == 9100
    assert settings.data_directory.is_dir()
    assert settings.preferences_path == settings.data_directory / "preferences.json"
