"""Mini README: Tests for the Typer command line entry point."""

from __future__ import annotations

from typer.testing import CliRunner

from main_team_budget import cli


def test_sports_command_lists_registry() -> None:
    """The ``sports`` command prints every registered sport."""

    result = CliRunner().invoke(cli, ["sports"])

    assert result.exit_code == 0
    assert "Badminton [badminton] (default)" in result.output
    assert "Umpire Fees" in result.output
