"""Mini README: Centralised configuration models and helpers for Team Budget.

Structure:
    * ExpenseSportPolicy - how new expenses pick their ``sport`` key.
    * TeamBudgetSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables (prefixed with
    ``TEAMBUDGET_``), choose where preferences and the optional store snapshot
    live, and specify service ports. The configuration is cached so the cost
    of validation is incurred only once per process.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExpenseSportPolicy(str, Enum):
    """Source of the ``sport`` key stamped on new expenses."""

    CURRENT_SPORT = "current_sport"
    TEAM_SPORT = "team_sport"


class TeamBudgetSettings(BaseSettings):
    """Runtime configuration for the Team Budget service."""

    model_config = SettingsConfigDict(
        env_prefix="TEAMBUDGET_",
        env_file=".env",
        case_sensitive=False,
    )

    environment: str = Field(
        "development",
        description="Environment label (development, test or production) selecting the log level.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding local preferences and the optional store snapshot.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Address uvicorn binds the JSON service to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the JSON service exposes.",
        ge=1,
        le=65535,
    )
    default_sport: str = Field(
        "badminton",
        description="Sport key selected when no preference has been stored yet.",
    )
    expense_sport_policy: ExpenseSportPolicy = Field(
        ExpenseSportPolicy.CURRENT_SPORT,
        description=(
            "Whether new expenses take the globally selected sport or the sport"
            " of the team they belong to. An explicit ``sport`` always wins."
        ),
    )
    recent_activity_limit: int = Field(
        5,
        description="Number of entries shown in the dashboard activity feed.",
        ge=1,
    )
    recent_login_seconds: int = Field(
        300,
        description="Window after sign-in during which sensitive account changes are allowed.",
        ge=0,
    )
    store_file: Optional[Path] = Field(
        None,
        description=(
            "Optional JSON file the in-memory document store is loaded from and"
            " written back to after each change. Leave unset for a volatile store."
        ),
    )
    preferences_file: str = Field(
        "preferences.json",
        description="File name, inside the data directory, for local UI preferences.",
    )

    @field_validator("data_directory", mode="before")
    @classmethod
    def _prepare_data_directory(cls, value: str | Path) -> Path:
        """Expand ``~`` and create the data directory up front."""

        directory = Path(value).expanduser().resolve()
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    @field_validator("store_file", mode="before")
    @classmethod
    def _expand_store_file(cls, value: Optional[str | Path]) -> Optional[Path]:
        if value in (None, ""):
            return None
        return Path(value).expanduser().resolve()

    @property
    def preferences_path(self) -> Path:
        """Absolute location of the local preference file."""

        return self.data_directory / self.preferences_file


@lru_cache()
def get_settings() -> TeamBudgetSettings:
    """Build the settings once per process and hand out the same instance."""

    return TeamBudgetSettings()
