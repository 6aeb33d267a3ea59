"""Mini README: Request bodies accepted by the JSON service.

Structure:
    * Credentials / PasswordBody / EmailBody / ProfileUpdate - account forms.
    * TeamPayload / PlayerPayload / ExpensePayload / PaymentPayload - entity
      forms, camelCase on the wire.
    * TeamSelection / SportSelection - selection changes.

Models only shape the JSON. Business rules live in ``teambudget.validation``
so every client gets the same per-field messages. ``payload()`` returns just
the fields the client sent, which makes the same model usable for create and
partial update.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class Credentials(_Body):
    email: str
    password: str


class PasswordBody(_Body):
    password: str


class EmailBody(_Body):
    email: str


class ProfileUpdate(_Body):
    display_name: Optional[str] = Field(None, alias="displayName")
    photo_url: Optional[str] = Field(None, alias="photoURL")
    email: Optional[str] = None
    password: Optional[str] = None


class TeamPayload(_Body):
    name: Optional[str] = None
    sport_type: Optional[str] = Field(None, alias="sportType")
    currency: Optional[str] = None
    location: Optional[str] = None
    schedule: Optional[str] = None
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    payment_details: Optional[str] = Field(None, alias="paymentDetails")


class PlayerPayload(_Body):
    team_id: Optional[str] = Field(None, alias="teamId")
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = Field(None, alias="isActive")


class ExpensePayload(_Body):
    """Expense form; sport specific cost fields pass through as extras."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    team_id: Optional[str] = Field(None, alias="teamId")
    sport: Optional[str] = None
    month: Optional[str] = None
    year: Optional[Union[int, str]] = None
    players_count: Optional[Union[int, str]] = Field(None, alias="playersCount")
    notes: Optional[str] = None
    shuttlecock_used: Optional[List[Dict[str, Any]]] = Field(None, alias="shuttlecockUsed")

    def payload(self) -> Dict[str, Any]:
        return {**super().payload(), **(self.model_extra or {})}


class PaymentPayload(_Body):
    team_id: Optional[str] = Field(None, alias="teamId")
    player_id: Optional[str] = Field(None, alias="playerId")
    month: Optional[str] = None
    year: Optional[Union[int, str]] = None
    amount: Optional[Union[float, str]] = None
    status: Optional[str] = None
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    notes: Optional[str] = None


class TeamSelection(_Body):
    team_id: Optional[str] = Field(None, alias="teamId")


class SportSelection(_Body):
    sport: Optional[str] = None
