"""Booking rows and availability result models."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RawBooking(BaseModel):
    """
    One booking row as supplied by the persistence layer.

    Either ``start_ts``/``end_ts`` timestamps or a local ``time`` with a
    ``duration`` (or explicit ``end_time``) must be present. Legacy column
    names from the reservations table are accepted as aliases.
    """
    model_config = ConfigDict(extra="ignore")

    start_ts: Optional[datetime] = None
    end_ts: Optional[datetime] = None
    time: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("time", "hora_inicio", "start_time")
    )
    end_time: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("end_time", "hora_fin")
    )
    duration: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("duration", "duracion_minutos")
    )
    status: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("status", "estado")
    )


class Slot(BaseModel):
    """Single candidate slot on the base grid."""
    time: str
    available: bool


class ConflictInterval(BaseModel):
    """A busy interval reported back to the caller."""
    start: str
    end: str


class SlotCheck(BaseModel):
    """Result of verifying one requested start time."""
    available: bool
    date: str
    start: str
    end: Optional[str] = None
    reason: Optional[str] = None  # invalid_input | not_working_day | outside_hours | too_soon | conflict
    conflicts: list[ConflictInterval] = Field(default_factory=list)
    message: str = ""


class AvailableDay(BaseModel):
    """Summary of a bookable day in a month view."""
    day: int
    date: str
    slots_count: int
    first_slot: str
    last_slot: str


class UnavailableDay(BaseModel):
    """A day that cannot be booked, with the reason."""
    day: int
    date: str
    reason: str  # past | not_working_day | blocked | no_slots


class MonthAvailability(BaseModel):
    """Calendar month availability for one service duration."""
    year: int
    month: int
    duration_minutes: int
    total_days: int
    working_days: list[int] = Field(default_factory=list)
    available_days: list[AvailableDay] = Field(default_factory=list)
    unavailable_days: list[UnavailableDay] = Field(default_factory=list)
