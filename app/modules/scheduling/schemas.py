"""Scheduling schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import DayOfWeekEnum


class SlotCreate(BaseModel):
    """Create time slot request.

    Fields are optional plain strings so that missing, null or inverted values
    reach the service and are reported with user-facing messages.
    """

    mentor_id: UUID | None = None
    day_of_week: str | None = Field(default=None, max_length=16)
    start_time: str | None = Field(default=None, max_length=8)
    end_time: str | None = Field(default=None, max_length=8)
    is_recurring: bool = True


class SlotAvailabilityUpdate(BaseModel):
    """Set availability of a slot."""

    is_available: bool


class SlotToggleRequest(BaseModel):
    """Flip availability based on the value the client currently shows."""

    current_is_available: bool


class SlotRead(BaseModel):
    """Time slot response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    mentor_id: UUID
    day_of_week: DayOfWeekEnum
    start_time: str
    end_time: str
    is_available: bool
    is_recurring: bool
    created_at: datetime
    updated_at: datetime


class SlotDeleteResult(BaseModel):
    success: bool = True
    message: str


class AvailableDay(BaseModel):
    """Start times offered on one weekday."""

    day: DayOfWeekEnum
    times: list[str]


class AvailableTimesRead(BaseModel):
    """Bookable times of a mentor, flat and grouped by weekday."""

    time_slots: list[SlotRead]
    available_slots: list[AvailableDay]
    raw_times: list[str]
