"""Booking schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.core.enums import BookingStatusEnum, JoinStateEnum, RoleEnum, SessionTypeEnum


class BookingCreate(BaseModel):
    """Book a session with a mentor."""

    mentor_id: UUID
    scheduled_at: datetime
    duration_minutes: int | None = Field(default=None, gt=0, le=600)
    session_count: int | None = Field(default=None, gt=0, le=200)
    session_type: SessionTypeEnum = SessionTypeEnum.REGULAR
    subject: str | None = Field(default=None, max_length=255)
    notes: str | None = Field(default=None, max_length=5000)

    @model_validator(mode="after")
    def require_some_duration(self) -> "BookingCreate":
        if self.duration_minutes is None and self.session_count is None:
            raise ValueError("duration_minutes or session_count is required")
        return self


class BookingStatusUpdate(BaseModel):
    """Move a scheduled booking to a final status."""

    status: BookingStatusEnum
    reason: str | None = Field(default=None, max_length=512)


class JoinWindowRead(BaseModel):
    """Join button state for one session."""

    booking_id: UUID
    state: JoinStateEnum
    message: str
    can_join: bool
    opens_at: datetime
    closes_at: datetime
    session_end: datetime
    evaluated_at: datetime


class BookingRead(BaseModel):
    """Booking response schema with join state evaluated at request time."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    mentor_id: UUID
    scheduled_at: datetime
    duration_minutes: int | None
    session_count: int | None
    status: BookingStatusEnum
    session_type: SessionTypeEnum
    subject: str | None
    notes: str | None
    completed_at: datetime | None
    cancelled_at: datetime | None
    cancel_reason: str | None
    cancelled_by: RoleEnum | None = None
    created_at: datetime
    updated_at: datetime

    join_state: JoinStateEnum | None = None
    join_message: str | None = None


class StudentStatsRead(BaseModel):
    """Learning progress summary for a student."""

    total_sessions: int
    active_sessions: int
    completed_sessions: int
    cancelled_sessions: int
    hours_learned: float
    progress_rate: int
