"""Mentors schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MentorProfileCreate(BaseModel):
    """Create mentor profile request."""

    user_id: UUID
    title: str = Field(min_length=2, max_length=128)
    description: str = Field(default="", max_length=5000)
    specialties: list[str] = Field(default_factory=list, max_length=20)
    experience_years: int = Field(default=0, ge=0, le=80)
    hourly_rate: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class MentorProfileUpdate(BaseModel):
    """Update mentor profile request."""

    title: str | None = Field(default=None, min_length=2, max_length=128)
    description: str | None = Field(default=None, max_length=5000)
    specialties: list[str] | None = Field(default=None, max_length=20)
    experience_years: int | None = Field(default=None, ge=0, le=80)
    hourly_rate: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    is_active: bool | None = None
    is_approved: bool | None = None


class MentorProfileRead(BaseModel):
    """Mentor profile response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str
    specialties: list[str]
    experience_years: int
    hourly_rate: Decimal | None
    is_active: bool
    is_approved: bool
    created_at: datetime
    updated_at: datetime
