"""Scheduling ORM models."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, BaseModelMixin
from app.core.enums import DayOfWeekEnum


class TimeSlot(BaseModelMixin, Base):
    """Weekly availability window owned by one mentor.

    Overlapping slots for the same mentor and day are not prevented at the
    storage level.
    """

    __tablename__ = "time_slots"

    mentor_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_of_week: Mapped[DayOfWeekEnum] = mapped_column(
        SAEnum(DayOfWeekEnum, name="day_of_week_enum", native_enum=False),
        nullable=False,
    )
    # HH:MM, 24-hour, zero-padded
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
