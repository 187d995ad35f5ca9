"""Scheduling business logic layer."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db_session
from app.core.enums import DayOfWeekEnum, RoleEnum
from app.core.metrics import record_slot_change
from app.modules.identity.models import User
from app.modules.mentors.repository import MentorsRepository
from app.modules.scheduling.models import TimeSlot
from app.modules.scheduling.repository import SchedulingRepository
from app.modules.scheduling.schemas import AvailableDay, AvailableTimesRead, SlotCreate, SlotRead
from app.shared.exceptions import (
    ConflictException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from app.shared.utils import is_hhmm

settings = get_settings()
logger = logging.getLogger(__name__)

_DAYS_BY_NAME = {day.value.lower(): day for day in DayOfWeekEnum}
_DAY_ORDER = {day: index for index, day in enumerate(DayOfWeekEnum)}


def validate_slot_window(
    day_of_week: str | None,
    start_time: str | None,
    end_time: str | None,
) -> DayOfWeekEnum:
    """Validate raw slot input and return the canonical weekday.

    Times are compared lexically, which is correct for zero-padded HH:MM.
    """
    day_value = (day_of_week or "").strip()
    start_value = (start_time or "").strip()
    end_value = (end_time or "").strip()

    if not day_value or not start_value or not end_value:
        raise ValidationException("Please fill in all required fields")

    day = _DAYS_BY_NAME.get(day_value.lower())
    if day is None:
        raise ValidationException("Invalid day of week")
    if not is_hhmm(start_value) or not is_hhmm(end_value):
        raise ValidationException("Time must use HH:MM format")
    if start_value >= end_value:
        raise ValidationException("End time must be after start time")
    return day


def slots_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open interval overlap on HH:MM strings; touching slots do not overlap."""
    return start_a < end_b and start_b < end_a


def group_available_times(slots: Iterable[TimeSlot]) -> AvailableTimesRead:
    """Group available slot start times per weekday in calendar order."""
    available = [slot for slot in slots if slot.is_available]

    grouped: dict[DayOfWeekEnum, list[str]] = {}
    for slot in available:
        grouped.setdefault(DayOfWeekEnum(slot.day_of_week), []).append(slot.start_time)

    available_slots = [
        AvailableDay(day=day, times=sorted(times))
        for day, times in sorted(grouped.items(), key=lambda item: _DAY_ORDER[item[0]])
    ]
    return AvailableTimesRead(
        time_slots=[SlotRead.model_validate(slot) for slot in available],
        available_slots=available_slots,
        raw_times=sorted({slot.start_time for slot in available}),
    )


class SchedulingService:
    """Mentor weekly availability management."""

    def __init__(
        self,
        repository: SchedulingRepository,
        mentors_repository: MentorsRepository,
    ) -> None:
        self.repository = repository
        self.mentors_repository = mentors_repository

    @staticmethod
    def _ensure_can_manage(mentor_id: UUID, actor: User) -> None:
        if actor.role.name == RoleEnum.ADMIN:
            return
        if actor.role.name == RoleEnum.MENTOR and actor.id == mentor_id:
            return
        raise UnauthorizedException("You cannot manage this schedule")

    async def _get_slot(self, slot_id: UUID) -> TimeSlot:
        slot = await self.repository.get_slot_by_id(slot_id)
        if slot is None:
            raise NotFoundException("Time slot not found")
        return slot

    async def list_slots(self, mentor_id: UUID) -> list[TimeSlot]:
        """Return every slot of the mentor, available or blocked."""
        return await self.repository.list_slots(mentor_id)

    async def create_slot(self, payload: SlotCreate, actor: User) -> TimeSlot:
        """Create an available slot for the mentor."""
        mentor_id = payload.mentor_id or actor.id
        self._ensure_can_manage(mentor_id, actor)

        day = validate_slot_window(payload.day_of_week, payload.start_time, payload.end_time)
        start_time = (payload.start_time or "").strip()
        end_time = (payload.end_time or "").strip()

        profile = await self.mentors_repository.get_profile_by_user_id(mentor_id)
        if profile is None:
            raise NotFoundException("Mentor profile not found")

        if settings.schedule_reject_overlapping_slots:
            same_day = await self.repository.list_slots(mentor_id, day_of_week=day)
            if any(slots_overlap(start_time, end_time, s.start_time, s.end_time) for s in same_day):
                raise ConflictException("Time slot overlaps an existing slot")

        slot = await self.repository.create_slot(
            mentor_id=mentor_id,
            day_of_week=day,
            start_time=start_time,
            end_time=end_time,
            is_recurring=payload.is_recurring,
        )
        record_slot_change("created")
        logger.info(
            "Created time slot %s for mentor %s: %s %s-%s",
            slot.id,
            mentor_id,
            day.value,
            start_time,
            end_time,
        )
        return slot

    async def set_availability(self, slot_id: UUID, is_available: bool, actor: User) -> TimeSlot:
        """Block or unblock a slot. Timing and recurrence are untouched."""
        slot = await self._get_slot(slot_id)
        self._ensure_can_manage(slot.mentor_id, actor)

        slot = await self.repository.set_availability(slot, is_available)
        record_slot_change("availability")
        logger.info("Time slot %s %s", slot.id, "unblocked" if is_available else "blocked")
        return slot

    async def toggle_availability(
        self,
        slot_id: UUID,
        current_is_available: bool,
        actor: User,
    ) -> TimeSlot:
        """Flip availability relative to the value the caller currently shows."""
        return await self.set_availability(slot_id, not current_is_available, actor)

    async def delete_slot(self, slot_id: UUID, actor: User) -> None:
        """Remove slot permanently. Confirmation is the client's job."""
        slot = await self._get_slot(slot_id)
        self._ensure_can_manage(slot.mentor_id, actor)

        await self.repository.delete_slot(slot)
        record_slot_change("deleted")
        logger.info("Deleted time slot %s of mentor %s", slot_id, slot.mentor_id)

    async def list_available_times(self, mentor_id: UUID) -> AvailableTimesRead:
        """Return bookable start times for booking and profile pages."""
        slots = await self.repository.list_slots(mentor_id, available_only=True)
        return group_available_times(slots)


async def get_scheduling_service(session: AsyncSession = Depends(get_db_session)) -> SchedulingService:
    """Dependency provider for scheduling service."""
    return SchedulingService(SchedulingRepository(session), MentorsRepository(session))
