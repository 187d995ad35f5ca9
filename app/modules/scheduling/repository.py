"""Scheduling repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import DayOfWeekEnum
from app.modules.scheduling.models import TimeSlot


class SchedulingRepository:
    """DB access for mentor time slots."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_slot(
        self,
        mentor_id: UUID,
        day_of_week: DayOfWeekEnum,
        start_time: str,
        end_time: str,
        is_recurring: bool,
    ) -> TimeSlot:
        slot = TimeSlot(
            mentor_id=mentor_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            is_available=True,
            is_recurring=is_recurring,
        )
        self.session.add(slot)
        await self.session.flush()
        return slot

    async def get_slot_by_id(self, slot_id: UUID) -> TimeSlot | None:
        stmt = select(TimeSlot).where(TimeSlot.id == slot_id)
        return await self.session.scalar(stmt)

    async def list_slots(
        self,
        mentor_id: UUID,
        available_only: bool = False,
        day_of_week: DayOfWeekEnum | None = None,
    ) -> list[TimeSlot]:
        stmt: Select[tuple[TimeSlot]] = select(TimeSlot).where(TimeSlot.mentor_id == mentor_id)
        if available_only:
            stmt = stmt.where(TimeSlot.is_available.is_(True))
        if day_of_week is not None:
            stmt = stmt.where(TimeSlot.day_of_week == day_of_week)

        stmt = stmt.order_by(TimeSlot.created_at.asc())
        return list((await self.session.scalars(stmt)).all())

    async def set_availability(self, slot: TimeSlot, is_available: bool) -> TimeSlot:
        slot.is_available = is_available
        await self.session.flush()
        return slot

    async def delete_slot(self, slot: TimeSlot) -> None:
        await self.session.delete(slot)
        await self.session.flush()
