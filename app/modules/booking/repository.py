"""Booking repository layer."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import BookingStatusEnum, RoleEnum, SessionTypeEnum
from app.modules.booking.models import Booking


class BookingRepository:
    """DB operations for booking domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_booking(
        self,
        student_id: UUID,
        mentor_id: UUID,
        scheduled_at: datetime,
        duration_minutes: int | None,
        session_count: int | None,
        session_type: SessionTypeEnum,
        subject: str | None,
        notes: str | None,
    ) -> Booking:
        booking = Booking(
            student_id=student_id,
            mentor_id=mentor_id,
            scheduled_at=scheduled_at,
            duration_minutes=duration_minutes,
            session_count=session_count,
            status=BookingStatusEnum.SCHEDULED,
            session_type=session_type,
            subject=subject,
            notes=notes,
        )
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def get_booking_by_id(self, booking_id: UUID) -> Booking | None:
        stmt = select(Booking).where(Booking.id == booking_id)
        return await self.session.scalar(stmt)

    async def list_bookings(
        self,
        user_id: UUID,
        role_name: RoleEnum,
        student_id: UUID | None,
        status: BookingStatusEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Booking], int]:
        base_stmt: Select[tuple[Booking]] = select(Booking)

        if role_name == RoleEnum.STUDENT:
            base_stmt = base_stmt.where(Booking.student_id == user_id)
        elif role_name == RoleEnum.MENTOR:
            base_stmt = base_stmt.where(Booking.mentor_id == user_id)
        if student_id is not None:
            base_stmt = base_stmt.where(Booking.student_id == student_id)
        if status is not None:
            base_stmt = base_stmt.where(Booking.status == status)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(Booking.scheduled_at.asc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total

    async def list_student_bookings(self, student_id: UUID) -> list[Booking]:
        stmt = select(Booking).where(Booking.student_id == student_id)
        return list((await self.session.scalars(stmt)).all())

    async def find_started_scheduled(self, now: datetime) -> list[Booking]:
        stmt = select(Booking).where(
            Booking.status == BookingStatusEnum.SCHEDULED,
            Booking.scheduled_at <= now,
        )
        return list((await self.session.scalars(stmt)).all())

    async def save(self, booking: Booking) -> Booking:
        await self.session.flush()
        return booking
