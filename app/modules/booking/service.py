"""Booking business logic layer."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db_session
from app.core.enums import BookingStatusEnum, RoleEnum
from app.core.metrics import record_join_evaluation
from app.modules.booking.join_window import JoinWindow, effective_duration_minutes, evaluate_join_window
from app.modules.booking.models import Booking
from app.modules.booking.repository import BookingRepository
from app.modules.booking.schemas import (
    BookingCreate,
    BookingRead,
    BookingStatusUpdate,
    JoinWindowRead,
    StudentStatsRead,
)
from app.modules.identity.models import User
from app.modules.mentors.repository import MentorsRepository
from app.shared.exceptions import (
    BusinessRuleException,
    ConflictException,
    NotFoundException,
    UnauthorizedException,
)
from app.shared.utils import ensure_utc, utc_now

settings = get_settings()
logger = logging.getLogger(__name__)

_FINAL_STATUSES = (BookingStatusEnum.COMPLETED, BookingStatusEnum.CANCELLED)


class BookingService:
    """Session booking lifecycle and join window rules."""

    def __init__(
        self,
        booking_repository: BookingRepository,
        mentors_repository: MentorsRepository,
    ) -> None:
        self.booking_repository = booking_repository
        self.mentors_repository = mentors_repository

    def _validate_actor_access(self, booking: Booking, actor: User) -> None:
        if actor.role.name == RoleEnum.ADMIN:
            return
        if actor.role.name == RoleEnum.STUDENT and booking.student_id == actor.id:
            return
        if actor.role.name == RoleEnum.MENTOR and booking.mentor_id == actor.id:
            return
        raise UnauthorizedException("You cannot access this booking")

    async def _get_booking(self, booking_id: UUID) -> Booking:
        booking = await self.booking_repository.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found")
        return booking

    def window_for(self, booking: Booking, now: datetime) -> JoinWindow:
        """Evaluate the join window, substituting the default duration if needed."""
        duration = effective_duration_minutes(
            booking.duration_minutes,
            default=settings.default_session_duration_minutes,
        )
        window = evaluate_join_window(
            ensure_utc(booking.scheduled_at),
            duration,
            now,
            opens_before_minutes=settings.join_window_opens_before_minutes,
            closes_after_minutes=settings.join_window_closes_after_minutes,
        )
        record_join_evaluation(window.state)
        return window

    def describe(self, booking: Booking, now: datetime | None = None) -> BookingRead:
        """Serialize booking with its join state; only scheduled sessions get one."""
        read = BookingRead.model_validate(booking)
        if booking.status != BookingStatusEnum.SCHEDULED:
            return read

        window = self.window_for(booking, now or utc_now())
        return read.model_copy(update={"join_state": window.state, "join_message": window.message})

    async def create_booking(self, payload: BookingCreate, actor: User) -> Booking:
        """Book a session with an active mentor."""
        if actor.role.name != RoleEnum.STUDENT:
            raise UnauthorizedException("Only students can book sessions")

        scheduled_at = ensure_utc(payload.scheduled_at)
        if scheduled_at <= utc_now():
            raise BusinessRuleException("Cannot book a session in the past")

        mentor = await self.mentors_repository.get_profile_by_user_id(payload.mentor_id)
        if mentor is None:
            raise NotFoundException("Mentor not found")
        if not mentor.is_active:
            raise BusinessRuleException("Mentor is not accepting sessions")

        booking = await self.booking_repository.create_booking(
            student_id=actor.id,
            mentor_id=payload.mentor_id,
            scheduled_at=scheduled_at,
            duration_minutes=payload.duration_minutes,
            session_count=payload.session_count,
            session_type=payload.session_type,
            subject=payload.subject,
            notes=payload.notes,
        )
        logger.info("Booking %s created for student %s with mentor %s", booking.id, actor.id, payload.mentor_id)
        return booking

    async def update_status(
        self,
        booking_id: UUID,
        payload: BookingStatusUpdate,
        actor: User,
    ) -> Booking:
        """Complete or cancel a scheduled booking."""
        booking = await self._get_booking(booking_id)
        self._validate_actor_access(booking, actor)

        if payload.status not in _FINAL_STATUSES:
            raise BusinessRuleException("Booking can only be completed or cancelled")
        if booking.status != BookingStatusEnum.SCHEDULED:
            raise ConflictException("Only scheduled bookings can change status")
        if actor.role.name == RoleEnum.STUDENT and payload.status == BookingStatusEnum.COMPLETED:
            raise UnauthorizedException("Students cannot complete sessions")

        now = utc_now()
        if actor.role.name == RoleEnum.STUDENT and payload.status == BookingStatusEnum.CANCELLED:
            cutoff_hours = settings.student_cancel_cutoff_hours
            if ensure_utc(booking.scheduled_at) - now <= timedelta(hours=cutoff_hours):
                raise BusinessRuleException(
                    f"Cannot cancel within {cutoff_hours} hours of the scheduled class time",
                )

        booking.status = payload.status
        if payload.status == BookingStatusEnum.COMPLETED:
            booking.completed_at = now
        else:
            booking.cancelled_at = now
            booking.cancel_reason = payload.reason
            booking.cancelled_by = actor.role.name

        await self.booking_repository.save(booking)
        logger.info("Booking %s moved to %s by %s", booking.id, booking.status, actor.id)
        return booking

    async def get_join_window(self, booking_id: UUID, actor: User) -> JoinWindowRead:
        """Return join button state for one booking at the current time."""
        booking = await self._get_booking(booking_id)
        self._validate_actor_access(booking, actor)

        if booking.status != BookingStatusEnum.SCHEDULED:
            raise ConflictException("Session is no longer scheduled")

        now = utc_now()
        window = self.window_for(booking, now)
        return JoinWindowRead(
            booking_id=booking.id,
            state=window.state,
            message=window.message,
            can_join=window.can_join,
            opens_at=window.opens_at,
            closes_at=window.closes_at,
            session_end=window.session_end,
            evaluated_at=now,
        )

    async def list_bookings(
        self,
        actor: User,
        student_id: UUID | None,
        status: BookingStatusEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[BookingRead], int]:
        """List bookings visible to the actor, each with its join state."""
        if student_id is not None and actor.role.name == RoleEnum.STUDENT and student_id != actor.id:
            raise UnauthorizedException("Students can only list their own bookings")

        items, total = await self.booking_repository.list_bookings(
            actor.id,
            actor.role.name,
            student_id,
            status,
            limit,
            offset,
        )
        now = utc_now()
        return [self.describe(item, now) for item in items], total

    async def complete_finished_bookings(self, actor: User) -> int:
        """Mark scheduled sessions whose join window has closed as completed."""
        if actor.role.name != RoleEnum.ADMIN:
            raise UnauthorizedException("Only admin can run session completion")

        now = utc_now()
        completed = 0
        for booking in await self.booking_repository.find_started_scheduled(now):
            if now <= self.window_for(booking, now).closes_at:
                continue
            booking.status = BookingStatusEnum.COMPLETED
            booking.completed_at = now
            await self.booking_repository.save(booking)
            completed += 1

        if completed:
            logger.info("Marked %d finished bookings as completed", completed)
        return completed

    async def get_student_stats(self, actor: User) -> StudentStatsRead:
        """Summarize a student's sessions.

        A scheduled session whose end has passed counts as completed even if
        the completion sweep has not run yet.
        """
        if actor.role.name != RoleEnum.STUDENT:
            raise UnauthorizedException("Only students have learning stats")

        bookings = await self.booking_repository.list_student_bookings(actor.id)
        now = utc_now()

        active = 0
        cancelled = 0
        completed_minutes: list[int] = []
        for booking in bookings:
            duration = effective_duration_minutes(
                booking.duration_minutes,
                default=settings.default_session_duration_minutes,
            )
            if booking.status == BookingStatusEnum.CANCELLED:
                cancelled += 1
            elif booking.status == BookingStatusEnum.COMPLETED:
                completed_minutes.append(duration)
            elif now < self.window_for(booking, now).session_end:
                active += 1
            else:
                completed_minutes.append(duration)

        total = len(bookings)
        progress_rate = round(len(completed_minutes) / total * 100) if total else 0
        return StudentStatsRead(
            total_sessions=total,
            active_sessions=active,
            completed_sessions=len(completed_minutes),
            cancelled_sessions=cancelled,
            hours_learned=round(sum(completed_minutes) / 60, 2),
            progress_rate=progress_rate,
        )


async def get_booking_service(session: AsyncSession = Depends(get_db_session)) -> BookingService:
    """Dependency provider for booking service."""
    return BookingService(
        booking_repository=BookingRepository(session),
        mentors_repository=MentorsRepository(session),
    )
