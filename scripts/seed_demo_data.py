"""Seed idempotent demo data for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.core.enums import DayOfWeekEnum, RoleEnum
from app.core.security import hash_password, verify_password
from app.modules.booking.models import Booking
from app.modules.booking.repository import BookingRepository
from app.modules.booking.schemas import BookingCreate
from app.modules.booking.service import BookingService
from app.modules.identity.models import Role, User
from app.modules.mentors.models import MentorProfile
from app.modules.mentors.repository import MentorsRepository
from app.modules.scheduling.models import TimeSlot
from app.modules.scheduling.repository import SchedulingRepository
from app.modules.scheduling.schemas import SlotCreate
from app.modules.scheduling.service import SchedulingService

DEMO_PASSWORD = "DemoPass123!"

DEMO_ADMIN_EMAIL = "demo-admin@codeconnect.dev"
DEMO_MENTOR_EMAIL = "demo-mentor@codeconnect.dev"
DEMO_STUDENT_EMAIL = "demo-student@codeconnect.dev"

DEMO_SLOT_DAYS = (
    DayOfWeekEnum.MONDAY,
    DayOfWeekEnum.TUESDAY,
    DayOfWeekEnum.WEDNESDAY,
    DayOfWeekEnum.THURSDAY,
    DayOfWeekEnum.FRIDAY,
)
DEMO_SLOT_WINDOWS = (("10:00", "11:00"), ("18:00", "19:00"))

DEMO_BOOKING_HOUR = 18
DEMO_BOOKING_DURATION_MINUTES = 60


@dataclass(slots=True)
class SeedStats:
    roles_created: int = 0
    users_created: int = 0
    users_updated: int = 0
    mentor_profile_created: bool = False
    slots_created: int = 0
    booking_created: bool = False
    booking_id: str | None = None


async def _ensure_roles(session: AsyncSession) -> int:
    created = 0
    for role_name in RoleEnum:
        existing = await session.scalar(select(Role).where(Role.name == role_name))
        if existing is None:
            session.add(Role(name=role_name))
            created += 1
    await session.flush()
    return created


async def _ensure_user(
    session: AsyncSession,
    *,
    email: str,
    first_name: str,
    role_name: RoleEnum,
) -> tuple[User, bool]:
    role = await session.scalar(select(Role).where(Role.name == role_name))
    if role is None:
        raise RuntimeError(f"Role {role_name} was not found after ensure_roles")

    user = await session.scalar(
        select(User).options(selectinload(User.role)).where(User.email == email),
    )
    created = False
    if user is None:
        user = User(
            email=email,
            first_name=first_name,
            password_hash=hash_password(DEMO_PASSWORD),
            timezone="UTC",
            is_active=True,
            role_id=role.id,
        )
        session.add(user)
        created = True
    else:
        if not verify_password(DEMO_PASSWORD, user.password_hash):
            user.password_hash = hash_password(DEMO_PASSWORD)
        user.role_id = role.id
        user.is_active = True

    await session.flush()
    await session.refresh(user, attribute_names=["role"])
    return user, created


async def _ensure_mentor_profile(session: AsyncSession, mentor_user: User) -> bool:
    profile = await session.scalar(
        select(MentorProfile).where(MentorProfile.user_id == mentor_user.id),
    )
    if profile is not None:
        profile.is_active = True
        profile.is_approved = True
        await session.flush()
        return False

    session.add(
        MentorProfile(
            user_id=mentor_user.id,
            title="Python & Web Development Mentor",
            description="Demo mentor for local scenarios: Python basics, APIs and testing.",
            specialties=["Python", "FastAPI", "Testing"],
            experience_years=7,
            is_active=True,
            is_approved=True,
        ),
    )
    await session.flush()
    return True


async def _ensure_demo_slots(session: AsyncSession, *, mentor_user: User) -> int:
    scheduling_service = SchedulingService(SchedulingRepository(session), MentorsRepository(session))
    created = 0

    for day in DEMO_SLOT_DAYS:
        for start_time, end_time in DEMO_SLOT_WINDOWS:
            existing = await session.scalar(
                select(TimeSlot).where(
                    TimeSlot.mentor_id == mentor_user.id,
                    TimeSlot.day_of_week == day,
                    TimeSlot.start_time == start_time,
                    TimeSlot.end_time == end_time,
                ),
            )
            if existing is not None:
                continue

            await scheduling_service.create_slot(
                SlotCreate(day_of_week=day.value, start_time=start_time, end_time=end_time),
                mentor_user,
            )
            created += 1

    await session.flush()
    return created


async def _ensure_demo_booking(
    session: AsyncSession,
    *,
    mentor_user: User,
    student_user: User,
) -> tuple[Booking, bool]:
    now = datetime.now(UTC)
    existing = await session.scalar(
        select(Booking)
        .where(
            Booking.student_id == student_user.id,
            Booking.mentor_id == mentor_user.id,
            Booking.scheduled_at > now,
        )
        .order_by(Booking.scheduled_at.asc()),
    )
    if existing is not None:
        return existing, False

    booking_service = BookingService(BookingRepository(session), MentorsRepository(session))
    tomorrow = (now + timedelta(days=1)).date()
    booking = await booking_service.create_booking(
        BookingCreate(
            mentor_id=mentor_user.id,
            scheduled_at=datetime.combine(tomorrow, time(hour=DEMO_BOOKING_HOUR, tzinfo=UTC)),
            duration_minutes=DEMO_BOOKING_DURATION_MINUTES,
            subject="Python",
            notes="Demo session",
        ),
        student_user,
    )
    await session.flush()
    return booking, True


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    app_env = settings.app_env.strip().lower()
    if app_env in {"production", "prod"} and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()

    async with SessionLocal() as session:
        try:
            stats.roles_created = await _ensure_roles(session)

            _, admin_created = await _ensure_user(
                session,
                email=DEMO_ADMIN_EMAIL,
                first_name="Demo Admin",
                role_name=RoleEnum.ADMIN,
            )
            mentor_user, mentor_created = await _ensure_user(
                session,
                email=DEMO_MENTOR_EMAIL,
                first_name="Demo Mentor",
                role_name=RoleEnum.MENTOR,
            )
            student_user, student_created = await _ensure_user(
                session,
                email=DEMO_STUDENT_EMAIL,
                first_name="Demo Student",
                role_name=RoleEnum.STUDENT,
            )

            stats.users_created = sum([admin_created, mentor_created, student_created])
            stats.users_updated = 3 - stats.users_created

            stats.mentor_profile_created = await _ensure_mentor_profile(session, mentor_user)
            stats.slots_created = await _ensure_demo_slots(session, mentor_user=mentor_user)
            booking, booking_created = await _ensure_demo_booking(
                session,
                mentor_user=mentor_user,
                student_user=student_user,
            )
            stats.booking_created = booking_created
            stats.booking_id = str(booking.id)

            await session.commit()
        except Exception:
            await session.rollback()
            raise

    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Seed idempotent demo data for CodeConnect (users, mentor profile, "
            "weekly time slots, upcoming session)."
        ),
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Roles created: {stats.roles_created}")
    print(f"- Users created: {stats.users_created}")
    print(f"- Users updated: {stats.users_updated}")
    print(f"- Mentor profile created: {stats.mentor_profile_created}")
    print(f"- Time slots created: {stats.slots_created}")
    print(f"- Upcoming session created: {stats.booking_created}")
    print(f"- Upcoming session id: {stats.booking_id}")
    print("")
    print("Demo credentials (non-production only):")
    print(f"- admin:   {DEMO_ADMIN_EMAIL} / {DEMO_PASSWORD}")
    print(f"- mentor:  {DEMO_MENTOR_EMAIL} / {DEMO_PASSWORD}")
    print(f"- student: {DEMO_STUDENT_EMAIL} / {DEMO_PASSWORD}")


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_run_seed(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
