"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """System roles."""

    STUDENT = "student"
    MENTOR = "mentor"
    ADMIN = "admin"


class DayOfWeekEnum(StrEnum):
    """Weekday names used by recurring time slots, in calendar order."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class BookingStatusEnum(StrEnum):
    """Session booking lifecycle status."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SessionTypeEnum(StrEnum):
    """Kind of booked session."""

    REGULAR = "regular"
    DEMO = "demo"


class JoinStateEnum(StrEnum):
    """Join button state derived from the session time window."""

    TOO_EARLY = "too_early"
    JOINABLE = "joinable"
    EXPIRED = "expired"
