"""Session join window evaluation.

A session can be joined from ``opens_before_minutes`` before its start until
``closes_after_minutes`` after its computed end, both bounds inclusive. The
evaluator never reads the clock; callers pass ``now``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from app.core.enums import JoinStateEnum

DEFAULT_SESSION_MINUTES = 60
JOIN_OPENS_BEFORE_MINUTES = 10
JOIN_CLOSES_AFTER_MINUTES = 5

JOIN_NOW_MESSAGE = "Join Now"
SESSION_ENDED_MESSAGE = "Session ended"

_ONE_MINUTE = timedelta(minutes=1)


@dataclass(frozen=True, slots=True)
class JoinWindow:
    """Result of evaluating one session at one instant."""

    state: JoinStateEnum
    message: str
    opens_at: datetime
    closes_at: datetime
    session_end: datetime

    @property
    def can_join(self) -> bool:
        return self.state == JoinStateEnum.JOINABLE


def effective_duration_minutes(
    duration_minutes: object,
    default: int = DEFAULT_SESSION_MINUTES,
) -> int:
    """Return ``duration_minutes`` if it is a positive int, else ``default``.

    Stored durations are not always minute counts, so anything missing or
    non-numeric falls back to the default session length.
    """
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        return default
    if duration_minutes <= 0:
        return default
    return duration_minutes


def evaluate_join_window(
    scheduled_at: datetime,
    duration_minutes: int,
    now: datetime,
    *,
    opens_before_minutes: int = JOIN_OPENS_BEFORE_MINUTES,
    closes_after_minutes: int = JOIN_CLOSES_AFTER_MINUTES,
) -> JoinWindow:
    """Classify ``now`` against the join window of a session.

    The "Available in N minutes" count is truncated to whole minutes, so the
    last 59 seconds before the window opens read "Available in 0 minutes".
    """
    session_end = scheduled_at + timedelta(minutes=duration_minutes)
    opens_at = scheduled_at - timedelta(minutes=opens_before_minutes)
    closes_at = session_end + timedelta(minutes=closes_after_minutes)

    if now < opens_at:
        # whole minutes, truncated
        minutes_left = (opens_at - now) // _ONE_MINUTE
        return JoinWindow(
            state=JoinStateEnum.TOO_EARLY,
            message=f"Available in {minutes_left} minutes",
            opens_at=opens_at,
            closes_at=closes_at,
            session_end=session_end,
        )
    if now <= closes_at:
        return JoinWindow(
            state=JoinStateEnum.JOINABLE,
            message=JOIN_NOW_MESSAGE,
            opens_at=opens_at,
            closes_at=closes_at,
            session_end=session_end,
        )
    return JoinWindow(
        state=JoinStateEnum.EXPIRED,
        message=SESSION_ENDED_MESSAGE,
        opens_at=opens_at,
        closes_at=closes_at,
        session_end=session_end,
    )
