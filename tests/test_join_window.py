from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from app.core.enums import JoinStateEnum
from app.modules.booking.join_window import (
    DEFAULT_SESSION_MINUTES,
    effective_duration_minutes,
    evaluate_join_window,
)

SCHEDULED_AT = datetime(2025, 1, 10, 10, 0, tzinfo=UTC)


def test_too_early_reports_minutes_until_window_opens() -> None:
    window = evaluate_join_window(SCHEDULED_AT, 60, datetime(2025, 1, 10, 9, 45, tzinfo=UTC))

    assert window.state == JoinStateEnum.TOO_EARLY
    assert window.message == "Available in 5 minutes"
    assert window.can_join is False


def test_joinable_inside_window() -> None:
    window = evaluate_join_window(SCHEDULED_AT, 60, datetime(2025, 1, 10, 9, 51, tzinfo=UTC))

    assert window.state == JoinStateEnum.JOINABLE
    assert window.message == "Join Now"
    assert window.can_join is True


def test_expired_after_window_closes() -> None:
    window = evaluate_join_window(SCHEDULED_AT, 60, datetime(2025, 1, 10, 11, 10, tzinfo=UTC))

    assert window.state == JoinStateEnum.EXPIRED
    assert window.message == "Session ended"
    assert window.can_join is False


def test_window_bounds_are_inclusive() -> None:
    opens_at = SCHEDULED_AT - timedelta(minutes=10)
    closes_at = SCHEDULED_AT + timedelta(minutes=65)

    assert evaluate_join_window(SCHEDULED_AT, 60, opens_at).state == JoinStateEnum.JOINABLE
    assert evaluate_join_window(SCHEDULED_AT, 60, closes_at).state == JoinStateEnum.JOINABLE
    assert (
        evaluate_join_window(SCHEDULED_AT, 60, closes_at + timedelta(seconds=1)).state
        == JoinStateEnum.EXPIRED
    )


def test_minutes_left_are_truncated() -> None:
    now = SCHEDULED_AT - timedelta(minutes=15, seconds=59)

    window = evaluate_join_window(SCHEDULED_AT, 60, now)

    assert window.message == "Available in 5 minutes"


def test_one_second_before_opening_reports_zero_minutes() -> None:
    now = SCHEDULED_AT - timedelta(minutes=10, seconds=1)

    window = evaluate_join_window(SCHEDULED_AT, 60, now)

    assert window.state == JoinStateEnum.TOO_EARLY
    assert window.message == "Available in 0 minutes"


def test_window_boundaries_follow_duration() -> None:
    window = evaluate_join_window(SCHEDULED_AT, 90, SCHEDULED_AT)

    assert window.opens_at == SCHEDULED_AT - timedelta(minutes=10)
    assert window.session_end == SCHEDULED_AT + timedelta(minutes=90)
    assert window.closes_at == SCHEDULED_AT + timedelta(minutes=95)


def test_custom_offsets_are_respected() -> None:
    now = SCHEDULED_AT - timedelta(minutes=20)

    window = evaluate_join_window(
        SCHEDULED_AT,
        60,
        now,
        opens_before_minutes=30,
        closes_after_minutes=0,
    )

    assert window.state == JoinStateEnum.JOINABLE
    assert window.closes_at == window.session_end


def test_evaluation_is_repeatable() -> None:
    now = datetime(2025, 1, 10, 9, 30, tzinfo=UTC)

    first = evaluate_join_window(SCHEDULED_AT, 45, now)
    second = evaluate_join_window(SCHEDULED_AT, 45, now)

    assert first == second


@pytest.mark.parametrize("value", [None, 0, -15, "60", 1.5, True])
def test_effective_duration_falls_back_to_default(value: object) -> None:
    assert effective_duration_minutes(value) == DEFAULT_SESSION_MINUTES


def test_effective_duration_keeps_positive_minutes() -> None:
    assert effective_duration_minutes(45) == 45
    assert effective_duration_minutes(None, default=30) == 30
