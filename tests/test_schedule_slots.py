from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

import app.main as main_module
from app.core.enums import DayOfWeekEnum, RoleEnum
from app.modules.identity.service import get_current_user
from app.modules.scheduling.schemas import SlotCreate
from app.modules.scheduling.service import (
    SchedulingService,
    get_scheduling_service,
    settings,
    slots_overlap,
    validate_slot_window,
)
from app.shared.exceptions import (
    ConflictException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)

FIXED_NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


@dataclass
class FakeSlot:
    id: UUID
    mentor_id: UUID
    day_of_week: DayOfWeekEnum
    start_time: str
    end_time: str
    is_available: bool = True
    is_recurring: bool = True
    created_at: datetime = field(default=FIXED_NOW)
    updated_at: datetime = field(default=FIXED_NOW)


class FakeSchedulingRepository:
    def __init__(self, slots: list[FakeSlot] | None = None) -> None:
        self.slots: list[FakeSlot] = slots or []

    async def create_slot(
        self,
        mentor_id: UUID,
        day_of_week: DayOfWeekEnum,
        start_time: str,
        end_time: str,
        is_recurring: bool,
    ) -> FakeSlot:
        slot = FakeSlot(
            id=uuid4(),
            mentor_id=mentor_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            is_recurring=is_recurring,
        )
        self.slots.append(slot)
        return slot

    async def get_slot_by_id(self, slot_id: UUID) -> FakeSlot | None:
        return next((slot for slot in self.slots if slot.id == slot_id), None)

    async def list_slots(
        self,
        mentor_id: UUID,
        available_only: bool = False,
        day_of_week: DayOfWeekEnum | None = None,
    ) -> list[FakeSlot]:
        return [
            slot
            for slot in self.slots
            if slot.mentor_id == mentor_id
            and (not available_only or slot.is_available)
            and (day_of_week is None or slot.day_of_week == day_of_week)
        ]

    async def set_availability(self, slot: FakeSlot, is_available: bool) -> FakeSlot:
        slot.is_available = is_available
        return slot

    async def delete_slot(self, slot: FakeSlot) -> None:
        self.slots.remove(slot)


class FakeMentorsRepository:
    def __init__(self, mentor_user_ids: set[UUID]) -> None:
        self._mentor_user_ids = mentor_user_ids

    async def get_profile_by_user_id(self, user_id: UUID) -> SimpleNamespace | None:
        if user_id not in self._mentor_user_ids:
            return None
        return SimpleNamespace(user_id=user_id, is_active=True)


def make_actor(user_id: UUID, role: RoleEnum = RoleEnum.MENTOR) -> SimpleNamespace:
    return SimpleNamespace(id=user_id, role=SimpleNamespace(name=role))


def make_service(
    mentor_ids: set[UUID],
    slots: list[FakeSlot] | None = None,
) -> tuple[SchedulingService, FakeSchedulingRepository]:
    repository = FakeSchedulingRepository(slots)
    service = SchedulingService(repository, FakeMentorsRepository(mentor_ids))
    return service, repository


@pytest.mark.asyncio
async def test_create_slot_rejects_end_before_start() -> None:
    mentor_id = uuid4()
    service, repository = make_service({mentor_id})

    with pytest.raises(ValidationException) as exc:
        await service.create_slot(
            SlotCreate(day_of_week="Monday", start_time="14:00", end_time="12:00"),
            make_actor(mentor_id),
        )

    assert exc.value.message == "End time must be after start time"
    assert repository.slots == []


@pytest.mark.asyncio
async def test_create_slot_returns_available_slot() -> None:
    mentor_id = uuid4()
    service, repository = make_service({mentor_id})

    slot = await service.create_slot(
        SlotCreate(day_of_week="Monday", start_time="10:00", end_time="12:00", is_recurring=True),
        make_actor(mentor_id),
    )

    assert slot.is_available is True
    assert slot.is_recurring is True
    assert slot.mentor_id == mentor_id
    assert slot.day_of_week == DayOfWeekEnum.MONDAY
    assert repository.slots == [slot]


@pytest.mark.asyncio
async def test_create_slot_requires_all_fields() -> None:
    mentor_id = uuid4()
    service, _ = make_service({mentor_id})

    with pytest.raises(ValidationException) as exc:
        await service.create_slot(
            SlotCreate(day_of_week="Monday", start_time="10:00"),
            make_actor(mentor_id),
        )

    assert exc.value.message == "Please fill in all required fields"


@pytest.mark.asyncio
async def test_create_slot_treats_null_fields_as_missing() -> None:
    mentor_id = uuid4()
    service, repository = make_service({mentor_id})

    with pytest.raises(ValidationException) as exc:
        await service.create_slot(
            SlotCreate(day_of_week=None, start_time="10:00", end_time="12:00"),
            make_actor(mentor_id),
        )

    assert exc.value.message == "Please fill in all required fields"
    assert repository.slots == []


@pytest.mark.parametrize(
    ("day", "start", "end", "message"),
    [
        ("Funday", "10:00", "11:00", "Invalid day of week"),
        ("Monday", "9:00", "11:00", "Time must use HH:MM format"),
        ("Monday", "10:00", "24:00", "Time must use HH:MM format"),
        ("Monday", "10:00", "10:00", "End time must be after start time"),
        ("", "", "", "Please fill in all required fields"),
    ],
)
def test_validate_slot_window_messages(day: str, start: str, end: str, message: str) -> None:
    with pytest.raises(ValidationException) as exc:
        validate_slot_window(day, start, end)
    assert exc.value.message == message


def test_validate_slot_window_accepts_case_insensitive_day() -> None:
    assert validate_slot_window(" friday ", "08:00", "09:30") == DayOfWeekEnum.FRIDAY


def test_touching_slots_do_not_overlap() -> None:
    assert slots_overlap("10:00", "11:00", "11:00", "12:00") is False
    assert slots_overlap("10:00", "11:30", "11:00", "12:00") is True


@pytest.mark.asyncio
async def test_create_slot_requires_mentor_profile() -> None:
    mentor_id = uuid4()
    service, _ = make_service(set())

    with pytest.raises(NotFoundException):
        await service.create_slot(
            SlotCreate(day_of_week="Monday", start_time="10:00", end_time="11:00"),
            make_actor(mentor_id),
        )


@pytest.mark.asyncio
async def test_mentor_cannot_create_slot_for_another_mentor() -> None:
    mentor_id = uuid4()
    other_mentor_id = uuid4()
    service, _ = make_service({mentor_id, other_mentor_id})

    with pytest.raises(UnauthorizedException):
        await service.create_slot(
            SlotCreate(
                mentor_id=other_mentor_id,
                day_of_week="Monday",
                start_time="10:00",
                end_time="11:00",
            ),
            make_actor(mentor_id),
        )


@pytest.mark.asyncio
async def test_admin_can_create_slot_for_mentor() -> None:
    mentor_id = uuid4()
    service, _ = make_service({mentor_id})

    slot = await service.create_slot(
        SlotCreate(mentor_id=mentor_id, day_of_week="Tuesday", start_time="10:00", end_time="11:00"),
        make_actor(uuid4(), RoleEnum.ADMIN),
    )

    assert slot.mentor_id == mentor_id


@pytest.mark.asyncio
async def test_overlapping_slots_allowed_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "schedule_reject_overlapping_slots", False)
    mentor_id = uuid4()
    service, repository = make_service({mentor_id})
    actor = make_actor(mentor_id)

    await service.create_slot(SlotCreate(day_of_week="Monday", start_time="10:00", end_time="12:00"), actor)
    await service.create_slot(SlotCreate(day_of_week="Monday", start_time="11:00", end_time="13:00"), actor)

    assert len(repository.slots) == 2


@pytest.mark.asyncio
async def test_overlapping_slots_rejected_when_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "schedule_reject_overlapping_slots", True)
    mentor_id = uuid4()
    service, repository = make_service({mentor_id})
    actor = make_actor(mentor_id)

    await service.create_slot(SlotCreate(day_of_week="Monday", start_time="10:00", end_time="12:00"), actor)
    await service.create_slot(SlotCreate(day_of_week="Tuesday", start_time="11:00", end_time="13:00"), actor)
    await service.create_slot(SlotCreate(day_of_week="Monday", start_time="12:00", end_time="13:00"), actor)

    with pytest.raises(ConflictException):
        await service.create_slot(
            SlotCreate(day_of_week="Monday", start_time="11:00", end_time="12:30"),
            actor,
        )
    assert len(repository.slots) == 3


@pytest.mark.asyncio
async def test_toggle_twice_restores_availability() -> None:
    mentor_id = uuid4()
    slot = FakeSlot(
        id=uuid4(),
        mentor_id=mentor_id,
        day_of_week=DayOfWeekEnum.WEDNESDAY,
        start_time="18:00",
        end_time="19:00",
    )
    service, _ = make_service({mentor_id}, [slot])
    actor = make_actor(mentor_id)

    blocked = await service.toggle_availability(slot.id, slot.is_available, actor)
    assert blocked.is_available is False

    restored = await service.toggle_availability(slot.id, blocked.is_available, actor)
    assert restored.is_available is True
    assert restored.start_time == "18:00"
    assert restored.is_recurring is True


@pytest.mark.asyncio
async def test_set_availability_by_other_mentor_is_forbidden() -> None:
    mentor_id = uuid4()
    slot = FakeSlot(
        id=uuid4(),
        mentor_id=mentor_id,
        day_of_week=DayOfWeekEnum.MONDAY,
        start_time="10:00",
        end_time="11:00",
    )
    service, _ = make_service({mentor_id}, [slot])

    with pytest.raises(UnauthorizedException):
        await service.set_availability(slot.id, False, make_actor(uuid4()))
    assert slot.is_available is True


@pytest.mark.asyncio
async def test_delete_slot_removes_it() -> None:
    mentor_id = uuid4()
    slot = FakeSlot(
        id=uuid4(),
        mentor_id=mentor_id,
        day_of_week=DayOfWeekEnum.MONDAY,
        start_time="10:00",
        end_time="11:00",
    )
    service, repository = make_service({mentor_id}, [slot])

    await service.delete_slot(slot.id, make_actor(mentor_id))

    assert repository.slots == []
    with pytest.raises(NotFoundException):
        await service.delete_slot(slot.id, make_actor(mentor_id))


@pytest.mark.asyncio
async def test_list_slots_includes_blocked_slots() -> None:
    mentor_id = uuid4()
    slots = [
        FakeSlot(uuid4(), mentor_id, DayOfWeekEnum.MONDAY, "10:00", "11:00"),
        FakeSlot(uuid4(), mentor_id, DayOfWeekEnum.MONDAY, "12:00", "13:00", is_available=False),
        FakeSlot(uuid4(), uuid4(), DayOfWeekEnum.MONDAY, "10:00", "11:00"),
    ]
    service, _ = make_service({mentor_id}, slots)

    listed = await service.list_slots(mentor_id)

    assert [slot.start_time for slot in listed] == ["10:00", "12:00"]


@pytest.mark.asyncio
async def test_available_times_grouped_by_weekday() -> None:
    mentor_id = uuid4()
    slots = [
        FakeSlot(uuid4(), mentor_id, DayOfWeekEnum.FRIDAY, "18:00", "19:00"),
        FakeSlot(uuid4(), mentor_id, DayOfWeekEnum.MONDAY, "14:00", "15:00"),
        FakeSlot(uuid4(), mentor_id, DayOfWeekEnum.MONDAY, "10:00", "11:00"),
        FakeSlot(uuid4(), mentor_id, DayOfWeekEnum.TUESDAY, "10:00", "11:00", is_available=False),
    ]
    service, _ = make_service({mentor_id}, slots)

    result = await service.list_available_times(mentor_id)

    assert [day.day for day in result.available_slots] == [DayOfWeekEnum.MONDAY, DayOfWeekEnum.FRIDAY]
    assert result.available_slots[0].times == ["10:00", "14:00"]
    assert result.raw_times == ["10:00", "14:00", "18:00"]
    assert len(result.time_slots) == 3


def test_post_schedule_with_null_fields_returns_validation_error() -> None:
    mentor_id = uuid4()
    service, repository = make_service({mentor_id})
    main_module.app.dependency_overrides[get_scheduling_service] = lambda: service
    main_module.app.dependency_overrides[get_current_user] = lambda: make_actor(mentor_id)
    try:
        response = TestClient(main_module.app).post(
            f"{settings.api_prefix}/schedule",
            json={"day_of_week": None, "start_time": "10:00", "end_time": "12:00"},
        )
    finally:
        main_module.app.dependency_overrides.clear()

    assert response.status_code == 400
    assert response.json() == {
        "error": {
            "code": "validation_error",
            "message": "Please fill in all required fields",
        },
    }
    assert repository.slots == []
