"""Scheduling API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.modules.identity.service import get_current_user
from app.modules.scheduling.schemas import (
    AvailableTimesRead,
    SlotAvailabilityUpdate,
    SlotCreate,
    SlotDeleteResult,
    SlotRead,
    SlotToggleRequest,
)
from app.modules.scheduling.service import SchedulingService, get_scheduling_service

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("", response_model=list[SlotRead])
async def list_slots(
    mentor_id: UUID = Query(...),
    service: SchedulingService = Depends(get_scheduling_service),
) -> list[SlotRead]:
    """List all time slots of a mentor."""
    slots = await service.list_slots(mentor_id)
    return [SlotRead.model_validate(slot) for slot in slots]


@router.post("", response_model=SlotRead, status_code=status.HTTP_201_CREATED)
async def create_slot(
    payload: SlotCreate,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> SlotRead:
    """Add a time slot to a mentor schedule."""
    slot = await service.create_slot(payload, current_user)
    return SlotRead.model_validate(slot)


@router.patch("/{slot_id}", response_model=SlotRead)
async def update_slot_availability(
    slot_id: UUID,
    payload: SlotAvailabilityUpdate,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> SlotRead:
    """Block or unblock a time slot."""
    slot = await service.set_availability(slot_id, payload.is_available, current_user)
    return SlotRead.model_validate(slot)


@router.post("/{slot_id}/toggle", response_model=SlotRead)
async def toggle_slot_availability(
    slot_id: UUID,
    payload: SlotToggleRequest,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> SlotRead:
    """Flip availability of a time slot."""
    slot = await service.toggle_availability(slot_id, payload.current_is_available, current_user)
    return SlotRead.model_validate(slot)


@router.delete("/{slot_id}", response_model=SlotDeleteResult)
async def delete_slot(
    slot_id: UUID,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> SlotDeleteResult:
    """Delete a time slot."""
    await service.delete_slot(slot_id, current_user)
    return SlotDeleteResult(message=f"Time slot {slot_id} deleted successfully")


@router.get("/mentors/{mentor_id}/available-times", response_model=AvailableTimesRead)
async def list_available_times(
    mentor_id: UUID,
    service: SchedulingService = Depends(get_scheduling_service),
) -> AvailableTimesRead:
    """Bookable start times of a mentor grouped by weekday."""
    return await service.list_available_times(mentor_id)
