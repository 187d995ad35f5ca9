"""Booking API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.core.enums import BookingStatusEnum
from app.modules.booking.schemas import (
    BookingCreate,
    BookingRead,
    BookingStatusUpdate,
    JoinWindowRead,
    StudentStatsRead,
)
from app.modules.booking.service import BookingService, get_booking_service
from app.modules.identity.service import get_current_user
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/booking", tags=["booking"])


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> BookingRead:
    """Book a session with a mentor."""
    booking = await service.create_booking(payload, current_user)
    return service.describe(booking)


@router.patch("/{booking_id}/status", response_model=BookingRead)
async def update_booking_status(
    booking_id: UUID,
    payload: BookingStatusUpdate,
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> BookingRead:
    """Complete or cancel a scheduled session."""
    booking = await service.update_status(booking_id, payload, current_user)
    return service.describe(booking)


@router.get("/my", response_model=Page[BookingRead])
async def list_my_bookings(
    student_id: UUID | None = Query(default=None),
    booking_status: BookingStatusEnum | None = Query(default=None, alias="status"),
    pagination=Depends(get_pagination_params),
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> Page[BookingRead]:
    """List bookings for current user with join state per session."""
    items, total = await service.list_bookings(
        current_user,
        student_id,
        booking_status,
        pagination.limit,
        pagination.offset,
    )
    return build_page(items, total, pagination)


@router.get("/stats/me", response_model=StudentStatsRead)
async def get_my_stats(
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> StudentStatsRead:
    return await service.get_student_stats(current_user)


@router.get("/{booking_id}/join-window", response_model=JoinWindowRead)
async def get_join_window(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> JoinWindowRead:
    """Return whether the session can be joined right now."""
    return await service.get_join_window(booking_id, current_user)


@router.post("/complete-finished", response_model=int)
async def complete_finished_bookings(
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> int:
    """Complete sessions whose join window has closed (admin task endpoint)."""
    return await service.complete_finished_bookings(current_user)
