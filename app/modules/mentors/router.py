"""Mentors API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.modules.identity.service import get_current_user
from app.modules.mentors.schemas import MentorProfileCreate, MentorProfileRead, MentorProfileUpdate
from app.modules.mentors.service import MentorsService, get_mentors_service
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/mentors", tags=["mentors"])


@router.post("/profiles", response_model=MentorProfileRead, status_code=status.HTTP_201_CREATED)
async def create_profile(
    payload: MentorProfileCreate,
    service: MentorsService = Depends(get_mentors_service),
    current_user=Depends(get_current_user),
) -> MentorProfileRead:
    """Create mentor profile."""
    profile = await service.create_profile(payload, current_user)
    return MentorProfileRead.model_validate(profile)


@router.patch("/profiles/{profile_id}", response_model=MentorProfileRead)
async def update_profile(
    profile_id: UUID,
    payload: MentorProfileUpdate,
    service: MentorsService = Depends(get_mentors_service),
    current_user=Depends(get_current_user),
) -> MentorProfileRead:
    """Update mentor profile."""
    profile = await service.update_profile(profile_id, payload, current_user)
    return MentorProfileRead.model_validate(profile)


@router.get("/profiles", response_model=Page[MentorProfileRead])
async def list_profiles(
    active_only: bool = Query(default=True),
    pagination=Depends(get_pagination_params),
    service: MentorsService = Depends(get_mentors_service),
) -> Page[MentorProfileRead]:
    """Browse mentor profiles."""
    items, total = await service.list_profiles(active_only, pagination.limit, pagination.offset)
    serialized = [MentorProfileRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.get("/profiles/{profile_id}", response_model=MentorProfileRead)
async def get_profile(
    profile_id: UUID,
    service: MentorsService = Depends(get_mentors_service),
) -> MentorProfileRead:
    profile = await service.get_profile(profile_id)
    return MentorProfileRead.model_validate(profile)
