"""Mentors business logic layer."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.enums import RoleEnum
from app.modules.identity.models import User
from app.modules.mentors.models import MentorProfile
from app.modules.mentors.repository import MentorsRepository
from app.modules.mentors.schemas import MentorProfileCreate, MentorProfileUpdate
from app.shared.exceptions import ConflictException, NotFoundException, UnauthorizedException


class MentorsService:
    """Mentors domain service."""

    def __init__(self, repository: MentorsRepository) -> None:
        self.repository = repository

    async def create_profile(self, payload: MentorProfileCreate, actor: User) -> MentorProfile:
        """Create mentor profile (admin or the mentor themselves)."""
        if actor.role.name == RoleEnum.STUDENT:
            raise UnauthorizedException("Students cannot create mentor profiles")
        if actor.role.name != RoleEnum.ADMIN and actor.id != payload.user_id:
            raise UnauthorizedException("Only admin or owner can create profile")

        existing = await self.repository.get_profile_by_user_id(payload.user_id)
        if existing is not None:
            raise ConflictException("Mentor profile already exists for user")

        return await self.repository.create_profile(
            user_id=payload.user_id,
            title=payload.title,
            description=payload.description,
            specialties=payload.specialties,
            experience_years=payload.experience_years,
            hourly_rate=payload.hourly_rate,
        )

    async def update_profile(
        self,
        profile_id: UUID,
        payload: MentorProfileUpdate,
        actor: User,
    ) -> MentorProfile:
        """Update mentor profile."""
        profile = await self.get_profile(profile_id)

        if actor.role.name != RoleEnum.ADMIN and actor.id != profile.user_id:
            raise UnauthorizedException("Only admin or owner can update profile")

        changes = payload.model_dump(exclude_none=True)
        if actor.role.name != RoleEnum.ADMIN and "is_approved" in changes:
            raise UnauthorizedException("Only admin can approve mentor profile")

        return await self.repository.update_profile(profile, **changes)

    async def get_profile(self, profile_id: UUID) -> MentorProfile:
        profile = await self.repository.get_profile_by_id(profile_id)
        if profile is None:
            raise NotFoundException("Mentor profile not found")
        return profile

    async def list_profiles(
        self,
        active_only: bool,
        limit: int,
        offset: int,
    ) -> tuple[list[MentorProfile], int]:
        """List mentor profiles."""
        return await self.repository.list_profiles(active_only=active_only, limit=limit, offset=offset)


async def get_mentors_service(session: AsyncSession = Depends(get_db_session)) -> MentorsService:
    """Dependency provider for mentors service."""
    return MentorsService(MentorsRepository(session))
