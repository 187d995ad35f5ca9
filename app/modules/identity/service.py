"""Identity business logic layer."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db_session
from app.core.enums import RoleEnum
from app.core.security import create_access_token, decode_token, hash_password, oauth2_scheme, verify_password
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.schemas import AccessToken, LoginRequest, UserCreate, UserProfileUpdate
from app.shared.exceptions import (
    AuthenticationException,
    ConflictException,
    NotFoundException,
    UnauthorizedException,
)

settings = get_settings()
logger = logging.getLogger(__name__)


class IdentityService:
    """Accounts, credentials and bearer tokens."""

    def __init__(self, repository: IdentityRepository) -> None:
        self.repository = repository

    async def ensure_default_roles(self) -> None:
        for role_name in RoleEnum:
            if await self.repository.get_role_by_name(role_name) is None:
                await self.repository.create_role(role_name)
                logger.info("Created missing role %s", role_name)

    async def register(self, payload: UserCreate) -> User:
        """Create a student or mentor account."""
        if payload.role == RoleEnum.ADMIN:
            raise UnauthorizedException("Admin accounts cannot be self-registered")

        email = payload.email.strip().lower()
        if await self.repository.get_user_by_email(email) is not None:
            raise ConflictException("User with this email already exists")

        role = await self.repository.get_role_by_name(payload.role)
        if role is None:
            raise NotFoundException("Role not found")

        user = await self.repository.create_user(
            role,
            email=email,
            password_hash=hash_password(payload.password),
            first_name=payload.first_name.strip(),
            last_name=payload.last_name,
            country=payload.country,
            timezone=payload.timezone,
        )
        logger.info("Registered %s account %s", payload.role, user.id)
        return user

    async def login(self, payload: LoginRequest) -> AccessToken:
        """Exchange email and password for a bearer token."""
        user = await self.repository.get_user_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            raise AuthenticationException("Invalid credentials")
        if not user.is_active:
            raise AuthenticationException("User is inactive")

        return AccessToken(
            access_token=create_access_token(subject=str(user.id), role=user.role.name),
            expires_in=settings.access_token_expire_minutes * 60,
        )

    async def update_profile(self, user: User, payload: UserProfileUpdate) -> User:
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("first_name") is None:
            changes.pop("first_name", None)
        if changes.get("timezone") is None:
            changes.pop("timezone", None)
        if not changes:
            return user
        return await self.repository.update_user(user, **changes)

    async def get_user_from_access_token(self, token: str) -> User:
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise AuthenticationException("Invalid access token")

        subject = payload.get("sub")
        if not subject:
            raise AuthenticationException("Token subject is missing")
        try:
            user_id = UUID(subject)
        except ValueError as exc:
            raise AuthenticationException("Invalid access token") from exc

        user = await self.repository.get_user_by_id(user_id)
        if user is None:
            raise AuthenticationException("User not found")
        if not user.is_active:
            raise AuthenticationException("User is inactive")
        return user


async def get_identity_service(session: AsyncSession = Depends(get_db_session)) -> IdentityService:
    return IdentityService(IdentityRepository(session))


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    service: IdentityService = Depends(get_identity_service),
) -> User:
    """Resolve the account behind the bearer token."""
    return await service.get_user_from_access_token(token)
