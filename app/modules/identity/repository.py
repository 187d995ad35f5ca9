"""Identity repository layer."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.enums import RoleEnum
from app.modules.identity.models import Role, User


class IdentityRepository:
    """Accounts and roles storage."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_role_by_name(self, role_name: RoleEnum) -> Role | None:
        return await self.session.scalar(select(Role).where(Role.name == role_name))

    async def create_role(self, role_name: RoleEnum) -> Role:
        role = Role(name=role_name)
        self.session.add(role)
        await self.session.flush()
        return role

    async def get_user_by_email(self, email: str) -> User | None:
        # emails are stored lowercased by the service
        stmt = (
            select(User)
            .options(selectinload(User.role))
            .where(func.lower(User.email) == email.strip().lower())
        )
        return await self.session.scalar(stmt)

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        stmt = select(User).options(selectinload(User.role)).where(User.id == user_id)
        return await self.session.scalar(stmt)

    async def create_user(self, role: Role, **fields: Any) -> User:
        user = User(role_id=role.id, **fields)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user, attribute_names=["role"])
        return user

    async def update_user(self, user: User, **changes: Any) -> User:
        for field_name, value in changes.items():
            setattr(user, field_name, value)
        await self.session.flush()
        return user
