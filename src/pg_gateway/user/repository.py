"""User lookup by name: the capability the engine consumes from the gateway.

The Bet Book and funding services resolve ``username -> user_id`` through
this protocol so they never import the ORM model directly.
"""

from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.pg_gateway.user.db_models import UserModel


@dataclass(frozen=True)
class UserRef:
    id: str
    username: str
    is_active: bool = True
    is_admin: bool = False


class UserLookupProtocol(Protocol):
    async def get_by_username(self, db: AsyncSession, username: str) -> UserRef | None: ...


class UserRepository:
    async def get_by_username(self, db: AsyncSession, username: str) -> UserRef | None:
        result = await db.execute(select(UserModel).where(UserModel.username == username))
        user = result.scalar_one_or_none()
        if user is None:
            return None
        return UserRef(
            id=str(user.id),
            username=user.username,
            is_active=user.is_active,
            is_admin=user.is_admin,
        )
