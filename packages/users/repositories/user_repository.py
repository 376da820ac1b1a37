from typing import Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from common.repositories.base import BaseRepository
from common.core.telemetry import trace_span
from packages.users.models.database.user import UserEntity
from packages.users.models.domain.user import User
from packages.users.models.domain.enums import UserRole


class UserRepository(BaseRepository[UserEntity, User]):
    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(UserEntity, User, db_session)

    @trace_span
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        async with self._get_session() as session:
            result = await session.execute(
                select(UserEntity).where(
                    UserEntity.email == email, UserEntity.deleted == False  # noqa
                )
            )
            db_user = result.scalar_one_or_none()
            return self._entity_to_domain(db_user) if db_user else None

    @trace_span
    async def set_role(self, user_id: int, role: UserRole) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                update(UserEntity)
                .where(UserEntity.id == user_id)
                .values(role=role.value)
            )
            return result.rowcount > 0
