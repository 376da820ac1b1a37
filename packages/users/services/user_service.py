from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.exceptions import NotFoundError, ValidationError
from common.core.telemetry import trace_span, get_logger
from packages.users.repositories.user_repository import UserRepository
from packages.users.models.domain.user import User, UserCreateModel
from packages.users.models.domain.enums import UserRole

logger = get_logger(__name__)


class UserService:
    """Service for handling user operations."""

    def __init__(self, db_session: Optional[AsyncSession] = None):
        self.db_session = db_session
        self.user_repo = UserRepository(db_session)

    @trace_span
    async def create_user(self, user_data: UserCreateModel) -> User:
        """Create a user record (used by the account service and seed scripts)."""
        existing = await self.user_repo.get_by_email(user_data.email)
        if existing:
            raise ValidationError(f"User with email '{user_data.email}' already exists")

        user = await self.user_repo.create(user_data)
        logger.info(f"Created user with ID: {user.id}")
        return user

    @trace_span
    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.user_repo.get(user_id)

    @trace_span
    async def grant_membership_role(self, user_id: int) -> UserRole:
        """Promote a paying user to VIP. Admins keep their role."""
        user = await self.user_repo.get(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")

        if user.role == UserRole.ADMIN:
            return user.role

        if user.role != UserRole.VIP:
            await self.user_repo.set_role(user_id, UserRole.VIP)
            logger.info(
                "Promoted user to VIP",
                extra={"user_id": user_id, "previous_role": user.role.value},
            )
        return UserRole.VIP
