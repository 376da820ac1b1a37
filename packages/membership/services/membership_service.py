"""
Service for the membership level catalog.
"""

from typing import List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.exceptions import NotFoundError
from common.core.telemetry import trace_span, get_logger
from common.db.context import readonly
from common.providers.caching import cache_invalidate
from packages.membership.cache_keys import MEMBERSHIP_LEVELS_PATTERN
from packages.membership.models.domain.membership_level import (
    MembershipLevel,
    MembershipLevelCreateModel,
    MembershipLevelUpdateModel,
)
from packages.membership.repositories.membership_level_repository import (
    MembershipLevelRepository,
)

logger = get_logger(__name__)


class MembershipService:
    def __init__(self, db_session: Optional[AsyncSession] = None):
        self.db_session = db_session
        self.level_repo = MembershipLevelRepository(db_session)

    @trace_span
    @readonly
    async def list_levels(self) -> List[MembershipLevel]:
        """Active catalog ordered by sort order (cached)."""
        return await self.level_repo.get_active_levels()

    @trace_span
    async def get_purchasable_level(self, level_id: int) -> MembershipLevel:
        """Level a user may buy right now. Unknown or retired levels are 404."""
        level = await self.level_repo.get_active(level_id)
        if not level:
            raise NotFoundError("Membership level not found or inactive")
        return level

    @trace_span
    @cache_invalidate([MEMBERSHIP_LEVELS_PATTERN])
    async def seed_levels(
        self,
        levels: Sequence[MembershipLevelCreateModel],
        deactivate_missing: bool = False,
    ) -> List[MembershipLevel]:
        """
        Insert or update catalog rows by level code.

        With deactivate_missing, active levels not in `levels` are retired
        (is_active=False). Rows are never deleted since orders reference them.
        """
        seeded = []
        for level_data in levels:
            existing = await self.level_repo.get_by_level(level_data.level)
            if existing:
                update_data = MembershipLevelUpdateModel(
                    **level_data.model_dump(exclude={"level"})
                )
                level = await self.level_repo.update(existing.id, update_data)
                logger.info(f"Updated membership level {level_data.level}")
            else:
                level = await self.level_repo.create(level_data)
                logger.info(f"Created membership level {level_data.level}")
            seeded.append(level)

        if deactivate_missing:
            codes = [level_data.level for level_data in levels]
            for stale in await self.level_repo.get_active_not_in(codes):
                await self.level_repo.update(
                    stale.id, MembershipLevelUpdateModel(is_active=False)
                )
                logger.info(f"Deactivated membership level {stale.level}")
        return seeded
