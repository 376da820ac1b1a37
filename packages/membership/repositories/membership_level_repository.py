"""
Repository for the membership level catalog.
"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from common.repositories.base import BaseRepository
from common.providers.caching import cache
from common.core.telemetry import trace_span
from packages.membership.cache_keys import active_levels_key
from packages.membership.models.database.membership_level import MembershipLevelEntity
from packages.membership.models.domain.membership_level import MembershipLevel


class MembershipLevelRepository(BaseRepository[MembershipLevelEntity, MembershipLevel]):
    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(MembershipLevelEntity, MembershipLevel, db_session)

    @trace_span
    @cache(MembershipLevel, ttl=3600, key_generator=active_levels_key)
    async def get_active_levels(self) -> List[MembershipLevel]:
        """Active levels in display order."""
        async with self._get_session() as session:
            result = await session.execute(
                select(MembershipLevelEntity)
                .where(MembershipLevelEntity.is_active == True)  # noqa
                .order_by(MembershipLevelEntity.sort_order.asc(), MembershipLevelEntity.id.asc())
            )
            return self._entities_to_domain(result.scalars().all())

    @trace_span
    async def get_active(self, level_id: int) -> Optional[MembershipLevel]:
        async with self._get_session() as session:
            result = await session.execute(
                select(MembershipLevelEntity).where(
                    MembershipLevelEntity.id == level_id,
                    MembershipLevelEntity.is_active == True,  # noqa
                )
            )
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def get_by_level(self, level: str) -> Optional[MembershipLevel]:
        async with self._get_session() as session:
            result = await session.execute(
                select(MembershipLevelEntity).where(MembershipLevelEntity.level == level)
            )
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def get_active_not_in(self, level_codes: List[str]) -> List[MembershipLevel]:
        async with self._get_session() as session:
            result = await session.execute(
                select(MembershipLevelEntity).where(
                    MembershipLevelEntity.is_active == True,  # noqa
                    MembershipLevelEntity.level.notin_(level_codes),
                )
            )
            return self._entities_to_domain(result.scalars().all())
