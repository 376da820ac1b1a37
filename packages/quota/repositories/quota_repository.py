"""
Repository for per-user quota rows.
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from common.repositories.base import BaseRepository
from common.core.telemetry import trace_span
from packages.quota.models.database.quota import QuotaEntity
from packages.quota.models.domain.quota import Quota


class QuotaRepository(BaseRepository[QuotaEntity, Quota]):
    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(QuotaEntity, Quota, db_session)

    @trace_span
    async def get_by_user_id(
        self, user_id: int, for_update: bool = False
    ) -> Optional[Quota]:
        """Fetch the user's quota row, optionally holding a row lock."""
        query = (
            select(QuotaEntity)
            .where(QuotaEntity.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()

        async with self._get_session() as session:
            result = await session.execute(query)
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None
