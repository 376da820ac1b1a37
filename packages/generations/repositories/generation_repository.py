"""
Repository for generation history.
"""

from typing import List, Optional, Tuple
from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from common.repositories.base import BaseRepository
from common.core.telemetry import trace_span
from packages.generations.models.database.generation import GenerationEntity
from packages.generations.models.domain.enums import HistorySortField, SortOrder
from packages.generations.models.domain.generation import Generation


class GenerationRepository(BaseRepository[GenerationEntity, Generation]):
    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(GenerationEntity, Generation, db_session)

    @trace_span
    async def list_for_user(
        self,
        user_id: int,
        offset: int = 0,
        limit: int = 10,
        sort_by: HistorySortField = HistorySortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> Tuple[List[Generation], int]:
        column = getattr(GenerationEntity, sort_by.column_name)
        ordering = column.asc() if sort_order == SortOrder.ASC else column.desc()

        query = (
            self._add_user_filter(select(GenerationEntity), user_id)
            .order_by(ordering, GenerationEntity.id.desc())
            .offset(offset)
            .limit(limit)
        )
        count_query = self._add_user_filter(
            select(func.count()).select_from(GenerationEntity), user_id
        )

        async with self._get_session() as session:
            result = await session.execute(query)
            total = (await session.execute(count_query)).scalar_one()
            return self._entities_to_domain(result.scalars().all()), total

    @trace_span
    async def delete_for_user(self, user_id: int) -> int:
        async with self._get_session() as session:
            result = await session.execute(
                delete(GenerationEntity).where(GenerationEntity.user_id == user_id)
            )
            await session.flush()
            return result.rowcount
