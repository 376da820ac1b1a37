"""
Repository for the append-only quota ledger.

Only inserts and reads are exposed; entries are never updated or deleted.
"""

from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from common.repositories.base import BaseRepository
from common.core.exceptions import ForbiddenError
from common.core.telemetry import trace_span
from packages.quota.models.database.ledger_entry import QuotaLedgerEntryEntity
from packages.quota.models.domain.ledger import QuotaLedgerEntry


class QuotaLedgerRepository(
    BaseRepository[QuotaLedgerEntryEntity, QuotaLedgerEntry]
):
    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(QuotaLedgerEntryEntity, QuotaLedgerEntry, db_session)

    async def update(self, id, update_model):
        raise ForbiddenError("Quota ledger entries are append-only")

    async def delete(self, id):
        raise ForbiddenError("Quota ledger entries are append-only")

    @trace_span
    async def list_for_user(
        self, user_id: int, limit: int = 50
    ) -> List[QuotaLedgerEntry]:
        async with self._get_session() as session:
            result = await session.execute(
                select(QuotaLedgerEntryEntity)
                .where(QuotaLedgerEntryEntity.user_id == user_id)
                .order_by(QuotaLedgerEntryEntity.id.desc())
                .limit(limit)
            )
            return self._entities_to_domain(result.scalars().all())

    @trace_span
    async def sum_for_user(self, user_id: int) -> int:
        """Sum of all signed amounts; equals remaining_quota when consistent."""
        async with self._get_session() as session:
            result = await session.execute(
                select(func.coalesce(func.sum(QuotaLedgerEntryEntity.amount), 0)).where(
                    QuotaLedgerEntryEntity.user_id == user_id
                )
            )
            return int(result.scalar_one())

    @trace_span
    async def get_by_order_id(self, order_id: int) -> Optional[QuotaLedgerEntry]:
        async with self._get_session() as session:
            result = await session.execute(
                select(QuotaLedgerEntryEntity).where(
                    QuotaLedgerEntryEntity.order_id == order_id
                )
            )
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None
