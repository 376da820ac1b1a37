"""
Repository for payments.
"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from common.repositories.base import BaseRepository
from common.core.telemetry import trace_span
from packages.billing.models.database.payment import PaymentEntity
from packages.billing.models.domain.enums import PayMethod, PaymentStatus
from packages.billing.models.domain.payment import Payment


class PaymentRepository(BaseRepository[PaymentEntity, Payment]):
    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(PaymentEntity, Payment, db_session)

    @trace_span
    async def list_for_order(self, order_id: int) -> List[Payment]:
        async with self._get_session() as session:
            result = await session.execute(
                select(PaymentEntity)
                .where(PaymentEntity.order_id == order_id)
                .order_by(PaymentEntity.id)
            )
            return self._entities_to_domain(result.scalars().all())

    @trace_span
    async def find_pending(
        self, order_id: int, pay_method: PayMethod
    ) -> Optional[Payment]:
        """Latest PENDING payment of an order made with the given method."""
        async with self._get_session() as session:
            result = await session.execute(
                select(PaymentEntity)
                .where(
                    PaymentEntity.order_id == order_id,
                    PaymentEntity.pay_method == PayMethod(pay_method).value,
                    PaymentEntity.status == PaymentStatus.PENDING.value,
                )
                .order_by(PaymentEntity.id.desc())
                .limit(1)
            )
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None
