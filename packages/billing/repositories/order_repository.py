"""
Repository for orders.
"""

from typing import List, Optional, Tuple
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from common.repositories.base import BaseRepository
from common.core.telemetry import trace_span
from packages.billing.models.database.order import OrderEntity
from packages.billing.models.domain.order import (
    Order,
    OrderMembership,
    OrderWithMembership,
)
from packages.membership.models.database.membership_level import MembershipLevelEntity


class OrderRepository(BaseRepository[OrderEntity, Order]):
    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(OrderEntity, Order, db_session)

    @trace_span
    async def get_by_order_no(self, order_no: str) -> Optional[Order]:
        async with self._get_session() as session:
            result = await session.execute(
                select(OrderEntity)
                .where(OrderEntity.order_no == order_no)
                .execution_options(populate_existing=True)
            )
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def list_for_user(
        self, user_id: int, offset: int = 0, limit: int = 10
    ) -> Tuple[List[OrderWithMembership], int]:
        """A page of the user's orders, newest first, and the total count."""
        query = (
            select(
                OrderEntity,
                MembershipLevelEntity.name,
                MembershipLevelEntity.level,
            )
            .outerjoin(
                MembershipLevelEntity,
                OrderEntity.membership_id == MembershipLevelEntity.id,
            )
            .where(OrderEntity.user_id == user_id)
            .order_by(OrderEntity.created_at.desc(), OrderEntity.id.desc())
            .offset(offset)
            .limit(limit)
        )
        count_query = (
            select(func.count())
            .select_from(OrderEntity)
            .where(OrderEntity.user_id == user_id)
        )

        async with self._get_session() as session:
            rows = (await session.execute(query)).all()
            total = (await session.execute(count_query)).scalar_one()

        orders = []
        for entity, level_name, level_code in rows:
            order = OrderWithMembership.model_validate(entity)
            if level_name is not None:
                order.membership = OrderMembership(name=level_name, level=level_code)
            orders.append(order)
        return orders, total
