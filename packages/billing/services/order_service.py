"""
Service for order creation and listing.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.config import settings
from common.core.exceptions import ValidationError
from common.core.telemetry import trace_span, get_logger
from common.core.timeutils import utcnow
from common.models.pagination import page_offset
from packages.billing.models.domain.enums import OrderType
from packages.billing.models.domain.order import (
    Order,
    OrderCreateModel,
    OrderWithMembership,
)
from packages.billing.repositories.order_repository import OrderRepository
from packages.billing.services.pricing import (
    MAX_DURATION_MONTHS,
    MIN_DURATION_MONTHS,
    MIN_QUOTA_PURCHASE,
    ORDER_TTL,
    generate_order_no,
    quota_price,
    to_money,
)
from packages.membership.services.membership_service import MembershipService

logger = get_logger(__name__)


class OrderService:
    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.order_repo = OrderRepository(db_session)
        self.membership_service = MembershipService(db_session)

    @trace_span
    async def create_order(
        self,
        user_id: int,
        order_type: Optional[str],
        membership_id: Optional[int] = None,
        duration: Optional[int] = None,
        quota_amount: Optional[int] = None,
    ) -> Order:
        """
        Price and persist a PENDING order that expires in 30 minutes.

        Touches no quota or payment state.
        """
        try:
            order_type = OrderType(order_type)
        except ValueError:
            raise ValidationError("Invalid order type")

        now = utcnow()
        if order_type == OrderType.MEMBERSHIP:
            if membership_id is None:
                raise ValidationError("Please select a membership level")
            duration = MIN_DURATION_MONTHS if duration is None else duration
            if not MIN_DURATION_MONTHS <= duration <= MAX_DURATION_MONTHS:
                raise ValidationError(
                    f"Duration must be between {MIN_DURATION_MONTHS} and "
                    f"{MAX_DURATION_MONTHS} months"
                )
            level = await self.membership_service.get_purchasable_level(membership_id)
            amount = to_money(level.price_for(duration))
            quota_amount = None
        else:
            if quota_amount is None or quota_amount < MIN_QUOTA_PURCHASE:
                raise ValidationError(
                    f"Minimum quota purchase is {MIN_QUOTA_PURCHASE}"
                )
            amount = quota_price(quota_amount)
            membership_id = None
            duration = None

        order = await self.order_repo.create(
            OrderCreateModel(
                order_no=generate_order_no(now),
                user_id=user_id,
                type=order_type,
                amount=amount,
                currency=settings.default_currency,
                membership_id=membership_id,
                duration=duration,
                quota_amount=quota_amount,
                expire_at=now + ORDER_TTL,
            )
        )

        logger.info(
            "Order created",
            extra={
                "user_id": user_id,
                "order_id": order.id,
                "order_no": order.order_no,
                "type": order_type.value,
                "amount": str(amount),
            },
        )
        return order

    @trace_span
    async def list_orders(
        self, user_id: int, page: int = 1, limit: int = 10
    ) -> Tuple[List[OrderWithMembership], int]:
        return await self.order_repo.list_for_user(
            user_id, offset=page_offset(page, limit), limit=limit
        )
