"""
Settlement: turn a confirmed payment into quota and membership changes.

Everything happens in one transaction. The payment and order rows are locked
(payment first, then order, then the user's quota row) before any state is
checked, so concurrent confirmations for the same order serialize and the
loser sees a non-PENDING payment. The ledger's unique order_id is the last
line of defense: a second credit for the same order cannot be inserted.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.exceptions import ConflictError, NotFoundError
from common.core.telemetry import trace_span, get_logger
from common.core.timeutils import ensure_utc, utcnow
from common.db.transaction_utils import transaction
from packages.billing.models.domain.enums import (
    OrderStatus,
    OrderType,
    PaymentStatus,
    PayStatus,
)
from packages.billing.models.domain.order import Order, OrderUpdateModel
from packages.billing.models.domain.payment import (
    Payment,
    PaymentUpdateModel,
    SettlementResult,
)
from packages.billing.repositories.order_repository import OrderRepository
from packages.billing.repositories.payment_repository import PaymentRepository
from packages.membership.repositories.membership_level_repository import (
    MembershipLevelRepository,
)
from packages.membership.services.subscription_service import SubscriptionService
from packages.quota.models.domain.ledger import QuotaChange
from packages.quota.services.quota_service import QuotaService
from packages.users.services.user_service import UserService

logger = get_logger(__name__)


class SettlementService:
    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.order_repo = OrderRepository(db_session)
        self.payment_repo = PaymentRepository(db_session)
        self.level_repo = MembershipLevelRepository(db_session)
        self.quota_service = QuotaService(db_session)
        self.subscription_service = SubscriptionService(db_session)
        self.user_service = UserService(db_session)

    @trace_span
    async def settle(
        self,
        payment_id: int,
        order_id: int,
        trade_no: str,
        notify_data: Optional[Dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> SettlementResult:
        """
        Mark the payment SUCCESS and the order PAID, then credit the purchase.

        Raises ConflictError when the payment or order is missing or no
        longer PENDING; nothing is written in that case.
        """
        now = now or utcnow()
        try:
            async with transaction(self.db_session):
                payment = await self.payment_repo.get_for_update(payment_id)
                order = await self.order_repo.get_for_update(order_id)
                self._check_settleable(payment, order)

                await self.payment_repo.update(
                    payment.id,
                    PaymentUpdateModel(
                        status=PaymentStatus.SUCCESS,
                        paid_at=now,
                        pay_trade_no=trade_no,
                        notify_data=notify_data,
                    ),
                )
                await self.order_repo.update(
                    order.id,
                    OrderUpdateModel(
                        status=OrderStatus.COMPLETED,
                        pay_status=PayStatus.PAID,
                        pay_time=now,
                        pay_trade_no=trade_no,
                    ),
                )

                if order.type == OrderType.MEMBERSHIP:
                    change = await self._settle_membership(order, now)
                else:
                    change = await self.quota_service.credit_extra(
                        order.user_id, order.id, order.quota_amount
                    )
        except IntegrityError as e:
            logger.warning(
                "Duplicate settlement rejected",
                extra={"order_id": order_id, "payment_id": payment_id, "error": str(e)},
            )
            raise ConflictError("Order has already been settled")

        logger.info(
            "Order settled",
            extra={
                "order_id": order.id,
                "payment_id": payment.id,
                "user_id": order.user_id,
                "type": order.type.value,
                "credited": change.entry.amount,
                "remaining_after": change.entry.remaining_after,
            },
        )
        return SettlementResult(
            order_id=order.id,
            payment_id=payment.id,
            order_type=order.type,
            credited=change.entry.amount,
            remaining_before=change.entry.remaining_after - change.entry.amount,
            remaining_after=change.entry.remaining_after,
        )

    def _check_settleable(self, payment: Optional[Payment], order: Optional[Order]):
        if (
            payment is None
            or payment.status != PaymentStatus.PENDING
            or (order is not None and payment.order_id != order.id)
        ):
            raise ConflictError("Payment not found or already processed")
        if order is None or order.pay_status != PayStatus.PENDING:
            raise ConflictError("Order not found or already paid")

    async def _settle_membership(self, order: Order, now: datetime) -> QuotaChange:
        # Retired levels still settle: the price was fixed when the order was made
        level = await self.level_repo.get(order.membership_id)
        if not level:
            raise NotFoundError("Membership level not found")

        subscription = await self.subscription_service.activate(
            order.user_id, plan=level.level, duration_months=order.duration, now=now
        )
        await self.user_service.grant_membership_role(order.user_id)
        return await self.quota_service.grant_membership(
            order.user_id,
            order.id,
            monthly_quota=level.monthly_quota,
            reset_at=ensure_utc(subscription.current_period_end),
            plan=level.level,
        )
