"""
Handle verified gateway notifications.

Gateways retry a notification until they get an acknowledgement, so a
repeat for an already-settled order is acknowledged without crediting
again. Settlement itself goes through SettlementService.
"""

from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.exceptions import ConflictError, NotFoundError, ValidationError
from common.core.telemetry import trace_span, get_logger
from common.db.transaction_utils import transaction
from packages.billing.models.domain.enums import (
    NotifyOutcome,
    PaymentStatus,
    TradeOutcome,
)
from packages.billing.models.domain.payment import (
    GatewayNotification,
    PaymentUpdateModel,
)
from packages.billing.repositories.order_repository import OrderRepository
from packages.billing.repositories.payment_repository import PaymentRepository
from packages.billing.services.settlement_service import SettlementService

logger = get_logger(__name__)

AMOUNT_TOLERANCE = Decimal("0.01")


class PaymentNotifyService:
    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.order_repo = OrderRepository(db_session)
        self.payment_repo = PaymentRepository(db_session)
        self.settlement_service = SettlementService(db_session)

    @trace_span
    async def handle(self, notification: GatewayNotification) -> NotifyOutcome:
        """
        Apply a notification to its order.

        Raises NotFoundError for an unknown order number and ValidationError
        when the paid amount differs from the order amount by more than 0.01.
        """
        order = await self.order_repo.get_by_order_no(notification.order_no)
        if not order:
            raise NotFoundError("Order not found")
        if abs(order.amount - notification.amount) > AMOUNT_TOLERANCE:
            logger.warning(
                "Notification amount mismatch",
                extra={
                    "order_id": order.id,
                    "expected": str(order.amount),
                    "received": str(notification.amount),
                },
            )
            raise ValidationError("Amount mismatch")

        if notification.outcome == TradeOutcome.PENDING:
            return NotifyOutcome.IGNORED

        payment = await self.payment_repo.find_pending(
            order.id, notification.pay_method
        )
        if not payment:
            logger.info(
                "No pending payment for notification",
                extra={"order_id": order.id, "trade_status": notification.trade_status},
            )
            return NotifyOutcome.ALREADY_PROCESSED

        if notification.outcome == TradeOutcome.FAILED:
            async with transaction(self.db_session):
                await self.payment_repo.update(
                    payment.id,
                    PaymentUpdateModel(
                        status=PaymentStatus.FAILED,
                        pay_trade_no=notification.trade_no,
                        notify_data=notification.raw,
                    ),
                )
            logger.info(
                "Payment failed at gateway",
                extra={
                    "order_id": order.id,
                    "payment_id": payment.id,
                    "trade_status": notification.trade_status,
                },
            )
            return NotifyOutcome.PAYMENT_FAILED

        try:
            await self.settlement_service.settle(
                payment.id,
                order.id,
                trade_no=notification.trade_no or order.order_no,
                notify_data=notification.raw,
            )
        except ConflictError as e:
            logger.info(
                "Notification for settled order",
                extra={"order_id": order.id, "payment_id": payment.id, "reason": e.message},
            )
            return NotifyOutcome.ALREADY_PROCESSED
        return NotifyOutcome.SETTLED
