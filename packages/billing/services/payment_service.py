"""
Service for starting payments against orders.
"""

from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.exceptions import NotFoundError
from common.core.telemetry import trace_span, get_logger
from common.core.timeutils import utcnow
from packages.billing.models.domain.enums import PayMethod
from packages.billing.models.domain.payment import Payment, PaymentCreateModel
from packages.billing.repositories.order_repository import OrderRepository
from packages.billing.repositories.payment_repository import PaymentRepository

logger = get_logger(__name__)


class PaymentService:
    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.order_repo = OrderRepository(db_session)
        self.payment_repo = PaymentRepository(db_session)

    @trace_span
    async def create_payment(
        self,
        user_id: int,
        order_id: int,
        pay_method: PayMethod,
        pay_data: Optional[Dict[str, Any]] = None,
    ) -> Payment:
        """Open a PENDING payment for an unexpired, unpaid order owned by the user."""
        order = await self.order_repo.get(order_id, user_id=user_id)
        if not order or not order.is_payable(utcnow()):
            raise NotFoundError("Order not found or expired")

        payment = await self.payment_repo.create(
            PaymentCreateModel(
                order_id=order.id,
                user_id=user_id,
                amount=order.amount,
                currency=order.currency,
                pay_method=pay_method,
                pay_data=pay_data,
            )
        )
        logger.info(
            "Payment created",
            extra={
                "user_id": user_id,
                "order_id": order.id,
                "payment_id": payment.id,
                "pay_method": payment.pay_method.value,
            },
        )
        return payment
