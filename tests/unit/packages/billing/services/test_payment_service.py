from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import update

from common.core.exceptions import NotFoundError
from common.core.timeutils import utcnow
from packages.billing.models.database.order import OrderEntity
from packages.billing.models.domain.enums import PayMethod, PaymentStatus
from packages.billing.services.order_service import OrderService
from packages.billing.services.payment_service import PaymentService


class TestPaymentService:
    @pytest.fixture
    async def service(self, test_db):
        return PaymentService(test_db)

    @pytest.fixture
    async def quota_order(self, test_db, sample_user):
        return await OrderService(test_db).create_order(
            sample_user.id, "QUOTA", quota_amount=50
        )

    async def test_create_payment_for_pending_order(
        self, service, sample_user, quota_order
    ):
        payment = await service.create_payment(
            sample_user.id,
            quota_order.id,
            PayMethod.WECHAT,
            pay_data={"deviceType": "mobile"},
        )

        assert payment.order_id == quota_order.id
        assert payment.user_id == sample_user.id
        assert payment.amount == Decimal("10.00")
        assert payment.currency == "CNY"
        assert payment.pay_method == PayMethod.WECHAT
        assert payment.status == PaymentStatus.PENDING
        assert payment.pay_data == {"deviceType": "mobile"}

    async def test_payment_attempts_are_kept_per_order(
        self, service, sample_user, quota_order
    ):
        first = await service.create_payment(
            sample_user.id, quota_order.id, PayMethod.ALIPAY
        )
        second = await service.create_payment(
            sample_user.id, quota_order.id, PayMethod.WECHAT
        )

        payments = await service.payment_repo.list_for_order(quota_order.id)
        assert [p.id for p in payments] == [first.id, second.id]

    async def test_other_users_order_is_not_found(
        self, service, other_user, quota_order
    ):
        with pytest.raises(NotFoundError) as exc_info:
            await service.create_payment(other_user.id, quota_order.id, PayMethod.ALIPAY)

        assert exc_info.value.message == "Order not found or expired"

    async def test_expired_order_is_not_found(
        self, service, sample_user, quota_order, test_db
    ):
        await test_db.execute(
            update(OrderEntity)
            .where(OrderEntity.id == quota_order.id)
            .values(expire_at=utcnow() - timedelta(minutes=1))
        )

        with pytest.raises(NotFoundError):
            await service.create_payment(sample_user.id, quota_order.id, PayMethod.ALIPAY)

    async def test_paid_order_is_not_found(
        self, service, sample_user, quota_order, test_db
    ):
        await test_db.execute(
            update(OrderEntity)
            .where(OrderEntity.id == quota_order.id)
            .values(pay_status="PAID", status="COMPLETED")
        )

        with pytest.raises(NotFoundError):
            await service.create_payment(sample_user.id, quota_order.id, PayMethod.ALIPAY)

    async def test_missing_order_is_not_found(self, service, sample_user):
        with pytest.raises(NotFoundError):
            await service.create_payment(sample_user.id, 12345, PayMethod.ALIPAY)
