"""
Unit tests for OrderService.

Database interactions are NOT mocked.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from common.core.exceptions import NotFoundError, ValidationError
from common.core.timeutils import ensure_utc, utcnow
from packages.billing.models.domain.enums import OrderStatus, OrderType, PayStatus
from packages.billing.services.order_service import OrderService
from packages.quota.repositories.quota_repository import QuotaRepository


class TestCreateMembershipOrder:
    @pytest.fixture
    async def service(self, test_db):
        return OrderService(test_db)

    async def test_single_month_costs_monthly_price(
        self, service, sample_user, basic_level
    ):
        order = await service.create_order(
            sample_user.id, "MEMBERSHIP", membership_id=basic_level.id, duration=1
        )

        assert order.type == OrderType.MEMBERSHIP
        assert order.amount == Decimal("29.90")
        assert order.membership_id == basic_level.id
        assert order.duration == 1
        assert order.quota_amount is None
        assert order.currency == "CNY"
        assert order.status == OrderStatus.PENDING
        assert order.pay_status == PayStatus.PENDING

    async def test_duration_defaults_to_one_month(
        self, service, sample_user, basic_level
    ):
        order = await service.create_order(
            sample_user.id, "MEMBERSHIP", membership_id=basic_level.id
        )

        assert order.duration == 1
        assert order.amount == Decimal("29.90")

    async def test_multi_month_multiplies_price(
        self, service, sample_user, basic_level
    ):
        order = await service.create_order(
            sample_user.id, "MEMBERSHIP", membership_id=basic_level.id, duration=3
        )

        assert order.amount == Decimal("89.70")

    async def test_twelve_months_uses_yearly_price(
        self, service, sample_user, basic_level
    ):
        order = await service.create_order(
            sample_user.id, "MEMBERSHIP", membership_id=basic_level.id, duration=12
        )

        assert order.amount == Decimal("299.00")

    @pytest.mark.parametrize("duration", [0, 13, -1])
    async def test_rejects_out_of_range_duration(
        self, service, sample_user, basic_level, duration
    ):
        with pytest.raises(ValidationError):
            await service.create_order(
                sample_user.id,
                "MEMBERSHIP",
                membership_id=basic_level.id,
                duration=duration,
            )

    async def test_requires_membership_selection(self, service, sample_user):
        with pytest.raises(ValidationError):
            await service.create_order(sample_user.id, "MEMBERSHIP")

    async def test_unknown_level_not_found(self, service, sample_user):
        with pytest.raises(NotFoundError) as exc_info:
            await service.create_order(sample_user.id, "MEMBERSHIP", membership_id=999)

        assert exc_info.value.status_code == 404

    async def test_inactive_level_not_found(
        self, service, sample_user, inactive_level
    ):
        with pytest.raises(NotFoundError):
            await service.create_order(
                sample_user.id, "MEMBERSHIP", membership_id=inactive_level.id
            )


class TestCreateQuotaOrder:
    @pytest.fixture
    async def service(self, test_db):
        return OrderService(test_db)

    async def test_minimum_purchase_price(self, service, sample_user):
        order = await service.create_order(sample_user.id, "QUOTA", quota_amount=10)

        assert order.type == OrderType.QUOTA
        assert order.amount == Decimal("2.00")
        assert order.quota_amount == 10
        assert order.membership_id is None
        assert order.duration is None

    async def test_ignores_membership_fields(self, service, sample_user, basic_level):
        order = await service.create_order(
            sample_user.id,
            "QUOTA",
            membership_id=basic_level.id,
            duration=3,
            quota_amount=25,
        )

        assert order.amount == Decimal("5.00")
        assert order.membership_id is None
        assert order.duration is None

    @pytest.mark.parametrize("quota_amount", [None, 0, 9])
    async def test_rejects_below_minimum(self, service, sample_user, quota_amount):
        with pytest.raises(ValidationError):
            await service.create_order(
                sample_user.id, "QUOTA", quota_amount=quota_amount
            )

    @pytest.mark.parametrize("order_type", [None, "", "quota", "SUBSCRIPTION"])
    async def test_rejects_invalid_type(self, service, sample_user, order_type):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_order(sample_user.id, order_type, quota_amount=10)

        assert exc_info.value.message == "Invalid order type"

    async def test_order_expires_in_thirty_minutes(self, service, sample_user):
        before = utcnow()
        order = await service.create_order(sample_user.id, "QUOTA", quota_amount=10)

        expire_at = ensure_utc(order.expire_at)
        assert before + timedelta(minutes=29) < expire_at
        assert expire_at <= utcnow() + timedelta(minutes=30)

    async def test_creating_order_touches_no_quota(self, service, sample_user, test_db):
        await service.create_order(sample_user.id, "QUOTA", quota_amount=10)

        assert await QuotaRepository(test_db).get_by_user_id(sample_user.id) is None


class TestListOrders:
    @pytest.fixture
    async def service(self, test_db):
        return OrderService(test_db)

    async def test_lists_own_orders_newest_first_with_membership(
        self, service, sample_user, other_user, basic_level
    ):
        quota_order = await service.create_order(
            sample_user.id, "QUOTA", quota_amount=10
        )
        membership_order = await service.create_order(
            sample_user.id, "MEMBERSHIP", membership_id=basic_level.id
        )
        await service.create_order(other_user.id, "QUOTA", quota_amount=10)

        orders, total = await service.list_orders(sample_user.id)

        assert total == 2
        assert [o.id for o in orders] == [membership_order.id, quota_order.id]
        assert orders[0].membership.name == "基础会员"
        assert orders[0].membership.level == "BASIC"
        assert orders[1].membership is None

    async def test_pagination(self, service, sample_user):
        for _ in range(5):
            await service.create_order(sample_user.id, "QUOTA", quota_amount=10)

        page_one, total = await service.list_orders(sample_user.id, page=1, limit=2)
        page_three, _ = await service.list_orders(sample_user.id, page=3, limit=2)

        assert total == 5
        assert len(page_one) == 2
        assert len(page_three) == 1
