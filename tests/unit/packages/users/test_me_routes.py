import pytest
from sqlalchemy import update

from packages.membership.services.subscription_service import SubscriptionService
from packages.users.models.database.user import UserEntity


@pytest.mark.asyncio
class TestMeRoutes:
    async def test_profile_with_billing_state(self, client, sample_user):
        response = await client.get("/api/auth/me")

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == sample_user.id
        assert data["user"]["email"] == "shopper@example.com"
        assert data["user"]["role"] == "USER"
        assert "createdAt" in data["user"]
        assert data["subscription"] is None
        assert data["quota"]["remainingQuota"] == 5

    async def test_profile_includes_subscription(self, client, test_db, sample_user):
        await SubscriptionService(test_db).activate(
            sample_user.id, plan="BASIC", duration_months=1
        )

        response = await client.get("/api/auth/me")

        assert response.json()["subscription"]["plan"] == "BASIC"

    async def test_inactive_user(self, client, test_db, sample_user):
        await test_db.execute(
            update(UserEntity)
            .where(UserEntity.id == sample_user.id)
            .values(is_active=False)
        )

        response = await client.get("/api/auth/me")

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}
