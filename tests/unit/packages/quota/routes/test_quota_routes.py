import pytest

from packages.auth.services.token_service import TokenService


@pytest.mark.asyncio
class TestQuotaRoutes:
    async def test_get_quota_initializes_free_allowance(self, client):
        response = await client.get("/api/quota")

        assert response.status_code == 200
        quota = response.json()["quota"]
        assert quota["freeQuota"] == 5
        assert quota["freeQuotaUsed"] == 0
        assert quota["paidQuota"] == 0
        assert quota["extraQuota"] == 0
        assert quota["totalQuota"] == 5
        assert quota["remainingQuota"] == 5
        assert quota["resetAt"] is None

    async def test_get_ledger(self, client):
        await client.get("/api/quota")

        response = await client.get("/api/quota/ledger")

        assert response.status_code == 200
        entries = response.json()["entries"]
        assert len(entries) == 1
        assert entries[0]["entryType"] == "FREE_GRANT"
        assert entries[0]["amount"] == 5
        assert entries[0]["remainingAfter"] == 5

    async def test_requires_authentication(self, anonymous_client):
        response = await anonymous_client.get("/api/quota")

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication token missing"}
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_accepts_bearer_token(self, anonymous_client, sample_user):
        token = TokenService().issue_token(sample_user.id, sample_user.email)

        response = await anonymous_client.get(
            "/api/quota", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["quota"]["remainingQuota"] == 5

    async def test_accepts_session_cookie(self, anonymous_client, sample_user):
        token = TokenService().issue_token(sample_user.id, sample_user.email)
        response = await anonymous_client.get(
            "/api/quota", headers={"Cookie": f"token={token}"}
        )

        assert response.status_code == 200

    async def test_rejects_invalid_token(self, anonymous_client):
        response = await anonymous_client.get(
            "/api/quota", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid authentication token"}
