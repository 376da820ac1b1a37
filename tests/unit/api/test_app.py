import pytest


@pytest.mark.asyncio
class TestApp:
    async def test_health(self, anonymous_client):
        response = await anonymous_client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_healthz(self, anonymous_client):
        response = await anonymous_client.get("/healthz")

        assert response.json() == {"status": "ok"}

    async def test_database_health(self, anonymous_client):
        response = await anonymous_client.get("/api/health/db")

        assert response.json() == {"status": "healthy", "database": "connected"}

    async def test_unknown_route_uses_error_envelope(self, anonymous_client):
        response = await anonymous_client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    async def test_validation_error_is_400(self, client):
        response = await client.post("/api/payment/pay", json={"payMethod": "ALIPAY"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("orderId")
