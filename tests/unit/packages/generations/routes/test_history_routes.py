import pytest

from packages.generations.models.domain.generation import GenerationCreateModel
from packages.generations.services.generation_service import GenerationService

RECORD = {
    "modelImage": "https://cdn.example.com/model.png",
    "outfitImages": ["https://cdn.example.com/top.png"],
    "pose": "walking",
    "generatedImages": ["https://cdn.example.com/result-1.png"],
    "time": "8.2",
}


@pytest.mark.asyncio
class TestHistoryRoutes:
    async def test_create_record(self, client):
        response = await client.post("/api/history", json=RECORD)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Record created"
        generation = data["generation"]
        assert generation["modelImage"] == RECORD["modelImage"]
        assert generation["outfitImages"] == RECORD["outfitImages"]
        assert generation["colorTone"] == "冷暖平衡"
        assert generation["count"] == 1
        assert generation["status"] == "COMPLETED"

        quota = (await client.get("/api/quota")).json()["quota"]
        assert quota["remainingQuota"] == 4

    async def test_list_records(self, client):
        for _ in range(3):
            await client.post("/api/history", json=RECORD)

        response = await client.get(
            "/api/history",
            params={"page": 1, "limit": 2, "sortBy": "createdAt", "sortOrder": "asc"},
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["generations"]) == 2
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["totalPages"] == 2

    async def test_invalid_sort(self, client):
        response = await client.get("/api/history", params={"sortBy": "pose"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid sort parameters"}

    async def test_get_record(self, client):
        created = (await client.post("/api/history", json=RECORD)).json()["generation"]

        response = await client.get(f"/api/history/{created['id']}")

        assert response.status_code == 200
        assert response.json()["generation"]["id"] == created["id"]

    async def test_other_users_record_is_hidden(self, client, test_db, other_user):
        foreign = await GenerationService(test_db).generation_repo.create(
            GenerationCreateModel(user_id=other_user.id)
        )

        get_response = await client.get(f"/api/history/{foreign.id}")
        delete_response = await client.delete(f"/api/history/{foreign.id}")

        assert get_response.status_code == 404
        assert get_response.json() == {"error": "Record not found"}
        assert delete_response.status_code == 404

    async def test_delete_record(self, client):
        created = (await client.post("/api/history", json=RECORD)).json()["generation"]

        response = await client.delete(f"/api/history/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Record deleted"}
        assert (await client.get(f"/api/history/{created['id']}")).status_code == 404

    async def test_clear_history(self, client):
        for _ in range(2):
            await client.post("/api/history", json=RECORD)

        response = await client.delete("/api/history/clear")

        assert response.status_code == 200
        assert response.json() == {"message": "History cleared", "deletedCount": 2}
