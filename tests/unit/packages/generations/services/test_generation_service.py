"""
Unit tests for GenerationService.

Database interactions are NOT mocked.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from common.core.exceptions import NotFoundError, ValidationError
from packages.generations.models.domain.generation import GenerationCreateModel
from packages.generations.services.generation_service import GenerationService
from packages.quota.models.domain.enums import LedgerEntryType, QuotaBucket
from packages.quota.services.quota_service import QuotaService


def _generation(user_id, **kwargs):
    defaults = dict(
        model_image="https://cdn.example.com/model.png",
        outfit_images=["https://cdn.example.com/top.png"],
        pose="standing",
        generated_images=["https://cdn.example.com/result-1.png"],
        time="12.5",
    )
    defaults.update(kwargs)
    return GenerationCreateModel(user_id=user_id, **defaults)


class TestRecordGeneration:
    @pytest.fixture
    async def service(self, test_db):
        return GenerationService(test_db)

    async def test_records_and_debits_one_unit(self, service, test_db, sample_user):
        generation = await service.record_generation(_generation(sample_user.id))

        assert generation.id is not None
        assert generation.color_tone == "冷暖平衡"
        assert generation.completed_at is not None
        quota = await QuotaService(test_db).get_quota(sample_user.id)
        assert quota.free_quota_used == 1
        assert quota.remaining_quota == 4

    async def test_debit_is_linked_to_generation(self, service, test_db, sample_user):
        generation = await service.record_generation(_generation(sample_user.id))

        entries = await QuotaService(test_db).list_entries(sample_user.id)
        consumption = entries[0]
        assert consumption.entry_type == LedgerEntryType.CONSUMPTION
        assert consumption.bucket == QuotaBucket.FREE
        assert consumption.amount == -1
        assert consumption.generation_id == generation.id

    async def test_recorded_even_when_quota_exhausted(
        self, service, test_db, sample_user
    ):
        quota_service = QuotaService(test_db)
        for _ in range(5):
            await quota_service.consume(sample_user.id)

        generation = await service.record_generation(_generation(sample_user.id))

        assert await service.get_generation(sample_user.id, generation.id)
        quota = await quota_service.get_quota(sample_user.id)
        assert quota.remaining_quota == 0
        assert quota.free_quota_used == 5

    async def test_recorded_when_debit_fails(self, service, sample_user):
        service.quota_service.consume = AsyncMock(side_effect=RuntimeError("db down"))

        generation = await service.record_generation(_generation(sample_user.id))

        assert generation.id is not None
        service.quota_service.consume.assert_awaited_once_with(
            sample_user.id, amount=1, generation_id=generation.id
        )


class TestHistory:
    @pytest.fixture
    async def service(self, test_db):
        return GenerationService(test_db)

    async def test_list_sorted_by_completion(self, service, sample_user):
        base = datetime(2026, 3, 1, tzinfo=timezone.utc)
        for offset in (2, 0, 1):
            await service.record_generation(
                _generation(
                    sample_user.id,
                    pose=f"pose-{offset}",
                    completed_at=base + timedelta(hours=offset),
                )
            )

        newest_first, total = await service.list_generations(
            sample_user.id, sort_by="completedAt", sort_order="desc"
        )
        oldest_first, _ = await service.list_generations(
            sample_user.id, sort_by="completedAt", sort_order="asc"
        )

        assert total == 3
        assert [g.pose for g in newest_first] == ["pose-2", "pose-1", "pose-0"]
        assert [g.pose for g in oldest_first] == ["pose-0", "pose-1", "pose-2"]

    async def test_list_paginates(self, service, sample_user):
        for _ in range(3):
            await service.record_generation(_generation(sample_user.id))

        page, total = await service.list_generations(sample_user.id, page=2, limit=2)

        assert total == 3
        assert len(page) == 1

    async def test_invalid_sort(self, service, sample_user):
        with pytest.raises(ValidationError):
            await service.list_generations(sample_user.id, sort_by="pose")

        with pytest.raises(ValidationError):
            await service.list_generations(sample_user.id, sort_order="sideways")

    async def test_other_users_record_is_not_found(
        self, service, sample_user, other_user
    ):
        generation = await service.record_generation(_generation(sample_user.id))

        with pytest.raises(NotFoundError):
            await service.get_generation(other_user.id, generation.id)

        with pytest.raises(NotFoundError):
            await service.delete_generation(other_user.id, generation.id)

    async def test_delete_generation(self, service, sample_user):
        generation = await service.record_generation(_generation(sample_user.id))

        await service.delete_generation(sample_user.id, generation.id)

        with pytest.raises(NotFoundError):
            await service.get_generation(sample_user.id, generation.id)

    async def test_clear_history_only_touches_own_records(
        self, service, sample_user, other_user
    ):
        for _ in range(2):
            await service.record_generation(_generation(sample_user.id))
        await service.record_generation(_generation(other_user.id))

        deleted = await service.clear_history(sample_user.id)

        assert deleted == 2
        _, remaining_own = await service.list_generations(sample_user.id)
        _, remaining_other = await service.list_generations(other_user.id)
        assert remaining_own == 0
        assert remaining_other == 1

    async def test_clearing_history_keeps_quota_ledger(
        self, service, test_db, sample_user
    ):
        await service.record_generation(_generation(sample_user.id))

        await service.clear_history(sample_user.id)

        entries = await QuotaService(test_db).list_entries(sample_user.id)
        assert [e.entry_type for e in entries] == [
            LedgerEntryType.CONSUMPTION,
            LedgerEntryType.FREE_GRANT,
        ]
