import pytest

from common.core.exceptions import ForbiddenError
from packages.quota.models.domain.enums import LedgerEntryType, QuotaBucket
from packages.quota.models.domain.ledger import QuotaLedgerEntryCreateModel
from packages.quota.repositories.ledger_repository import QuotaLedgerRepository


@pytest.mark.asyncio
class TestQuotaLedgerRepository:
    async def _append(self, repo, user_id, amount, remaining_after, order_id=None):
        return await repo.create(
            QuotaLedgerEntryCreateModel(
                user_id=user_id,
                entry_type=LedgerEntryType.EXTRA_PURCHASE,
                bucket=QuotaBucket.EXTRA,
                amount=amount,
                remaining_after=remaining_after,
                order_id=order_id,
            )
        )

    async def test_list_for_user_newest_first(self, test_db, sample_user, other_user):
        repo = QuotaLedgerRepository(test_db)
        first = await self._append(repo, sample_user.id, 5, 5)
        second = await self._append(repo, sample_user.id, 10, 15)
        await self._append(repo, other_user.id, 3, 3)

        entries = await repo.list_for_user(sample_user.id)

        assert [e.id for e in entries] == [second.id, first.id]
        assert entries[0].entry_type == LedgerEntryType.EXTRA_PURCHASE

    async def test_sum_for_user(self, test_db, sample_user):
        repo = QuotaLedgerRepository(test_db)
        assert await repo.sum_for_user(sample_user.id) == 0

        await self._append(repo, sample_user.id, 5, 5)
        await self._append(repo, sample_user.id, -2, 3)

        assert await repo.sum_for_user(sample_user.id) == 3

    async def test_get_by_order_id(self, test_db, sample_user, make_quota_order):
        repo = QuotaLedgerRepository(test_db)
        order = await make_quota_order()
        entry = await self._append(repo, sample_user.id, 10, 15, order_id=order.id)

        found = await repo.get_by_order_id(order.id)

        assert found.id == entry.id
        assert await repo.get_by_order_id(order.id + 1000) is None

    async def test_entries_cannot_be_changed(self, test_db, sample_user):
        repo = QuotaLedgerRepository(test_db)
        entry = await self._append(repo, sample_user.id, 5, 5)

        with pytest.raises(ForbiddenError, match="append-only"):
            await repo.update(entry.id, None)
        with pytest.raises(ForbiddenError, match="append-only"):
            await repo.delete(entry.id)

        assert [e.id for e in await repo.list_for_user(sample_user.id)] == [entry.id]
