"""
Service for the per-user quota ledger.

Every change goes through `_apply`, which recomputes the cached totals from
the bucket columns and appends one ledger entry carrying the signed change
in remaining quota. Nothing else writes to the quota row.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span, get_logger
from common.db.transaction_utils import transaction
from packages.quota.exceptions import QuotaExhaustedError
from packages.quota.models.domain.enums import LedgerEntryType, QuotaBucket
from packages.quota.models.domain.ledger import (
    QuotaChange,
    QuotaLedgerEntry,
    QuotaLedgerEntryCreateModel,
)
from packages.quota.models.domain.quota import (
    DEFAULT_FREE_QUOTA,
    Quota,
    QuotaCounters,
    QuotaCreateModel,
    QuotaUpdateModel,
)
from packages.quota.repositories.ledger_repository import QuotaLedgerRepository
from packages.quota.repositories.quota_repository import QuotaRepository

logger = get_logger(__name__)

CONSUMPTION_ORDER = (QuotaBucket.FREE, QuotaBucket.PAID, QuotaBucket.EXTRA)


class QuotaService:
    """Reads, initializes and mutates quota rows for one request session."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.quota_repo = QuotaRepository(db_session)
        self.ledger_repo = QuotaLedgerRepository(db_session)

    @trace_span
    async def get_quota(self, user_id: int) -> Quota:
        """Return the user's quota, creating the free allowance on first access."""
        quota = await self._get_or_create(user_id)
        if not quota.is_consistent():
            quota = await self._reconcile(quota)
        return quota

    @trace_span
    async def list_entries(self, user_id: int, limit: int = 50) -> List[QuotaLedgerEntry]:
        return await self.ledger_repo.list_for_user(user_id, limit=limit)

    @trace_span
    async def lock(self, user_id: int) -> Quota:
        """Get (or create) the quota row and hold its row lock for the transaction."""
        await self._get_or_create(user_id)
        quota = await self.quota_repo.get_by_user_id(user_id, for_update=True)
        if not quota.is_consistent():
            quota = await self._reconcile(quota)
        return quota

    @trace_span
    async def grant_membership(
        self,
        user_id: int,
        order_id: int,
        monthly_quota: int,
        reset_at: datetime,
        plan: Optional[str] = None,
    ) -> QuotaChange:
        """
        Replace the paid allowance with a fresh monthly grant.

        Runs inside the caller's transaction. The ledger amount is the real
        change in remaining quota, so an unused previous grant is not counted
        twice.
        """
        quota = await self.lock(user_id)
        counters = quota.counters().model_copy(
            update={"paid_quota": monthly_quota, "paid_quota_used": 0}
        )
        return await self._apply(
            quota,
            counters,
            entry_type=LedgerEntryType.MEMBERSHIP_GRANT,
            bucket=QuotaBucket.PAID,
            order_id=order_id,
            reset_at=reset_at,
            description=f"Membership {plan}" if plan else "Membership grant",
        )

    @trace_span
    async def credit_extra(self, user_id: int, order_id: int, amount: int) -> QuotaChange:
        """Add purchased quota to the extra bucket. Runs inside the caller's transaction."""
        quota = await self.lock(user_id)
        counters = quota.counters()
        counters = counters.model_copy(update={"extra_quota": counters.extra_quota + amount})
        return await self._apply(
            quota,
            counters,
            entry_type=LedgerEntryType.EXTRA_PURCHASE,
            bucket=QuotaBucket.EXTRA,
            order_id=order_id,
            description=f"Purchased {amount} quota",
        )

    @trace_span
    async def consume(
        self, user_id: int, amount: int = 1, generation_id: Optional[int] = None
    ) -> QuotaChange:
        """
        Debit `amount` from the first bucket with enough headroom
        (free, then paid, then extra).

        Raises QuotaExhaustedError when no bucket can cover it.
        """
        async with transaction(self.db_session):
            quota = await self.lock(user_id)
            counters = quota.counters()

            for bucket in CONSUMPTION_ORDER:
                if counters.bucket_remaining(bucket) >= amount:
                    used_field = f"{bucket.value.lower()}_quota_used"
                    counters = counters.model_copy(
                        update={used_field: getattr(counters, used_field) + amount}
                    )
                    return await self._apply(
                        quota,
                        counters,
                        entry_type=LedgerEntryType.CONSUMPTION,
                        bucket=bucket,
                        generation_id=generation_id,
                    )

        logger.warning(
            "Quota exhausted",
            extra={
                "user_id": user_id,
                "requested": amount,
                "remaining": quota.remaining_quota,
            },
        )
        raise QuotaExhaustedError()

    async def _get_or_create(self, user_id: int) -> Quota:
        quota = await self.quota_repo.get_by_user_id(user_id)
        if quota:
            return quota

        try:
            async with transaction(self.db_session):
                quota = await self.quota_repo.create(QuotaCreateModel(user_id=user_id))
                await self.ledger_repo.create(
                    QuotaLedgerEntryCreateModel(
                        user_id=user_id,
                        entry_type=LedgerEntryType.FREE_GRANT,
                        bucket=QuotaBucket.FREE,
                        amount=DEFAULT_FREE_QUOTA,
                        remaining_after=quota.remaining_quota,
                        description="Initial free quota",
                    )
                )
        except IntegrityError:
            # Lost the race against a concurrent first access
            logger.info("Quota row created concurrently", extra={"user_id": user_id})
            quota = await self.quota_repo.get_by_user_id(user_id)
            if quota is None:
                raise
            return quota

        logger.info(
            "Initialized quota",
            extra={"user_id": user_id, "free_quota": quota.free_quota},
        )
        return quota

    async def _reconcile(self, quota: Quota) -> Quota:
        counters = quota.counters()
        logger.warning(
            "Quota totals out of sync with bucket columns",
            extra={
                "user_id": quota.user_id,
                "cached_total": quota.total_quota,
                "cached_remaining": quota.remaining_quota,
                "total": counters.total_quota,
                "remaining": counters.remaining_quota,
            },
        )
        change = await self._apply(
            quota,
            counters,
            entry_type=LedgerEntryType.ADJUSTMENT,
            description="Reconciled cached totals",
        )
        return change.quota

    async def _apply(
        self,
        quota: Quota,
        counters: QuotaCounters,
        entry_type: LedgerEntryType,
        bucket: Optional[QuotaBucket] = None,
        order_id: Optional[int] = None,
        generation_id: Optional[int] = None,
        reset_at: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> QuotaChange:
        update_model = QuotaUpdateModel(
            **counters.model_dump(),
            total_quota=counters.total_quota,
            remaining_quota=counters.remaining_quota,
        )
        if reset_at is not None:
            update_model.reset_at = reset_at

        updated = await self.quota_repo.update(quota.id, update_model)
        entry = await self.ledger_repo.create(
            QuotaLedgerEntryCreateModel(
                user_id=quota.user_id,
                entry_type=entry_type,
                bucket=bucket,
                amount=updated.remaining_quota - quota.remaining_quota,
                remaining_after=updated.remaining_quota,
                order_id=order_id,
                generation_id=generation_id,
                description=description,
            )
        )

        logger.info(
            "Quota ledger entry appended",
            extra={
                "user_id": quota.user_id,
                "entry_type": entry.entry_type.value,
                "amount": entry.amount,
                "remaining_after": entry.remaining_after,
                "order_id": order_id,
            },
        )
        return QuotaChange(quota=updated, entry=entry)
