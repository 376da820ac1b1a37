"""
Domain models for quota counters.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from packages.quota.models.domain.enums import QuotaBucket

DEFAULT_FREE_QUOTA = 5


class QuotaCounters(BaseModel):
    """The six bucket columns. Totals are always derived from these."""

    free_quota: int = 0
    free_quota_used: int = 0
    paid_quota: int = 0
    paid_quota_used: int = 0
    extra_quota: int = 0
    extra_quota_used: int = 0

    @property
    def total_quota(self) -> int:
        return self.free_quota + self.paid_quota + self.extra_quota

    @property
    def used_quota(self) -> int:
        return self.free_quota_used + self.paid_quota_used + self.extra_quota_used

    @property
    def remaining_quota(self) -> int:
        return self.total_quota - self.used_quota

    def bucket_remaining(self, bucket: QuotaBucket) -> int:
        prefix = bucket.value.lower()
        return max(
            0,
            getattr(self, f"{prefix}_quota") - getattr(self, f"{prefix}_quota_used"),
        )


class Quota(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    free_quota: int
    free_quota_used: int
    paid_quota: int
    paid_quota_used: int
    extra_quota: int
    extra_quota_used: int
    total_quota: int
    remaining_quota: int
    reset_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    def counters(self) -> QuotaCounters:
        return QuotaCounters.model_validate(self.model_dump(include=set(QuotaCounters.model_fields)))

    def is_consistent(self) -> bool:
        """Cached totals match the bucket columns."""
        counters = self.counters()
        return (
            self.total_quota == counters.total_quota
            and self.remaining_quota == counters.remaining_quota
        )


class QuotaCreateModel(BaseModel):
    user_id: int
    free_quota: int = DEFAULT_FREE_QUOTA
    total_quota: int = DEFAULT_FREE_QUOTA
    remaining_quota: int = DEFAULT_FREE_QUOTA


class QuotaUpdateModel(BaseModel):
    free_quota: Optional[int] = None
    free_quota_used: Optional[int] = None
    paid_quota: Optional[int] = None
    paid_quota_used: Optional[int] = None
    extra_quota: Optional[int] = None
    extra_quota_used: Optional[int] = None
    total_quota: Optional[int] = None
    remaining_quota: Optional[int] = None
    reset_at: Optional[datetime] = None
