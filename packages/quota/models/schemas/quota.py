"""
API schemas for quota endpoints.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from packages.quota.models.domain.enums import LedgerEntryType, QuotaBucket


class QuotaSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    free_quota: int
    free_quota_used: int
    paid_quota: int
    paid_quota_used: int
    extra_quota: int
    extra_quota_used: int
    total_quota: int
    remaining_quota: int
    reset_at: Optional[datetime] = None


class QuotaResponse(BaseModel):
    quota: QuotaSchema


class QuotaLedgerEntrySchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    entry_type: LedgerEntryType
    bucket: Optional[QuotaBucket] = None
    amount: int
    remaining_after: int
    order_id: Optional[int] = None
    generation_id: Optional[int] = None
    description: Optional[str] = None
    created_at: datetime


class QuotaLedgerResponse(BaseModel):
    entries: List[QuotaLedgerEntrySchema]
