"""
Domain models for quota ledger entries.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from packages.quota.models.domain.enums import LedgerEntryType, QuotaBucket
from packages.quota.models.domain.quota import Quota


class QuotaLedgerEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    entry_type: LedgerEntryType
    bucket: Optional[QuotaBucket] = None
    amount: int
    remaining_after: int
    order_id: Optional[int] = None
    generation_id: Optional[int] = None
    description: Optional[str] = None
    created_at: datetime


class QuotaLedgerEntryCreateModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    user_id: int
    entry_type: LedgerEntryType
    bucket: Optional[QuotaBucket] = None
    amount: int
    remaining_after: int
    order_id: Optional[int] = None
    generation_id: Optional[int] = None
    description: Optional[str] = None


class QuotaChange(BaseModel):
    """Result of one ledger mutation."""

    quota: Quota
    entry: QuotaLedgerEntry
