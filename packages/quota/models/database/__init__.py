"""Database models for quota."""

from packages.quota.models.database.quota import QuotaEntity
from packages.quota.models.database.ledger_entry import QuotaLedgerEntryEntity

__all__ = [
    "QuotaEntity",
    "QuotaLedgerEntryEntity",
]
