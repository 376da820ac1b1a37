from enum import Enum


class QuotaBucket(str, Enum):
    """Allowance buckets, in consumption order."""

    FREE = "FREE"  # sign-up allotment
    PAID = "PAID"  # membership monthly quota
    EXTRA = "EXTRA"  # purchased top-ups, never expire


class LedgerEntryType(str, Enum):
    FREE_GRANT = "FREE_GRANT"
    MEMBERSHIP_GRANT = "MEMBERSHIP_GRANT"
    EXTRA_PURCHASE = "EXTRA_PURCHASE"
    CONSUMPTION = "CONSUMPTION"
    ADJUSTMENT = "ADJUSTMENT"  # reconciliation of cached totals
