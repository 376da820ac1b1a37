"""
Quota package - per-user generation allowance.

`quotas` holds one counters row per user; `quota_ledger_entries` is the
append-only log of every change to it. All mutations go through
QuotaService so the two never disagree.
"""
