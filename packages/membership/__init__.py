"""
Membership package - the priced level catalog and per-user subscriptions.

Subscriptions are only written by payment settlement (packages.billing).
"""
