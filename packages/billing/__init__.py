"""
Billing package - orders, payments and settlement.

An Order is a purchase intent (membership or quota top-up); a Payment is one
gateway attempt for it. Settlement turns a confirmed payment into quota and
subscription changes in a single transaction.
"""
