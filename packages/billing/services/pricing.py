"""
Order pricing and numbering rules.
"""

import secrets
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from common.core.timeutils import epoch_millis

QUOTA_UNIT_PRICE = Decimal("0.20")
MIN_QUOTA_PURCHASE = 10
MIN_DURATION_MONTHS = 1
MAX_DURATION_MONTHS = 12
ORDER_TTL = timedelta(minutes=30)

_CENTS = Decimal("0.01")


def to_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def quota_price(quota_amount: int) -> Decimal:
    return to_money(QUOTA_UNIT_PRICE * quota_amount)


def generate_order_no(now: Optional[datetime] = None) -> str:
    """`ORD` + epoch millis + 8 upper-case hex chars. Unique, not secret."""
    return f"ORD{epoch_millis(now)}{secrets.token_hex(4).upper()}"
