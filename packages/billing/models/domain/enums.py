from enum import Enum


class OrderType(str, Enum):
    MEMBERSHIP = "MEMBERSHIP"
    QUOTA = "QUOTA"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PayStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class PayMethod(str, Enum):
    ALIPAY = "ALIPAY"
    WECHAT = "WECHAT"
    MOCK = "MOCK"


class TradeOutcome(str, Enum):
    """Gateway trade state, normalized across gateways."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    PENDING = "PENDING"


class NotifyOutcome(str, Enum):
    SETTLED = "SETTLED"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    IGNORED = "IGNORED"
