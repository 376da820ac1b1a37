"""
Signature checks for asynchronous gateway notifications.

Alipay signs the notification form fields with RSA2 (SHA256withRSA over the
sorted `key=value` pairs). WeChat Pay v3 signs `timestamp\\nnonce\\nbody\\n`
with the platform key and encrypts the transaction under the merchant's
APIv3 key. Without a configured key a verifier only accepts unsigned
notifications where mock payments are enabled.
"""

import base64
import json
import textwrap
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from jwt.algorithms import RSAAlgorithm

from common.core.config import settings
from common.core.exceptions import ValidationError
from common.core.telemetry import get_logger
from packages.billing.models.domain.enums import PayMethod, TradeOutcome
from packages.billing.models.domain.payment import GatewayNotification

logger = get_logger(__name__)

_rsa = RSAAlgorithm(RSAAlgorithm.SHA256)

ALIPAY_TRADE_OUTCOMES = {
    "TRADE_SUCCESS": TradeOutcome.SUCCESS,
    "TRADE_FINISHED": TradeOutcome.SUCCESS,
    "TRADE_CLOSED": TradeOutcome.FAILED,
}

WECHAT_TRADE_OUTCOMES = {
    "SUCCESS": TradeOutcome.SUCCESS,
    "CLOSED": TradeOutcome.FAILED,
    "PAYERROR": TradeOutcome.FAILED,
    "REVOKED": TradeOutcome.FAILED,
}


def _as_pem(key: str) -> str:
    key = key.strip()
    if key.startswith("-----BEGIN"):
        return key
    body = "\n".join(textwrap.wrap(key, 64))
    return f"-----BEGIN PUBLIC KEY-----\n{body}\n-----END PUBLIC KEY-----\n"


def _parse_amount(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError):
        raise ValidationError("Invalid notification amount")


class NotifyVerifier(ABC):
    """Checks a gateway callback and turns it into a GatewayNotification."""

    pay_method: PayMethod

    def __init__(self, public_key: Optional[str], allow_unsigned: bool):
        self._key = _rsa.prepare_key(_as_pem(public_key)) if public_key else None
        self.allow_unsigned = allow_unsigned

    def _check_signature(self, message: bytes, signature: Optional[str]):
        if self._key is None:
            if not self.allow_unsigned:
                raise ValidationError("Signature verification is not configured")
            logger.warning(
                "Accepting unsigned notification",
                extra={"pay_method": self.pay_method.value},
            )
            return
        if not signature:
            raise ValidationError("Missing signature")
        try:
            raw_signature = base64.b64decode(signature, validate=True)
        except ValueError:
            raise ValidationError("Invalid signature")
        if not _rsa.verify(message, self._key, raw_signature):
            raise ValidationError("Invalid signature")

    @abstractmethod
    def verify(
        self, headers: Mapping[str, str], body: bytes, form: Mapping[str, str]
    ) -> GatewayNotification:
        """Raises ValidationError when the notification cannot be trusted."""


class AlipayNotifyVerifier(NotifyVerifier):
    pay_method = PayMethod.ALIPAY

    def verify(self, headers, body, form) -> GatewayNotification:
        params = dict(form)
        content = "&".join(
            f"{key}={params[key]}"
            for key in sorted(params)
            if key not in ("sign", "sign_type") and params[key] != ""
        )
        self._check_signature(content.encode("utf-8"), params.get("sign"))

        order_no = params.get("out_trade_no")
        if not order_no:
            raise ValidationError("out_trade_no is required")
        trade_status = params.get("trade_status", "")
        return GatewayNotification(
            pay_method=self.pay_method,
            order_no=order_no,
            trade_no=params.get("trade_no"),
            trade_status=trade_status,
            outcome=ALIPAY_TRADE_OUTCOMES.get(trade_status, TradeOutcome.PENDING),
            amount=_parse_amount(params.get("total_amount")),
            raw=params,
        )


class WechatNotifyVerifier(NotifyVerifier):
    pay_method = PayMethod.WECHAT

    def __init__(
        self,
        public_key: Optional[str],
        api_v3_key: Optional[str],
        allow_unsigned: bool,
    ):
        super().__init__(public_key, allow_unsigned)
        self._aes = AESGCM(api_v3_key.encode("utf-8")) if api_v3_key else None

    def _decrypt(self, resource: Dict[str, Any]) -> Dict[str, Any]:
        if self._aes is None:
            raise ValidationError("Cannot decrypt notification resource")
        associated_data = resource.get("associated_data")
        try:
            plaintext = self._aes.decrypt(
                resource["nonce"].encode("utf-8"),
                base64.b64decode(resource["ciphertext"]),
                associated_data.encode("utf-8") if associated_data else None,
            )
            return json.loads(plaintext)
        except (KeyError, ValueError, InvalidTag):
            raise ValidationError("Cannot decrypt notification resource")

    def verify(self, headers, body, form) -> GatewayNotification:
        headers = {k.lower(): v for k, v in headers.items()}
        message = b"%s\n%s\n%s\n" % (
            headers.get("wechatpay-timestamp", "").encode("utf-8"),
            headers.get("wechatpay-nonce", "").encode("utf-8"),
            body,
        )
        self._check_signature(message, headers.get("wechatpay-signature"))

        try:
            envelope = json.loads(body)
        except ValueError:
            raise ValidationError("Malformed notification body")
        # Unsigned development callbacks may carry the transaction in the clear
        if isinstance(envelope, dict) and "resource" in envelope:
            transaction = self._decrypt(envelope["resource"])
        else:
            transaction = envelope
        if not isinstance(transaction, dict) or not transaction.get("out_trade_no"):
            raise ValidationError("out_trade_no is required")

        trade_state = transaction.get("trade_state") or "SUCCESS"
        total_fen = (transaction.get("amount") or {}).get("total")
        return GatewayNotification(
            pay_method=self.pay_method,
            order_no=transaction["out_trade_no"],
            trade_no=transaction.get("transaction_id"),
            trade_status=trade_state,
            outcome=WECHAT_TRADE_OUTCOMES.get(trade_state, TradeOutcome.PENDING),
            amount=_parse_amount(total_fen) / 100,
            raw=transaction,
        )


def get_alipay_verifier() -> NotifyVerifier:
    return AlipayNotifyVerifier(
        settings.alipay_public_key, allow_unsigned=settings.mock_payments_enabled
    )


def get_wechat_verifier() -> NotifyVerifier:
    return WechatNotifyVerifier(
        settings.wechat_platform_public_key,
        settings.wechat_api_v3_key,
        allow_unsigned=settings.mock_payments_enabled,
    )
