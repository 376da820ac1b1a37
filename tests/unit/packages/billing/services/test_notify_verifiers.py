import base64
import json
from decimal import Decimal

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from common.core.exceptions import ValidationError
from packages.billing.models.domain.enums import PayMethod, TradeOutcome
from packages.billing.services.notify_verifiers import (
    AlipayNotifyVerifier,
    WechatNotifyVerifier,
)

API_V3_KEY = "0123456789abcdef0123456789abcdef"


@pytest.fixture(scope="module")
def gateway_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="module")
def public_pem(gateway_key):
    return (
        gateway_key.public_key()
        .public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )


def _sign(key, message: bytes) -> str:
    return base64.b64encode(
        key.sign(message, padding.PKCS1v15(), hashes.SHA256())
    ).decode()


def _alipay_params(key, **overrides):
    params = {
        "app_id": "2021000000000000",
        "out_trade_no": "ORD1760000000000ABC123",
        "trade_no": "2026101922001400000001",
        "trade_status": "TRADE_SUCCESS",
        "total_amount": "2.00",
        "buyer_logon_id": "",
    }
    params.update(overrides)
    content = "&".join(
        f"{k}={params[k]}" for k in sorted(params) if params[k] != ""
    )
    params["sign_type"] = "RSA2"
    params["sign"] = _sign(key, content.encode())
    return params


class TestAlipayNotifyVerifier:
    def test_valid_signature(self, gateway_key, public_pem):
        verifier = AlipayNotifyVerifier(public_pem, allow_unsigned=False)

        notification = verifier.verify({}, b"", _alipay_params(gateway_key))

        assert notification.pay_method == PayMethod.ALIPAY
        assert notification.order_no == "ORD1760000000000ABC123"
        assert notification.trade_no == "2026101922001400000001"
        assert notification.outcome == TradeOutcome.SUCCESS
        assert notification.amount == Decimal("2.00")
        assert notification.raw["sign_type"] == "RSA2"

    def test_accepts_bare_base64_key(self, gateway_key, public_pem):
        bare = "".join(
            line for line in public_pem.splitlines() if not line.startswith("-----")
        )
        verifier = AlipayNotifyVerifier(bare, allow_unsigned=False)

        notification = verifier.verify({}, b"", _alipay_params(gateway_key))

        assert notification.outcome == TradeOutcome.SUCCESS

    def test_tampered_amount(self, gateway_key, public_pem):
        verifier = AlipayNotifyVerifier(public_pem, allow_unsigned=False)
        params = _alipay_params(gateway_key)
        params["total_amount"] = "0.01"

        with pytest.raises(ValidationError, match="Invalid signature"):
            verifier.verify({}, b"", params)

    def test_missing_signature(self, gateway_key, public_pem):
        verifier = AlipayNotifyVerifier(public_pem, allow_unsigned=False)
        params = _alipay_params(gateway_key)
        del params["sign"]

        with pytest.raises(ValidationError, match="Missing signature"):
            verifier.verify({}, b"", params)

    def test_garbage_signature(self, gateway_key, public_pem):
        verifier = AlipayNotifyVerifier(public_pem, allow_unsigned=False)
        params = _alipay_params(gateway_key)
        params["sign"] = "not base64!"

        with pytest.raises(ValidationError, match="Invalid signature"):
            verifier.verify({}, b"", params)

    def test_unsigned_rejected_without_key(self):
        verifier = AlipayNotifyVerifier(None, allow_unsigned=False)

        with pytest.raises(ValidationError, match="not configured"):
            verifier.verify({}, b"", {"out_trade_no": "ORD1", "total_amount": "1"})

    def test_unsigned_allowed_for_mock_gateway(self):
        verifier = AlipayNotifyVerifier(None, allow_unsigned=True)

        notification = verifier.verify(
            {},
            b"",
            {
                "out_trade_no": "ORD1",
                "trade_status": "TRADE_CLOSED",
                "total_amount": "29.90",
            },
        )

        assert notification.outcome == TradeOutcome.FAILED
        assert notification.trade_no is None

    @pytest.mark.parametrize(
        "status,outcome",
        [
            ("TRADE_FINISHED", TradeOutcome.SUCCESS),
            ("WAIT_BUYER_PAY", TradeOutcome.PENDING),
        ],
    )
    def test_status_mapping(self, status, outcome):
        verifier = AlipayNotifyVerifier(None, allow_unsigned=True)

        notification = verifier.verify(
            {}, b"", {"out_trade_no": "ORD1", "trade_status": status, "total_amount": "1"}
        )

        assert notification.outcome == outcome

    def test_bad_amount(self):
        verifier = AlipayNotifyVerifier(None, allow_unsigned=True)

        with pytest.raises(ValidationError, match="amount"):
            verifier.verify({}, b"", {"out_trade_no": "ORD1", "total_amount": "abc"})


def _wechat_request(key, transaction, api_v3_key=API_V3_KEY):
    nonce = "0123456789ab"
    ciphertext = AESGCM(api_v3_key.encode()).encrypt(
        nonce.encode(), json.dumps(transaction).encode(), b"transaction"
    )
    body = json.dumps(
        {
            "id": "EV-2026101900000001",
            "event_type": "TRANSACTION.SUCCESS",
            "resource_type": "encrypt-resource",
            "resource": {
                "algorithm": "AEAD_AES_256_GCM",
                "ciphertext": base64.b64encode(ciphertext).decode(),
                "associated_data": "transaction",
                "nonce": nonce,
            },
        }
    ).encode()
    timestamp, request_nonce = "1760860800", "5K8264ILTKCH16CQ2502SI8ZNMTM67VS"
    message = f"{timestamp}\n{request_nonce}\n".encode() + body + b"\n"
    headers = {
        "Wechatpay-Timestamp": timestamp,
        "Wechatpay-Nonce": request_nonce,
        "Wechatpay-Signature": _sign(key, message),
        "Wechatpay-Serial": "5157F09EFDC096DE15EBE81A47057A7232F1B8E1",
    }
    return headers, body


WECHAT_TRANSACTION = {
    "out_trade_no": "ORD1760000000000ABC123",
    "transaction_id": "4200000000202610190000000001",
    "trade_state": "SUCCESS",
    "amount": {"total": 200, "currency": "CNY"},
}


class TestWechatNotifyVerifier:
    def test_valid_signature_and_resource(self, gateway_key, public_pem):
        verifier = WechatNotifyVerifier(public_pem, API_V3_KEY, allow_unsigned=False)
        headers, body = _wechat_request(gateway_key, WECHAT_TRANSACTION)

        notification = verifier.verify(headers, body, {})

        assert notification.pay_method == PayMethod.WECHAT
        assert notification.order_no == "ORD1760000000000ABC123"
        assert notification.trade_no == "4200000000202610190000000001"
        assert notification.outcome == TradeOutcome.SUCCESS
        assert notification.amount == Decimal("2")

    def test_tampered_body(self, gateway_key, public_pem):
        verifier = WechatNotifyVerifier(public_pem, API_V3_KEY, allow_unsigned=False)
        headers, body = _wechat_request(gateway_key, WECHAT_TRANSACTION)

        with pytest.raises(ValidationError, match="Invalid signature"):
            verifier.verify(headers, body.replace(b"EV-", b"XX-"), {})

    def test_wrong_api_key(self, gateway_key, public_pem):
        verifier = WechatNotifyVerifier(
            public_pem, "fedcba9876543210fedcba9876543210", allow_unsigned=False
        )
        headers, body = _wechat_request(gateway_key, WECHAT_TRANSACTION)

        with pytest.raises(ValidationError, match="Cannot decrypt"):
            verifier.verify(headers, body, {})

    def test_closed_trade(self, gateway_key, public_pem):
        verifier = WechatNotifyVerifier(public_pem, API_V3_KEY, allow_unsigned=False)
        headers, body = _wechat_request(
            gateway_key, {**WECHAT_TRANSACTION, "trade_state": "CLOSED"}
        )

        assert verifier.verify(headers, body, {}).outcome == TradeOutcome.FAILED

    def test_unsigned_plain_transaction(self):
        verifier = WechatNotifyVerifier(None, None, allow_unsigned=True)
        transaction = {k: v for k, v in WECHAT_TRANSACTION.items() if k != "trade_state"}

        notification = verifier.verify({}, json.dumps(transaction).encode(), {})

        assert notification.outcome == TradeOutcome.SUCCESS
        assert notification.amount == Decimal("2")

    def test_unsigned_rejected_without_key(self):
        verifier = WechatNotifyVerifier(None, None, allow_unsigned=False)

        with pytest.raises(ValidationError, match="not configured"):
            verifier.verify({}, json.dumps(WECHAT_TRANSACTION).encode(), {})

    def test_malformed_body(self):
        verifier = WechatNotifyVerifier(None, None, allow_unsigned=True)

        with pytest.raises(ValidationError, match="Malformed"):
            verifier.verify({}, b"<xml/>", {})
