"""
Payment API routes.

Gateway notifications (Alipay, WeChat Pay) are verified and settled here.
The mock confirmation is available outside production only.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.config import settings
from common.core.exceptions import AppException, NotFoundError, ValidationError
from common.core.telemetry import trace_span, get_logger
from common.core.timeutils import epoch_millis, utcnow
from common.db.session import get_db
from packages.auth.dependencies import get_current_active_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.billing.models.schemas.payment import (
    MockPaymentResponse,
    PayRequest,
    PayResponse,
    PaymentSummary,
)
from packages.billing.services.notify_service import PaymentNotifyService
from packages.billing.services.notify_verifiers import (
    NotifyVerifier,
    get_alipay_verifier,
    get_wechat_verifier,
)
from packages.billing.services.payment_service import PaymentService
from packages.billing.services.settlement_service import SettlementService

logger = get_logger(__name__)

router = APIRouter()


@router.post("/pay", response_model=PayResponse)
@trace_span
async def create_payment(
    request: PayRequest,
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db),
):
    pay_data = {"deviceType": request.device_type} if request.device_type else None
    payment = await PaymentService(db_session).create_payment(
        current_user.user_id,
        request.order_id,
        request.pay_method,
        pay_data=pay_data,
    )

    mock_pay_url = None
    if settings.mock_payments_enabled:
        mock_pay_url = (
            f"/api/payment/mock?paymentId={payment.id}&orderId={payment.order_id}"
        )
    return PayResponse(
        message="Payment created",
        payment=PaymentSummary.model_validate(payment),
        mock_pay_url=mock_pay_url,
    )


@router.get("/mock", response_model=MockPaymentResponse)
@trace_span
async def mock_payment(
    payment_id: Optional[int] = Query(None, alias="paymentId"),
    order_id: Optional[int] = Query(None, alias="orderId"),
    db_session: AsyncSession = Depends(get_db),
):
    """Simulated gateway confirmation: settles the order immediately."""
    if not settings.mock_payments_enabled:
        raise NotFoundError("Not found")
    if payment_id is None or order_id is None:
        raise ValidationError("paymentId and orderId are required")

    now = utcnow()
    await SettlementService(db_session).settle(
        payment_id,
        order_id,
        trade_no=f"MOCK{epoch_millis(now)}",
        notify_data={"mock": True, "time": now.isoformat()},
        now=now,
    )
    return MockPaymentResponse(
        message="Payment successful", order_id=order_id, payment_id=payment_id
    )


def _wechat_reply(code: str, message: str, status_code: int = 200) -> Response:
    return Response(
        content=(
            f"<xml><return_code><![CDATA[{code}]]></return_code>"
            f"<return_msg><![CDATA[{message}]]></return_msg></xml>"
        ),
        status_code=status_code,
        media_type="application/xml",
    )


@router.post("/alipay/notify", response_class=PlainTextResponse)
@trace_span
async def alipay_notify(
    request: Request,
    verifier: NotifyVerifier = Depends(get_alipay_verifier),
    db_session: AsyncSession = Depends(get_db),
):
    """Alipay asynchronous notification. Alipay retries until it reads `success`."""
    form = await request.form()
    try:
        notification = verifier.verify(request.headers, b"", dict(form))
        outcome = await PaymentNotifyService(db_session).handle(notification)
    except AppException as e:
        logger.warning(
            "Alipay notification rejected",
            extra={"out_trade_no": form.get("out_trade_no"), "error": e.message},
        )
        return PlainTextResponse("fail", status_code=400)

    logger.info(
        "Alipay notification processed",
        extra={"out_trade_no": notification.order_no, "outcome": outcome.value},
    )
    return PlainTextResponse("success")


@router.post("/wechat/notify")
@trace_span
async def wechat_notify(
    request: Request,
    verifier: NotifyVerifier = Depends(get_wechat_verifier),
    db_session: AsyncSession = Depends(get_db),
):
    """WeChat Pay v3 notification."""
    body = await request.body()
    try:
        notification = verifier.verify(request.headers, body, {})
        outcome = await PaymentNotifyService(db_session).handle(notification)
    except AppException as e:
        logger.warning("WeChat notification rejected", extra={"error": e.message})
        return _wechat_reply("FAIL", e.message, status_code=400)

    logger.info(
        "WeChat notification processed",
        extra={"out_trade_no": notification.order_no, "outcome": outcome.value},
    )
    return _wechat_reply("SUCCESS", "OK")
