from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends
from packages.shared.schemas.checkout_v1 import (
    CreateGatewayOrderRequestV1,
    GatewayOrderV1,
    PaymentProofV1,
    PaymentVerificationRequestV1,
    PaymentVerificationResponseV1,
)
from services.storefront.app.db.deps import get_db
from services.storefront.app.errors import VERIFY_PAYMENT_PATH, ApiError
from services.storefront.app.services.gateway_base import GatewayError, GatewayNotConfiguredError
from services.storefront.app.services.gateway_factory import (
    get_payment_gateway,
    payment_signing_secret,
)
from services.storefront.app.services.order_service import record_verified_order
from services.storefront.app.services.signature import verify_payment_signature
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter()


def _raise_gateway_http_error(e: Exception) -> None:
    if isinstance(e, GatewayNotConfiguredError):
        raise ApiError(503, "Payment gateway not configured") from e

    if isinstance(e, GatewayError):
        raise ApiError(e.status_code, str(e)) from e

    raise ApiError(500, "Internal Server Error") from e


def _to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


@router.post("/api/razorpay/create-order", response_model=GatewayOrderV1)
def create_gateway_order(payload: CreateGatewayOrderRequestV1) -> GatewayOrderV1:
    if payload.amount is None or payload.amount < 1:
        raise ApiError(400, "Invalid amount")

    try:
        gateway = get_payment_gateway()
    except ValueError as e:
        raise ApiError(500, str(e)) from e
    except GatewayError as e:
        _raise_gateway_http_error(e)

    receipt = (payload.receipt or "").strip() or f"receipt_{int(time.time() * 1000)}"
    try:
        order = gateway.create_order(
            amount=_to_minor_units(payload.amount),
            currency=payload.currency,
            receipt=receipt,
        )
    except Exception as e:
        logger.warning("Gateway order creation failed", extra={"receipt": receipt, "error": str(e)})
        _raise_gateway_http_error(e)

    logger.info("Gateway order created", extra={"gateway_order_id": order.id, "receipt": receipt})
    return GatewayOrderV1(
        id=order.id,
        amount=order.amount,
        currency=order.currency,
        receipt=order.receipt,
        status=order.status,
    )


@router.post(VERIFY_PAYMENT_PATH, response_model=PaymentVerificationResponseV1)
def verify_payment(
    payload: PaymentVerificationRequestV1,
    db: Session = Depends(get_db),
) -> PaymentVerificationResponseV1:
    if not (payload.razorpay_order_id and payload.razorpay_payment_id and payload.razorpay_signature):
        raise ApiError(400, "Missing required payment details", verified=False)

    if payload.order_details is None:
        raise ApiError(400, "Missing order details", verified=False)

    try:
        secret = payment_signing_secret()
    except GatewayError as e:
        _raise_gateway_http_error(e)

    if not verify_payment_signature(
        order_id=payload.razorpay_order_id,
        payment_id=payload.razorpay_payment_id,
        signature=payload.razorpay_signature,
        secret=secret,
    ):
        logger.warning(
            "Payment signature mismatch",
            extra={
                "gateway_order_id": payload.razorpay_order_id,
                "payment_id": payload.razorpay_payment_id,
            },
        )
        raise ApiError(400, "Payment verification failed", verified=False)

    proof = PaymentProofV1(
        razorpay_order_id=payload.razorpay_order_id,
        razorpay_payment_id=payload.razorpay_payment_id,
        razorpay_signature=payload.razorpay_signature,
    )
    recorded = record_verified_order(db, proof=proof, details=payload.order_details)

    return PaymentVerificationResponseV1(
        verified=True,
        order_id=recorded.order.id,
        payment_id=proof.razorpay_payment_id,
    )
