from __future__ import annotations

import logging

import httpx
from packages.shared.schemas.checkout_v1 import (
    CreateGatewayOrderRequestV1,
    GatewayOrderV1,
    GuestAccountRequestV1,
    GuestAccountResponseV1,
    OrderDetailsV1,
    PaymentProofV1,
    PaymentVerificationRequestV1,
    PaymentVerificationResponseV1,
)

logger = logging.getLogger(__name__)


class CheckoutApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or f"HTTP {response.status_code}"

    if isinstance(body, dict):
        message = body.get("error") or body.get("message") or body.get("detail")
        if message:
            return str(message)
    return f"HTTP {response.status_code}"


class StorefrontApi:
    """Thin client for the storefront checkout endpoints.

    Accepts any ``httpx.Client`` (including FastAPI's ``TestClient``) pointed at the
    storefront.
    """

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    @classmethod
    def connect(cls, base_url: str, timeout: float = 15.0) -> StorefrontApi:
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def _post(self, path: str, body: dict) -> dict:
        try:
            response = self._http.post(path, json=body)
        except httpx.HTTPError as e:
            logger.error("Storefront request failed", extra={"path": path, "error": str(e)})
            raise CheckoutApiError(f"Network error calling {path}: {e}") from e

        if not response.is_success:
            raise CheckoutApiError(_error_message(response), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise CheckoutApiError(f"Invalid JSON from {path}", response.status_code) from e

    def create_gateway_order(self, *, amount: float, receipt: str, currency: str = "INR") -> GatewayOrderV1:
        request = CreateGatewayOrderRequestV1(amount=amount, currency=currency, receipt=receipt)
        data = self._post("/api/razorpay/create-order", request.model_dump(mode="json"))
        return GatewayOrderV1.model_validate(data)

    def create_guest_account(
        self,
        *,
        phone: str,
        email: str,
        first_name: str,
        last_name: str,
    ) -> GuestAccountResponseV1:
        request = GuestAccountRequestV1(
            phone=phone, email=email, first_name=first_name, last_name=last_name
        )
        data = self._post("/api/auth/create-guest", request.model_dump(mode="json", by_alias=True))
        return GuestAccountResponseV1.model_validate(data)

    def verify_payment(
        self,
        proof: PaymentProofV1,
        details: OrderDetailsV1,
    ) -> PaymentVerificationResponseV1:
        request = PaymentVerificationRequestV1(
            razorpay_order_id=proof.razorpay_order_id,
            razorpay_payment_id=proof.razorpay_payment_id,
            razorpay_signature=proof.razorpay_signature,
            order_details=details,
        )
        data = self._post(
            "/api/razorpay/verify-payment", request.model_dump(mode="json", by_alias=True)
        )
        return PaymentVerificationResponseV1.model_validate(data)
