from __future__ import annotations

from uuid import uuid4

from services.storefront.app.services.gateway_base import GatewayError, GatewayOrder


class MockGateway:
    """Deterministic in-process gateway for tests and local dev.

    It mints Razorpay-shaped order ids and never talks to the network. Signatures for the
    payments it "captures" are produced with ``signature.sign_payment`` and the configured
    secret, exactly as the hosted widget would.
    """

    vendor = "RAZORPAY_MOCK"

    def __init__(self, key_id: str = "rzp_test_mock") -> None:
        self.key_id = key_id

    def create_order(self, *, amount: int, currency: str, receipt: str) -> GatewayOrder:
        if amount < 100:
            raise GatewayError("Order amount less than minimum amount allowed", status_code=400)

        return GatewayOrder(
            id=f"order_{uuid4().hex[:14]}",
            amount=amount,
            currency=currency,
            receipt=receipt,
            status="created",
        )
