from __future__ import annotations

import os

from services.storefront.app.services.gateway_base import GatewayNotConfiguredError, PaymentGateway
from services.storefront.app.services.gateway_mock import MockGateway


def get_payment_gateway() -> PaymentGateway:
    """Select a gateway based on env vars.

    Defaults to the mock gateway so tests and local dev never hit Razorpay unless
    explicitly configured otherwise.
    """

    mode = os.getenv("LUMIDUMI_GATEWAY", "mock").strip().lower()

    if mode == "mock":
        key_id = os.getenv("RAZORPAY_KEY_ID", "").strip()
        return MockGateway(key_id=key_id) if key_id else MockGateway()

    if mode == "razorpay":
        from services.storefront.app.services.gateway_razorpay import RazorpayGateway

        return RazorpayGateway.from_env()

    raise ValueError(f"Unknown LUMIDUMI_GATEWAY={mode!r}. Expected mock or razorpay.")


def payment_signing_secret() -> str:
    """The server-held secret used to verify widget callbacks."""

    secret = "".join(os.getenv("RAZORPAY_KEY_SECRET", "").split())
    if not secret:
        raise GatewayNotConfiguredError("RAZORPAY_KEY_SECRET")
    return secret
