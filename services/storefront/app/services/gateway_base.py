from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class GatewayError(Exception):
    """Base class for payment gateway errors.

    ``status_code`` is the HTTP status the gateway answered with (or the one we want the
    storefront to surface when the gateway never answered).
    """

    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message)
        self.status_code = status_code


class GatewayNotConfiguredError(GatewayError):
    def __init__(self, missing: str) -> None:
        super().__init__(f"Payment gateway not configured: {missing} is not set", status_code=503)
        self.missing = missing


class GatewayAuthError(GatewayError):
    def __init__(self) -> None:
        super().__init__(
            "Payment gateway authentication failed. "
            "The Razorpay account may need activation for live transactions.",
            status_code=401,
        )


class GatewayUnavailableError(GatewayError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Payment gateway unreachable: {reason}", status_code=502)


@dataclass(frozen=True, slots=True)
class GatewayOrder:
    id: str
    amount: int  # minor units (paise)
    currency: str
    receipt: str
    status: str


class PaymentGateway(Protocol):
    vendor: str
    key_id: str

    def create_order(self, *, amount: int, currency: str, receipt: str) -> GatewayOrder: ...
