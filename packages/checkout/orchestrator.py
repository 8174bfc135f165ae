"""Browser-side checkout flow.

Drives a single checkout attempt: form validation, gateway order creation, the hosted
payment widget, and reconciliation with the storefront. Only the storefront's
verification answer decides whether an order exists; the widget's success callback is
never treated as proof of payment on its own.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from packages.checkout.api import CheckoutApiError, StorefrontApi
from packages.checkout.cart import Cart
from packages.checkout.form import CheckoutForm, validate_form
from packages.checkout.redirect import (
    CART_PATH,
    is_mobile_user_agent,
    should_redirect_to_cart,
    success_url,
)
from packages.shared.delivery import delivery_fee
from packages.shared.schemas.checkout_v1 import GatewayOrderV1, OrderDetailsV1, PaymentProofV1

logger = logging.getLogger(__name__)

BUSINESS_NAME = "Lumidumi"
MOBILE_REDIRECT_DELAY_SECONDS = 0.5


class CheckoutState(str, Enum):
    FORM_ENTRY = "FORM_ENTRY"
    VALIDATING = "VALIDATING"
    CREATING_GATEWAY_ORDER = "CREATING_GATEWAY_ORDER"
    AWAITING_WIDGET = "AWAITING_WIDGET"
    RECONCILING = "RECONCILING"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class WidgetOptions:
    key: str
    amount: int
    currency: str
    name: str
    description: str
    order_id: str
    prefill: dict[str, str] = field(default_factory=dict)


class PaymentWidget(Protocol):
    """The gateway's hosted checkout. Exactly one callback fires per ``open``."""

    def open(
        self,
        options: WidgetOptions,
        *,
        on_success: Callable[[PaymentProofV1], None],
        on_failure: Callable[[str], None],
        on_dismiss: Callable[[], None],
    ) -> None: ...


class Navigator(Protocol):
    def push(self, url: str) -> None: ...


class CheckoutOrchestrator:
    def __init__(
        self,
        *,
        cart: Cart,
        api: StorefrontApi,
        widget: PaymentWidget,
        navigator: Navigator,
        gateway_key: str,
        user_email: str | None = None,
        user_agent: str = "",
        sleep: Callable[[float], Any] = time.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cart = cart
        self._api = api
        self._widget = widget
        self._navigator = navigator
        self._gateway_key = gateway_key
        self._user_email = user_email
        self._user_agent = user_agent
        self._sleep = sleep
        self._clock = clock

        self.form = CheckoutForm(email=user_email or "")
        self.errors: dict[str, str] = {}
        self.alerts: list[str] = []
        self.state = CheckoutState.FORM_ENTRY
        self.payment_in_flight = False
        self.gateway_order: GatewayOrderV1 | None = None

    @property
    def is_authenticated(self) -> bool:
        return self._user_email is not None

    @property
    def subtotal(self) -> float:
        return self.cart.total_price

    @property
    def delivery_fee(self) -> int:
        return delivery_fee(self.form.state, self.form.city)

    @property
    def total(self) -> float:
        return self.subtotal + self.delivery_fee

    def set_field(self, name: str, value: str | bool) -> None:
        if name not in CheckoutForm.field_names():
            raise KeyError(name)
        setattr(self.form, name, value)
        self.errors.pop(name, None)

    def validate(self) -> bool:
        self.state = CheckoutState.VALIDATING
        self.errors = validate_form(self.form)
        if self.errors:
            self.state = CheckoutState.FORM_ENTRY
            return False
        return True

    def check_empty_cart(self, path: str, query: Mapping[str, str] | None = None) -> bool:
        """Run the cart-empty redirect effect; returns True when it navigated."""

        if should_redirect_to_cart(
            cart_is_empty=self.cart.is_empty,
            payment_in_flight=self.payment_in_flight,
            path=path,
            query=query,
        ):
            self._navigator.push(CART_PATH)
            return True
        return False

    def submit(self) -> bool:
        """Validate, create a gateway order and open the payment widget.

        Returns False when the attempt stopped before the widget opened.
        """

        if self.state not in (CheckoutState.FORM_ENTRY, CheckoutState.VALIDATING):
            logger.warning("Checkout already in progress", extra={"state": self.state.value})
            return False

        if not self.validate():
            return False

        if self.cart.is_empty:
            self._alert("Your cart is empty.")
            self._back_to_form()
            return False

        self.state = CheckoutState.CREATING_GATEWAY_ORDER
        self.payment_in_flight = True

        # Each attempt mints a fresh receipt and gateway order.
        receipt = f"order_{int(self._clock() * 1000)}"
        try:
            self.gateway_order = self._api.create_gateway_order(amount=self.total, receipt=receipt)
        except CheckoutApiError as e:
            logger.error("Gateway order creation failed", extra={"receipt": receipt, "error": str(e)})
            self._alert(f"Failed to initiate payment. Please try again. ({e})")
            self._back_to_form()
            return False

        self.state = CheckoutState.AWAITING_WIDGET
        self._widget.open(
            self._widget_options(self.gateway_order),
            on_success=self.handle_payment_success,
            on_failure=self.handle_payment_failure,
            on_dismiss=self.handle_dismiss,
        )
        return True

    def _widget_options(self, order: GatewayOrderV1) -> WidgetOptions:
        return WidgetOptions(
            key=self._gateway_key,
            amount=order.amount,
            currency=order.currency,
            name=BUSINESS_NAME,
            description=f"Order for {self.cart.total_items} items",
            order_id=order.id,
            prefill={
                "name": f"{self.form.first_name} {self.form.last_name}".strip(),
                "email": self.form.email.strip(),
                "contact": self.form.phone.strip(),
            },
        )

    def handle_dismiss(self) -> None:
        logger.info("Payment widget dismissed")
        self._back_to_form()

    def handle_payment_failure(self, description: str) -> None:
        logger.warning("Payment failed in widget", extra={"description": description})
        self._alert(f"Payment failed: {description}")
        self._back_to_form()

    def handle_payment_success(self, proof: PaymentProofV1) -> None:
        self.state = CheckoutState.RECONCILING

        guest_account_created = False
        if not self.is_authenticated:
            guest_account_created = self._create_guest_account()

        details = OrderDetailsV1(
            items=self.cart.snapshot(),
            customer_info=self.form.customer_info(),
            total=self.total,
            delivery_fee=self.delivery_fee,
            is_guest_order=not self.is_authenticated,
            guest_account_created=guest_account_created,
        )

        try:
            result = self._api.verify_payment(proof, details)
        except CheckoutApiError as e:
            self._verification_failed(str(e))
            return

        if not result.verified or not result.order_id:
            self._verification_failed(result.error or "Payment verification failed")
            return

        amount = self.gateway_order.amount if self.gateway_order else int(round(self.total * 100))
        url = success_url(
            payment_id=proof.razorpay_payment_id,
            order_id=result.order_id,
            amount=amount,
            guest=not self.is_authenticated,
        )

        self.cart.clear()
        self.state = CheckoutState.COMPLETED
        if is_mobile_user_agent(self._user_agent):
            # Let cart-clearing settle before navigating on mobile browsers.
            self._sleep(MOBILE_REDIRECT_DELAY_SECONDS)
        self._navigator.push(url)

    def _create_guest_account(self) -> bool:
        try:
            response = self._api.create_guest_account(
                phone=self.form.phone.strip(),
                email=self.form.email.strip(),
                first_name=self.form.first_name.strip(),
                last_name=self.form.last_name.strip(),
            )
        except CheckoutApiError as e:
            logger.warning("Guest account creation failed; continuing", extra={"error": str(e)})
            return False
        return response.success

    def _verification_failed(self, message: str) -> None:
        logger.error("Payment verification failed", extra={"error": message})
        self._alert(f"Payment verification failed. Please contact support. ({message})")
        self._back_to_form()

    def _back_to_form(self) -> None:
        self.state = CheckoutState.FORM_ENTRY
        self.payment_in_flight = False

    def _alert(self, message: str) -> None:
        self.alerts.append(message)
