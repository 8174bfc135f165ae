"""Checkout wire schema (v1).

Shared by the storefront API and the browser-side checkout client. Field names on the
wire follow the storefront's JSON conventions: camelCase for the order snapshot and
guest account payloads, Razorpay's own snake_case for the payment proof.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateGatewayOrderRequestV1(BaseModel):
    # Major currency units (rupees). Validated by the endpoint so bad input is a 400.
    amount: float | None = None
    currency: str = "INR"
    receipt: str | None = None


class GatewayOrderV1(BaseModel):
    id: str
    amount: int  # minor units (paise)
    currency: str
    receipt: str
    status: str


class PaymentProofV1(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


class OrderLineV1(_CamelModel):
    product_id: str
    name: str
    unit_price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    selected_color: str | None = None
    image_url: str | None = None


class CustomerInfoV1(_CamelModel):
    email: str
    first_name: str
    last_name: str = ""
    phone: str
    address: str
    city: str
    state: str
    pincode: str


class OrderDetailsV1(_CamelModel):
    items: list[OrderLineV1] = Field(..., min_length=1)
    customer_info: CustomerInfoV1
    total: float = Field(..., gt=0)
    delivery_fee: float = 0
    is_guest_order: bool = False
    guest_account_created: bool = False


class PaymentVerificationRequestV1(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    razorpay_order_id: str = ""
    razorpay_payment_id: str = ""
    razorpay_signature: str = ""
    order_details: OrderDetailsV1 | None = Field(default=None, alias="orderDetails")


class PaymentVerificationResponseV1(BaseModel):
    verified: bool
    order_id: str | None = None
    payment_id: str | None = None
    error: str | None = None


class GuestAccountRequestV1(_CamelModel):
    phone: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""


class GuestAccountResponseV1(_CamelModel):
    success: bool
    message: str
    user_id: str | None = None
    is_guest: bool = False
