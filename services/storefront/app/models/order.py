from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from services.storefront.app.db.models import Order, OrderItem


class OrderItemOut(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float
    selected_color: str | None = None
    product_image_url: str | None = None


class OrderOut(BaseModel):
    id: str
    status: str
    payment_status: str
    total_amount: float
    delivery_fee: float
    currency: str
    customer_email: str
    customer_phone: str
    customer_name: str
    is_guest: bool
    shipping_address: dict[str, Any]
    notes: str | None = None
    razorpay_order_id: str
    razorpay_payment_id: str
    created_at: str
    updated_at: str
    order_items: list[OrderItemOut] = Field(default_factory=list)


class TrackOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    order_id: str | None = Field(default=None, alias="orderId")
    mobile: str | None = None


class TrackOrderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    order: OrderOut
    total_found: int = Field(..., alias="totalFound")


class OrderStatusUpdate(BaseModel):
    status: str
    notes: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., alias="orderId")
    update_data: OrderStatusUpdate = Field(..., alias="updateData")


class UpdateOrderStatusResponse(BaseModel):
    success: bool
    message: str
    order: OrderOut


def order_to_out(order: Order, items: list[OrderItem]) -> OrderOut:
    return OrderOut(
        id=order.id,
        status=order.status,
        payment_status=order.payment_status,
        total_amount=order.total_amount,
        delivery_fee=order.delivery_fee,
        currency=order.currency,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        customer_name=order.customer_name,
        is_guest=order.is_guest,
        shipping_address=order.shipping_address or {},
        notes=order.notes,
        razorpay_order_id=order.razorpay_order_id,
        razorpay_payment_id=order.razorpay_payment_id,
        created_at=order.created_at.isoformat(),
        updated_at=order.updated_at.isoformat(),
        order_items=[
            OrderItemOut(
                product_id=i.product_id,
                product_name=i.product_name,
                quantity=i.quantity,
                unit_price=i.unit_price,
                total_price=i.total_price,
                selected_color=i.selected_color,
                product_image_url=i.product_image_url,
            )
            for i in items
        ],
    )
