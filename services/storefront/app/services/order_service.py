from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from packages.shared.schemas.checkout_v1 import OrderDetailsV1, PaymentProofV1
from services.storefront.app.db.models import Order, OrderItem, Profile
from services.storefront.app.services.order_status import OrderStatus, PaymentStatus
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecordedOrder:
    order: Order
    created: bool


def find_order_by_payment_id(db: Session, payment_id: str) -> Order | None:
    return db.query(Order).filter(Order.razorpay_payment_id == payment_id).first()


def _match_profile(db: Session, email: str, phone: str) -> Profile | None:
    return (
        db.query(Profile)
        .filter(or_(Profile.email == email, Profile.phone == phone))
        .order_by(Profile.is_guest.asc())
        .first()
    )


def _shipping_address(details: OrderDetailsV1) -> dict:
    info = details.customer_info
    return {
        "name": f"{info.first_name} {info.last_name}".strip(),
        "email": info.email.strip().lower(),
        "phone": info.phone.strip(),
        "address_line_1": info.address.strip(),
        "city": info.city.strip(),
        "state": info.state.strip(),
        "postal_code": info.pincode.strip(),
        "country": "India",
    }


def record_verified_order(
    db: Session,
    *,
    proof: PaymentProofV1,
    details: OrderDetailsV1,
) -> RecordedOrder:
    """Persist the order for a payment whose signature has already been verified.

    Keyed on the gateway payment id: a repeated call for the same payment returns the
    order created by the first one instead of inserting a duplicate.
    """

    existing = find_order_by_payment_id(db, proof.razorpay_payment_id)
    if existing is not None:
        logger.info(
            "Payment already recorded",
            extra={"payment_id": proof.razorpay_payment_id, "order_id": existing.id},
        )
        return RecordedOrder(order=existing, created=False)

    info = details.customer_info
    email = info.email.strip().lower()
    phone = info.phone.strip()
    profile = _match_profile(db, email, phone)

    now = datetime.utcnow()
    order = Order(
        id=uuid4().hex,
        profile_id=profile.id if profile is not None else None,
        customer_email=email,
        customer_phone=phone,
        customer_name=f"{info.first_name} {info.last_name}".strip(),
        is_guest=details.is_guest_order,
        total_amount=details.total,
        delivery_fee=details.delivery_fee,
        currency="INR",
        status=OrderStatus.CONFIRMED.value,
        payment_status=PaymentStatus.PAID.value,
        shipping_address=_shipping_address(details),
        notes=None,
        razorpay_order_id=proof.razorpay_order_id,
        razorpay_payment_id=proof.razorpay_payment_id,
        created_at=now,
        updated_at=now,
    )
    db.add(order)

    for line in details.items:
        db.add(
            OrderItem(
                id=uuid4().hex,
                order_id=order.id,
                product_id=line.product_id,
                product_name=line.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_price=round(line.unit_price * line.quantity, 2),
                selected_color=line.selected_color,
                product_image_url=line.image_url,
            )
        )

    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent verification of the same payment.
        db.rollback()
        winner = find_order_by_payment_id(db, proof.razorpay_payment_id)
        if winner is None:
            raise
        return RecordedOrder(order=winner, created=False)

    logger.info(
        "Order recorded",
        extra={
            "order_id": order.id,
            "payment_id": proof.razorpay_payment_id,
            "guest": details.is_guest_order,
        },
    )
    return RecordedOrder(order=order, created=True)


def load_order_items(db: Session, order_id: str) -> list[OrderItem]:
    return db.query(OrderItem).filter(OrderItem.order_id == order_id).all()
