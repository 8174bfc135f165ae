from __future__ import annotations

from fastapi import APIRouter, Depends
from services.storefront.app.db.deps import get_current_profile, get_db
from services.storefront.app.db.models import Order, Profile
from services.storefront.app.errors import ApiError
from services.storefront.app.models.order import (
    OrderOut,
    TrackOrderRequest,
    TrackOrderResponse,
    order_to_out,
)
from services.storefront.app.services.order_service import load_order_items
from sqlalchemy import or_
from sqlalchemy.orm import Session

router = APIRouter()


@router.post("/api/orders/track", response_model=TrackOrderResponse)
def track_order(payload: TrackOrderRequest, db: Session = Depends(get_db)) -> TrackOrderResponse:
    email = (payload.email or "").strip().lower()
    order_id = (payload.order_id or "").strip()
    mobile = (payload.mobile or "").strip()

    if not (email or order_id or mobile):
        raise ApiError(400, "Please provide email, mobile number, or order ID to search")

    query = db.query(Order)
    if email:
        query = query.filter(Order.customer_email == email)
    if mobile:
        query = query.filter(Order.customer_phone == mobile)
    if order_id:
        query = query.filter(
            or_(
                Order.id == order_id,
                Order.razorpay_order_id == order_id,
                Order.razorpay_payment_id == order_id,
            )
        )

    orders = query.order_by(Order.created_at.desc()).all()
    if not orders:
        raise ApiError(404, "No orders found. Please check your details and try again.")

    latest = orders[0]
    return TrackOrderResponse(
        success=True,
        order=order_to_out(latest, load_order_items(db, latest.id)),
        total_found=len(orders),
    )


@router.get("/api/user/orders", response_model=list[OrderOut])
def list_my_orders(
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
) -> list[OrderOut]:
    orders = (
        db.query(Order)
        .filter(or_(Order.profile_id == profile.id, Order.customer_email == profile.email))
        .order_by(Order.created_at.desc())
        .all()
    )
    return [order_to_out(o, load_order_items(db, o.id)) for o in orders]
