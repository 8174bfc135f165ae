from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from services.storefront.app.db.deps import get_db, require_admin
from services.storefront.app.db.models import CustomOrder, Order, Profile, SiteContent
from services.storefront.app.errors import ApiError
from services.storefront.app.models.admin import (
    CustomerOut,
    CustomOrderOut,
    SiteContentIn,
    SiteContentOut,
)
from services.storefront.app.models.order import (
    OrderOut,
    UpdateOrderStatusRequest,
    UpdateOrderStatusResponse,
    order_to_out,
)
from services.storefront.app.routers.custom_orders import custom_order_to_out
from services.storefront.app.services import site_content
from services.storefront.app.services.order_service import load_order_items
from services.storefront.app.services.order_status import (
    InvalidStatusTransitionError,
    OrderStatus,
    check_transition,
    parse_status,
)
from sqlalchemy import func
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])


@router.get("/orders", response_model=list[OrderOut])
def admin_list_orders(status: str | None = None, db: Session = Depends(get_db)) -> list[OrderOut]:
    query = db.query(Order)
    if status:
        try:
            query = query.filter(Order.status == parse_status(status).value)
        except ValueError as e:
            raise ApiError(400, str(e)) from e

    orders = query.order_by(Order.created_at.desc()).limit(500).all()
    return [order_to_out(o, load_order_items(db, o.id)) for o in orders]


@router.post("/update-order-status", response_model=UpdateOrderStatusResponse)
def update_order_status(
    payload: UpdateOrderStatusRequest,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UpdateOrderStatusResponse:
    order = db.get(Order, payload.order_id)
    if order is None:
        raise ApiError(404, "Order not found")

    try:
        requested = parse_status(payload.update_data.status)
        check_transition(OrderStatus(order.status), requested)
    except InvalidStatusTransitionError as e:
        raise ApiError(409, str(e)) from e
    except ValueError as e:
        raise ApiError(400, str(e)) from e

    previous = order.status
    order.status = requested.value
    if payload.update_data.notes is not None:
        order.notes = payload.update_data.notes
    order.updated_at = datetime.utcnow()
    db.commit()

    logger.info(
        "Order status updated",
        extra={
            "order_id": order.id,
            "from_status": previous,
            "to_status": order.status,
            "admin_id": admin.id,
        },
    )
    return UpdateOrderStatusResponse(
        success=True,
        message="Order status updated successfully",
        order=order_to_out(order, load_order_items(db, order.id)),
    )


@router.get("/customers", response_model=list[CustomerOut])
def admin_list_customers(db: Session = Depends(get_db)) -> list[CustomerOut]:
    order_counts = dict(
        db.query(Order.customer_email, func.count(Order.id)).group_by(Order.customer_email).all()
    )

    profiles = db.query(Profile).order_by(Profile.created_at.desc()).all()
    return [
        CustomerOut(
            id=p.id,
            email=p.email,
            phone=p.phone,
            first_name=p.first_name,
            last_name=p.last_name,
            role=p.role,
            is_guest=p.is_guest,
            order_count=int(order_counts.get(p.email, 0)),
            created_at=p.created_at.isoformat(),
        )
        for p in profiles
    ]


@router.get("/custom-orders", response_model=list[CustomOrderOut])
def admin_list_custom_orders(db: Session = Depends(get_db)) -> list[CustomOrderOut]:
    rows = db.query(CustomOrder).order_by(CustomOrder.created_at.desc()).all()
    return [custom_order_to_out(c) for c in rows]


def _content_to_out(row: SiteContent) -> SiteContentOut:
    return SiteContentOut(
        id=row.id,
        section=row.section,
        title=row.title,
        subtitle=row.subtitle,
        description=row.description,
        image_url=row.image_url,
        additional_data=row.additional_data or {},
        updated_at=row.updated_at.isoformat(),
    )


@router.get("/content")
def admin_get_content(section: str | None = None, db: Session = Depends(get_db)) -> dict:
    if section:
        row = site_content.get_section(db, section)
        return {"data": _content_to_out(row).model_dump() if row is not None else None}

    return {"data": [_content_to_out(r).model_dump() for r in site_content.list_sections(db)]}


@router.post("/content")
def admin_save_content(payload: SiteContentIn, db: Session = Depends(get_db)) -> JSONResponse:
    section = payload.section.strip()
    if not section or not payload.data:
        raise ApiError(400, "Section and data are required")

    row = site_content.upsert_section(db, section, payload.data)
    return JSONResponse(
        content={"data": _content_to_out(row).model_dump()},
        headers={"Cache-Control": "no-store, max-age=0"},
    )
