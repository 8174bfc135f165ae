from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from fastapi import APIRouter, Depends
from services.storefront.app.db.deps import get_db
from services.storefront.app.db.models import CustomOrder
from services.storefront.app.errors import ApiError
from services.storefront.app.models.admin import CustomOrderIn, CustomOrderOut
from sqlalchemy.orm import Session

router = APIRouter()


def custom_order_to_out(c: CustomOrder) -> CustomOrderOut:
    return CustomOrderOut(
        id=c.id,
        name=c.name,
        email=c.email,
        phone=c.phone,
        description=c.description,
        budget_range=c.budget_range,
        deadline=c.deadline,
        status=c.status,
        created_at=c.created_at.isoformat(),
    )


@router.post("/api/custom-orders", response_model=CustomOrderOut, status_code=201)
def create_custom_order(payload: CustomOrderIn, db: Session = Depends(get_db)) -> CustomOrderOut:
    if not (payload.name.strip() and payload.email.strip() and payload.description.strip()):
        raise ApiError(400, "Missing required fields: name, email, description")

    custom_order = CustomOrder(
        id=uuid4().hex,
        name=payload.name.strip(),
        email=payload.email.strip().lower(),
        phone=(payload.phone or "").strip() or None,
        description=payload.description.strip(),
        budget_range=payload.budget_range,
        deadline=payload.deadline,
        status="pending",
        created_at=datetime.utcnow(),
    )
    db.add(custom_order)
    db.commit()
    return custom_order_to_out(custom_order)
