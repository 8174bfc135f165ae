from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from packages.shared.schemas.checkout_v1 import GuestAccountRequestV1, GuestAccountResponseV1
from services.storefront.app.db.deps import bearer_token, get_db
from services.storefront.app.db.models import AuthSession
from services.storefront.app.errors import ApiError
from services.storefront.app.services.admin_cache import admin_cache
from services.storefront.app.services.guest_accounts import ensure_guest_profile
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/auth/create-guest", response_model=GuestAccountResponseV1)
def create_guest(
    payload: GuestAccountRequestV1,
    db: Session = Depends(get_db),
) -> GuestAccountResponseV1:
    if not (payload.phone.strip() and payload.email.strip() and payload.first_name.strip()):
        raise ApiError(400, "Phone, email, and first name are required")

    result = ensure_guest_profile(
        db,
        phone=payload.phone,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )

    if not result.created:
        return GuestAccountResponseV1(
            success=True,
            message="User already exists",
            user_id=result.profile.id,
            is_guest=result.profile.is_guest,
        )

    return GuestAccountResponseV1(
        success=True,
        message="Guest account created successfully",
        user_id=result.profile.id,
        is_guest=True,
    )


@router.post("/api/auth/sign-out")
def sign_out(token: str = Depends(bearer_token), db: Session = Depends(get_db)) -> dict:
    session = db.get(AuthSession, token)
    if session is None:
        return {"success": True}

    profile_id = session.profile_id
    db.delete(session)
    db.commit()

    admin_cache.invalidate(profile_id)
    logger.info("Signed out", extra={"profile_id": profile_id})
    return {"success": True}
