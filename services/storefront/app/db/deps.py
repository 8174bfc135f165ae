from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Header
from services.storefront.app.db.database import db_session
from services.storefront.app.db.models import AuthSession, Profile
from services.storefront.app.errors import ApiError
from services.storefront.app.services.admin_cache import admin_cache
from sqlalchemy.orm import Session


def get_db() -> Generator[Session, None, None]:
    db = db_session()
    try:
        yield db
    finally:
        db.close()


def bearer_token(authorization: str | None = Header(default=None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise ApiError(401, "Authorization required")
    token = authorization[len("Bearer ") :].strip()
    if not token:
        raise ApiError(401, "Authorization required")
    return token


def get_current_profile(
    token: str = Depends(bearer_token),
    db: Session = Depends(get_db),
) -> Profile:
    session = db.get(AuthSession, token)
    if session is None:
        raise ApiError(401, "Invalid or expired token")

    profile = db.get(Profile, session.profile_id)
    if profile is None:
        raise ApiError(401, "Invalid or expired token")
    return profile


def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    is_admin = admin_cache.get(profile.id)
    if is_admin is None:
        is_admin = profile.role == "admin"
        admin_cache.set(profile.id, is_admin)

    if not is_admin:
        raise ApiError(403, "Insufficient permissions - admin access required")
    return profile
