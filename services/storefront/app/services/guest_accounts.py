from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from services.storefront.app.db.models import Profile
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GuestAccountResult:
    profile: Profile
    created: bool


def find_profile(db: Session, *, phone: str, email: str) -> Profile | None:
    return db.query(Profile).filter(or_(Profile.phone == phone, Profile.email == email)).first()


def ensure_guest_profile(
    db: Session,
    *,
    phone: str,
    email: str,
    first_name: str,
    last_name: str,
) -> GuestAccountResult:
    """Find the profile for this phone/email, creating a guest profile when none exists."""

    phone = phone.strip()
    email = email.strip().lower()

    existing = find_profile(db, phone=phone, email=email)
    if existing is not None:
        logger.info("Guest profile already exists", extra={"profile_id": existing.id})
        return GuestAccountResult(profile=existing, created=False)

    now = datetime.utcnow()
    profile = Profile(
        id=uuid4().hex,
        email=email,
        phone=phone,
        first_name=first_name.strip(),
        last_name=last_name.strip() or None,
        role="customer",
        is_guest=True,
        created_at=now,
        updated_at=now,
    )
    db.add(profile)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        winner = find_profile(db, phone=phone, email=email)
        if winner is None:
            raise
        return GuestAccountResult(profile=winner, created=False)

    logger.info("Guest profile created", extra={"profile_id": profile.id})
    return GuestAccountResult(profile=profile, created=True)
