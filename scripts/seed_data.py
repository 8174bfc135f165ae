from __future__ import annotations

import argparse
import secrets
from datetime import datetime
from uuid import uuid4

from services.storefront.app.db.database import db_session
from services.storefront.app.db.init_db import init_db
from services.storefront.app.db.models import AuthSession, Product, Profile
from services.storefront.app.services.catalog import slugify

_CATALOG = (
    ("Vanilla Dreams", "Warm vanilla with hints of caramel", 899, 12, True),
    ("Lavender Fields", "Calming lavender and chamomile", 999, 8, True),
    ("Sandalwood Ember", "Smoky sandalwood and amber", 1199, 5, False),
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed catalog and an admin account")
    parser.add_argument("--admin-email", default="admin@lumidumi.local")
    parser.add_argument("--admin-phone", default="9999999999")
    args = parser.parse_args()

    init_db()

    db = db_session()
    try:
        now = datetime.utcnow()
        for name, scent, price, stock, featured in _CATALOG:
            slug = slugify(name)
            if db.query(Product).filter(Product.slug == slug).first() is not None:
                continue
            db.add(
                Product(
                    id=uuid4().hex,
                    slug=slug,
                    name=name,
                    description=f"Hand-poured soy candle. {scent}.",
                    price=price,
                    stock_quantity=stock,
                    category="Scented",
                    scent_description=scent,
                    burn_time="40 hours",
                    is_active=True,
                    featured=featured,
                    created_at=now,
                    updated_at=now,
                )
            )

        admin = db.query(Profile).filter(Profile.email == args.admin_email).first()
        if admin is None:
            admin = Profile(
                id=uuid4().hex,
                email=args.admin_email,
                phone=args.admin_phone,
                first_name="Admin",
                role="admin",
                is_guest=False,
                created_at=now,
                updated_at=now,
            )
            db.add(admin)

        token = secrets.token_urlsafe(32)
        db.add(AuthSession(token=token, profile_id=admin.id, created_at=now))
        db.commit()
    finally:
        db.close()

    print(f"Admin session token: {token}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
