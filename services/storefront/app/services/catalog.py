from __future__ import annotations

import re
from datetime import datetime
from uuid import uuid4

from services.storefront.app.db.models import Product, ProductColor, ProductImage
from services.storefront.app.models.product import ProductIn
from sqlalchemy import func
from sqlalchemy.orm import Session


class ProductValidationError(ValueError):
    pass


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return slug or "product"


def _unique_slug(db: Session, base: str, product_id: str | None = None) -> str:
    slug = base
    while True:
        clash = db.query(Product).filter(Product.slug == slug).first()
        if clash is None or clash.id == product_id:
            return slug
        slug = f"{base}-{uuid4().hex[:6]}"


def validate_product_input(payload: ProductIn) -> None:
    missing = [
        name
        for name, present in (
            ("name", bool(payload.name.strip())),
            ("description", bool(payload.description.strip())),
            ("price", payload.price is not None),
            ("stock_quantity", payload.stock_quantity is not None),
        )
        if not present
    ]
    if missing:
        raise ProductValidationError(f"Missing required fields: {', '.join(missing)}")

    if payload.price is not None and payload.price <= 0:
        raise ProductValidationError("price must be greater than 0")
    if payload.stock_quantity is not None and payload.stock_quantity < 0:
        raise ProductValidationError("stock_quantity must be >= 0")


def create_product(db: Session, payload: ProductIn) -> Product:
    validate_product_input(payload)

    now = datetime.utcnow()
    product = Product(
        id=uuid4().hex,
        slug=_unique_slug(db, slugify(payload.slug or payload.name)),
        name=payload.name.strip(),
        description=payload.description.strip(),
        price=payload.price,
        stock_quantity=payload.stock_quantity,
        category=payload.category,
        image_url=payload.image_url,
        scent_description=payload.scent_description,
        burn_time=payload.burn_time,
        is_active=payload.is_active,
        featured=payload.featured,
        created_at=now,
        updated_at=now,
    )
    db.add(product)
    db.commit()
    return product


def update_product(db: Session, product: Product, payload: ProductIn) -> Product:
    validate_product_input(payload)

    product.name = payload.name.strip()
    product.description = payload.description.strip()
    product.price = payload.price
    product.stock_quantity = payload.stock_quantity
    if payload.slug:
        product.slug = _unique_slug(db, slugify(payload.slug), product_id=product.id)
    product.category = payload.category
    product.image_url = payload.image_url
    product.scent_description = payload.scent_description
    product.burn_time = payload.burn_time
    product.is_active = payload.is_active
    product.featured = payload.featured
    product.updated_at = datetime.utcnow()

    db.commit()
    return product


def delete_product(db: Session, product: Product) -> None:
    db.query(ProductColor).filter(ProductColor.product_id == product.id).delete()
    db.query(ProductImage).filter(ProductImage.product_id == product.id).delete()
    db.delete(product)
    db.commit()


def list_colors(db: Session, product_id: str) -> list[ProductColor]:
    return (
        db.query(ProductColor)
        .filter(ProductColor.product_id == product_id)
        .order_by(ProductColor.created_at.asc())
        .all()
    )


def list_images(db: Session, product_id: str) -> list[ProductImage]:
    return (
        db.query(ProductImage)
        .filter(ProductImage.product_id == product_id)
        .order_by(ProductImage.position.asc(), ProductImage.created_at.asc())
        .all()
    )


def next_image_position(db: Session, product_id: str) -> int:
    current = (
        db.query(func.max(ProductImage.position))
        .filter(ProductImage.product_id == product_id)
        .scalar()
    )
    return 0 if current is None else int(current) + 1
