from __future__ import annotations

from fastapi import APIRouter, Depends
from services.storefront.app.db.deps import get_db
from services.storefront.app.db.models import Product
from services.storefront.app.errors import ApiError
from services.storefront.app.models.product import (
    ProductDetail,
    ProductOut,
    color_to_out,
    image_to_out,
    product_to_out,
)
from services.storefront.app.services.catalog import list_colors, list_images
from sqlalchemy.orm import Session

router = APIRouter()


@router.get("/api/products", response_model=list[ProductOut])
def list_products(featured: bool = False, db: Session = Depends(get_db)) -> list[ProductOut]:
    query = db.query(Product).filter(Product.is_active.is_(True))
    if featured:
        query = query.filter(Product.featured.is_(True))

    return [product_to_out(p) for p in query.order_by(Product.created_at.desc()).all()]


@router.get("/api/products/{slug}", response_model=ProductDetail)
def get_product(slug: str, db: Session = Depends(get_db)) -> ProductDetail:
    product = (
        db.query(Product).filter(Product.slug == slug, Product.is_active.is_(True)).first()
    )
    if product is None:
        raise ApiError(404, "Product not found")

    return ProductDetail(
        **product_to_out(product).model_dump(),
        colors=[color_to_out(c) for c in list_colors(db, product.id)],
        images=[image_to_out(i) for i in list_images(db, product.id)],
    )
