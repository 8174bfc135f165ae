from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from fastapi import APIRouter, Depends
from services.storefront.app.db.deps import get_db, require_admin
from services.storefront.app.db.models import Product, ProductColor, ProductImage
from services.storefront.app.errors import ApiError
from services.storefront.app.models.product import (
    ProductColorIn,
    ProductColorOut,
    ProductImageIn,
    ProductImageOut,
    ProductIn,
    ProductOut,
    color_to_out,
    image_to_out,
    product_to_out,
)
from services.storefront.app.services.catalog import (
    ProductValidationError,
    create_product,
    delete_product,
    list_colors,
    list_images,
    next_image_position,
    update_product,
)
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api/admin/products", dependencies=[Depends(require_admin)])


def _get_product_or_404(db: Session, product_id: str) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise ApiError(404, "Product not found")
    return product


@router.get("", response_model=list[ProductOut])
def admin_list_products(db: Session = Depends(get_db)) -> list[ProductOut]:
    products = db.query(Product).order_by(Product.created_at.desc()).all()
    return [product_to_out(p) for p in products]


@router.post("", response_model=ProductOut, status_code=201)
def admin_create_product(payload: ProductIn, db: Session = Depends(get_db)) -> ProductOut:
    try:
        product = create_product(db, payload)
    except ProductValidationError as e:
        raise ApiError(400, str(e)) from e
    return product_to_out(product)


@router.put("/{product_id}", response_model=ProductOut)
def admin_update_product(
    product_id: str,
    payload: ProductIn,
    db: Session = Depends(get_db),
) -> ProductOut:
    product = _get_product_or_404(db, product_id)
    try:
        product = update_product(db, product, payload)
    except ProductValidationError as e:
        raise ApiError(400, str(e)) from e
    return product_to_out(product)


@router.delete("/{product_id}")
def admin_delete_product(product_id: str, db: Session = Depends(get_db)) -> dict:
    product = _get_product_or_404(db, product_id)
    delete_product(db, product)
    return {"success": True}


@router.get("/{product_id}/colors", response_model=list[ProductColorOut])
def admin_list_colors(product_id: str, db: Session = Depends(get_db)) -> list[ProductColorOut]:
    _get_product_or_404(db, product_id)
    return [color_to_out(c) for c in list_colors(db, product_id)]


@router.post("/{product_id}/colors", response_model=ProductColorOut, status_code=201)
def admin_add_color(
    product_id: str,
    payload: ProductColorIn,
    db: Session = Depends(get_db),
) -> ProductColorOut:
    _get_product_or_404(db, product_id)

    color = ProductColor(
        id=uuid4().hex,
        product_id=product_id,
        name=payload.name.strip(),
        hex_code=payload.hex_code,
        image_url=payload.image_url,
        created_at=datetime.utcnow(),
    )
    db.add(color)
    db.commit()
    return color_to_out(color)


@router.delete("/{product_id}/colors/{color_id}")
def admin_delete_color(product_id: str, color_id: str, db: Session = Depends(get_db)) -> dict:
    color = db.get(ProductColor, color_id)
    if color is None or color.product_id != product_id:
        raise ApiError(404, "Color not found")

    db.delete(color)
    db.commit()
    return {"success": True}


@router.get("/{product_id}/images", response_model=list[ProductImageOut])
def admin_list_images(product_id: str, db: Session = Depends(get_db)) -> list[ProductImageOut]:
    _get_product_or_404(db, product_id)
    return [image_to_out(i) for i in list_images(db, product_id)]


@router.post("/{product_id}/images", response_model=ProductImageOut, status_code=201)
def admin_add_image(
    product_id: str,
    payload: ProductImageIn,
    db: Session = Depends(get_db),
) -> ProductImageOut:
    product = _get_product_or_404(db, product_id)

    position = payload.position
    if position is None:
        position = next_image_position(db, product_id)

    image = ProductImage(
        id=uuid4().hex,
        product_id=product_id,
        image_url=payload.image_url,
        alt_text=payload.alt_text,
        position=position,
        created_at=datetime.utcnow(),
    )
    db.add(image)

    # The first gallery image doubles as the listing thumbnail.
    if not product.image_url:
        product.image_url = payload.image_url
    db.commit()
    return image_to_out(image)


@router.delete("/{product_id}/images/{image_id}")
def admin_delete_image(product_id: str, image_id: str, db: Session = Depends(get_db)) -> dict:
    image = db.get(ProductImage, image_id)
    if image is None or image.product_id != product_id:
        raise ApiError(404, "Image not found")

    db.delete(image)
    db.commit()
    return {"success": True}
