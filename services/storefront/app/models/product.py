from __future__ import annotations

from pydantic import BaseModel, Field
from services.storefront.app.db.models import Product, ProductColor, ProductImage


class ProductIn(BaseModel):
    # Required fields are checked by the endpoint so a missing one is a 400, not a 422.
    name: str = ""
    description: str = ""
    price: float | None = None
    stock_quantity: int | None = None
    slug: str | None = None
    category: str | None = None
    image_url: str | None = None
    scent_description: str | None = None
    burn_time: str | None = None
    is_active: bool = True
    featured: bool = False


class ProductColorIn(BaseModel):
    name: str = Field(..., min_length=1)
    hex_code: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    image_url: str | None = None


class ProductColorOut(BaseModel):
    id: str
    name: str
    hex_code: str | None = None
    image_url: str | None = None


class ProductImageIn(BaseModel):
    image_url: str = Field(..., min_length=1)
    alt_text: str | None = None
    position: int | None = None


class ProductImageOut(BaseModel):
    id: str
    image_url: str
    alt_text: str | None = None
    position: int


class ProductOut(BaseModel):
    id: str
    slug: str
    name: str
    description: str
    price: float
    stock_quantity: int
    category: str | None = None
    image_url: str | None = None
    scent_description: str | None = None
    burn_time: str | None = None
    is_active: bool
    featured: bool
    created_at: str
    updated_at: str


class ProductDetail(ProductOut):
    colors: list[ProductColorOut] = Field(default_factory=list)
    images: list[ProductImageOut] = Field(default_factory=list)


def product_to_out(p: Product) -> ProductOut:
    return ProductOut(
        id=p.id,
        slug=p.slug,
        name=p.name,
        description=p.description,
        price=p.price,
        stock_quantity=p.stock_quantity,
        category=p.category,
        image_url=p.image_url,
        scent_description=p.scent_description,
        burn_time=p.burn_time,
        is_active=p.is_active,
        featured=p.featured,
        created_at=p.created_at.isoformat(),
        updated_at=p.updated_at.isoformat(),
    )


def color_to_out(c: ProductColor) -> ProductColorOut:
    return ProductColorOut(id=c.id, name=c.name, hex_code=c.hex_code, image_url=c.image_url)


def image_to_out(i: ProductImage) -> ProductImageOut:
    return ProductImageOut(id=i.id, image_url=i.image_url, alt_text=i.alt_text, position=i.position)
