from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class CustomerOut(BaseModel):
    id: str
    email: str
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str
    is_guest: bool
    order_count: int
    created_at: str


class CustomOrderIn(BaseModel):
    name: str = ""
    email: str = ""
    description: str = ""
    phone: str | None = None
    budget_range: str | None = None
    deadline: str | None = None


class CustomOrderOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    description: str
    budget_range: str | None = None
    deadline: str | None = None
    status: str
    created_at: str


class SiteContentIn(BaseModel):
    # Checked by the endpoint so a missing section or payload is a 400, not a 422.
    section: str = ""
    data: dict[str, Any] | None = None


class SiteContentOut(BaseModel):
    id: str
    section: str
    title: str | None = None
    subtitle: str | None = None
    description: str | None = None
    image_url: str | None = None
    additional_data: dict[str, Any]
    updated_at: str
