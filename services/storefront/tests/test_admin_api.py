from __future__ import annotations

import secrets
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from services.storefront.app.services.signature import sign_payment

SECRET = "rzp_test_secret"


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "lumidumi_admin.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("LUMIDUMI_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("RAZORPAY_KEY_SECRET", SECRET)

    from services.storefront.app.main import app
    from services.storefront.app.services.admin_cache import admin_cache

    admin_cache.clear()
    with TestClient(app) as c:
        yield c
    admin_cache.clear()


def _profile(role: str, email: str) -> tuple[str, str]:
    from services.storefront.app.db.database import db_session
    from services.storefront.app.db.models import AuthSession, Profile

    db = db_session()
    try:
        profile = Profile(
            id=uuid4().hex,
            email=email,
            first_name=role.title(),
            role=role,
            is_guest=False,
            created_at=datetime.utcnow(),
            updated_at=datetime.utcnow(),
        )
        token = secrets.token_urlsafe(16)
        db.add(profile)
        db.add(AuthSession(token=token, profile_id=profile.id))
        db.commit()
        return profile.id, token
    finally:
        db.close()


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(client: TestClient) -> dict:
    _, token = _profile("admin", "admin@lumidumi.local")
    return _auth(token)


def _place_order(client: TestClient, payment_id: str) -> str:
    gateway_order_id = f"order_{payment_id}"
    resp = client.post(
        "/api/razorpay/verify-payment",
        json={
            "razorpay_order_id": gateway_order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": sign_payment(gateway_order_id, payment_id, SECRET),
            "orderDetails": {
                "items": [
                    {"productId": "p-1", "name": "Vanilla Dreams", "unitPrice": 899, "quantity": 1}
                ],
                "customerInfo": {
                    "email": "asha@example.com",
                    "firstName": "Asha",
                    "phone": "9876543210",
                    "address": "12 Lodhi Road",
                    "city": "New Delhi",
                    "state": "Delhi",
                    "pincode": "110003",
                },
                "total": 998,
                "deliveryFee": 99,
            },
        },
    )
    assert resp.status_code == 200
    return resp.json()["order_id"]


def _set_status(client: TestClient, headers: dict, order_id: str, status: str, **extra: str):
    return client.post(
        "/api/admin/update-order-status",
        json={"orderId": order_id, "updateData": {"status": status, **extra}},
        headers=headers,
    )


def test_admin_routes_require_auth(client: TestClient) -> None:
    for path in ("/api/admin/orders", "/api/admin/customers", "/api/admin/products"):
        assert client.get(path).status_code == 401


def test_admin_routes_reject_customers(client: TestClient) -> None:
    _, token = _profile("customer", "shopper@example.com")

    resp = client.get("/api/admin/orders", headers=_auth(token))
    assert resp.status_code == 403
    assert resp.json() == {"error": "Insufficient permissions - admin access required"}


def test_admin_lists_orders_by_status(client: TestClient, admin_headers: dict) -> None:
    first = _place_order(client, "pay_a1")
    _place_order(client, "pay_a2")
    assert _set_status(client, admin_headers, first, "processing").status_code == 200

    all_orders = client.get("/api/admin/orders", headers=admin_headers).json()
    assert len(all_orders) == 2

    processing = client.get(
        "/api/admin/orders", params={"status": "processing"}, headers=admin_headers
    ).json()
    assert [o["id"] for o in processing] == [first]

    bad = client.get("/api/admin/orders", params={"status": "lost"}, headers=admin_headers)
    assert bad.status_code == 400


def test_order_moves_through_fulfilment(client: TestClient, admin_headers: dict) -> None:
    order_id = _place_order(client, "pay_f1")

    for status in ("processing", "shipped", "delivered", "completed"):
        resp = _set_status(client, admin_headers, order_id, status)
        assert resp.status_code == 200
        assert resp.json()["order"]["status"] == status

    # Terminal.
    resp = _set_status(client, admin_headers, order_id, "cancelled")
    assert resp.status_code == 409


def test_status_update_records_notes(client: TestClient, admin_headers: dict) -> None:
    order_id = _place_order(client, "pay_n1")

    resp = _set_status(client, admin_headers, order_id, "confirmed", notes="Gift wrap")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Order status updated successfully"
    assert body["order"]["status"] == "confirmed"
    assert body["order"]["notes"] == "Gift wrap"


def test_status_update_rejects_skipping_and_unknown(client: TestClient, admin_headers: dict) -> None:
    order_id = _place_order(client, "pay_s1")

    skip = _set_status(client, admin_headers, order_id, "delivered")
    assert skip.status_code == 409
    assert skip.json() == {"error": "Cannot move order from confirmed to delivered"}

    unknown = _set_status(client, admin_headers, order_id, "teleported")
    assert unknown.status_code == 400

    missing = _set_status(client, admin_headers, "no-such-order", "processing")
    assert missing.status_code == 404


def test_customers_include_order_counts(client: TestClient, admin_headers: dict) -> None:
    client.post(
        "/api/auth/create-guest",
        json={"phone": "9876543210", "email": "asha@example.com", "firstName": "Asha"},
    )
    _place_order(client, "pay_c1")
    _place_order(client, "pay_c2")

    customers = client.get("/api/admin/customers", headers=admin_headers).json()
    by_email = {c["email"]: c for c in customers}

    assert by_email["asha@example.com"]["order_count"] == 2
    assert by_email["asha@example.com"]["is_guest"] is True
    assert by_email["admin@lumidumi.local"]["order_count"] == 0


def test_custom_orders_submitted_and_listed(client: TestClient, admin_headers: dict) -> None:
    bad = client.post("/api/custom-orders", json={"name": "Asha"})
    assert bad.status_code == 400

    created = client.post(
        "/api/custom-orders",
        json={
            "name": "Asha",
            "email": "Asha@Example.com",
            "description": "Forty favour candles for a wedding",
            "budget_range": "10k-20k",
        },
    )
    assert created.status_code == 201
    assert created.json()["status"] == "pending"

    listed = client.get("/api/admin/custom-orders", headers=admin_headers).json()
    assert len(listed) == 1
    assert listed[0]["email"] == "asha@example.com"
    assert listed[0]["budget_range"] == "10k-20k"


def test_product_crud(client: TestClient, admin_headers: dict) -> None:
    missing = client.post(
        "/api/admin/products", json={"name": "Rose Garden"}, headers=admin_headers
    )
    assert missing.status_code == 400
    assert missing.json() == {"error": "Missing required fields: description, price, stock_quantity"}

    created = client.post(
        "/api/admin/products",
        json={
            "name": "Rose Garden",
            "description": "Fresh roses",
            "price": 1099,
            "stock_quantity": 4,
            "featured": True,
        },
        headers=admin_headers,
    )
    assert created.status_code == 201
    product = created.json()
    assert product["slug"] == "rose-garden"

    public = client.get("/api/products/rose-garden")
    assert public.status_code == 200
    assert public.json()["price"] == 1099

    featured = client.get("/api/products", params={"featured": "true"}).json()
    assert [p["slug"] for p in featured] == ["rose-garden"]

    updated = client.put(
        f"/api/admin/products/{product['id']}",
        json={
            "name": "Rose Garden",
            "description": "Fresh roses",
            "price": 1199,
            "stock_quantity": 2,
            "is_active": False,
        },
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["price"] == 1199
    assert client.get("/api/products/rose-garden").status_code == 404

    bad_price = client.put(
        f"/api/admin/products/{product['id']}",
        json={"name": "Rose Garden", "description": "x", "price": 0, "stock_quantity": 2},
        headers=admin_headers,
    )
    assert bad_price.status_code == 400

    deleted = client.delete(f"/api/admin/products/{product['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    listing = client.get("/api/admin/products", headers=admin_headers).json()
    assert listing == []


def test_product_colors_and_images(client: TestClient, admin_headers: dict) -> None:
    product = client.post(
        "/api/admin/products",
        json={"name": "Citrus Burst", "description": "Orange", "price": 799, "stock_quantity": 9},
        headers=admin_headers,
    ).json()
    base = f"/api/admin/products/{product['id']}"

    color = client.post(
        f"{base}/colors", json={"name": "Sunset", "hex_code": "#FF8800"}, headers=admin_headers
    )
    assert color.status_code == 201
    bad_color = client.post(
        f"{base}/colors", json={"name": "Nope", "hex_code": "orange"}, headers=admin_headers
    )
    assert bad_color.status_code == 422

    first = client.post(
        f"{base}/images", json={"image_url": "https://cdn.example/1.jpg"}, headers=admin_headers
    ).json()
    second = client.post(
        f"{base}/images", json={"image_url": "https://cdn.example/2.jpg"}, headers=admin_headers
    ).json()
    assert (first["position"], second["position"]) == (0, 1)

    detail = client.get("/api/products/citrus-burst").json()
    assert detail["image_url"] == "https://cdn.example/1.jpg"
    assert [c["name"] for c in detail["colors"]] == ["Sunset"]
    assert [i["image_url"] for i in detail["images"]] == [
        "https://cdn.example/1.jpg",
        "https://cdn.example/2.jpg",
    ]

    assert client.delete(f"{base}/images/{first['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"{base}/images/{first['id']}", headers=admin_headers).status_code == 404
    color_id = color.json()["id"]
    assert client.delete(f"{base}/colors/{color_id}", headers=admin_headers).status_code == 200
    assert client.get(f"{base}/colors", headers=admin_headers).json() == []
    assert len(client.get(f"{base}/images", headers=admin_headers).json()) == 1


def test_admin_status_is_cached_until_sign_out(client: TestClient) -> None:
    from services.storefront.app.db.database import db_session
    from services.storefront.app.db.models import AuthSession, Profile

    profile_id, token = _profile("admin", "owner@lumidumi.local")
    assert client.get("/api/admin/orders", headers=_auth(token)).status_code == 200

    db = db_session()
    try:
        db.get(Profile, profile_id).role = "customer"
        second_token = secrets.token_urlsafe(16)
        db.add(AuthSession(token=second_token, profile_id=profile_id))
        db.commit()
    finally:
        db.close()

    # Cached answer survives the role change.
    assert client.get("/api/admin/orders", headers=_auth(token)).status_code == 200

    assert client.post("/api/auth/sign-out", headers=_auth(token)).json() == {"success": True}
    assert client.get("/api/admin/orders", headers=_auth(token)).status_code == 401
    assert client.get("/api/admin/orders", headers=_auth(second_token)).status_code == 403


def test_site_content_upsert_and_fetch(client: TestClient, admin_headers: dict) -> None:
    assert client.get("/api/admin/content", headers=admin_headers).json() == {"data": []}
    assert client.get(
        "/api/admin/content", params={"section": "hero"}, headers=admin_headers
    ).json() == {"data": None}

    hero = {
        "title": "Lumidumi",
        "subtitle": "Handcrafted candles",
        "imageUrl": "https://cdn.example/hero.jpg",
        "stats": [{"value": "100%", "label": "Natural Wax"}],
    }
    created = client.post(
        "/api/admin/content", json={"section": "hero", "data": hero}, headers=admin_headers
    )
    assert created.status_code == 200
    assert created.headers["cache-control"] == "no-store, max-age=0"
    row = created.json()["data"]
    assert row["section"] == "hero"
    assert row["image_url"] == "https://cdn.example/hero.jpg"
    assert row["description"] is None
    assert row["additional_data"]["stats"][0]["label"] == "Natural Wax"

    updated = client.post(
        "/api/admin/content",
        json={"section": "hero", "data": {"title": "Lumidumi Candles"}},
        headers=admin_headers,
    ).json()["data"]
    assert updated["id"] == row["id"]
    assert updated["title"] == "Lumidumi Candles"
    assert updated["subtitle"] is None
    assert updated["additional_data"] == {"title": "Lumidumi Candles"}

    client.post(
        "/api/admin/content",
        json={"section": "about", "data": {"title": "Crafted with Love"}},
        headers=admin_headers,
    )
    listed = client.get("/api/admin/content", headers=admin_headers).json()["data"]
    assert [r["section"] for r in listed] == ["about", "hero"]

    one = client.get("/api/admin/content", params={"section": "about"}, headers=admin_headers)
    assert one.json()["data"]["title"] == "Crafted with Love"


@pytest.mark.parametrize(
    "body",
    [
        {"data": {"title": "x"}},
        {"section": "hero"},
        {"section": " ", "data": {"title": "x"}},
        {"section": "hero", "data": {}},
    ],
)
def test_site_content_requires_section_and_data(
    client: TestClient, admin_headers: dict, body: dict
) -> None:
    resp = client.post("/api/admin/content", json=body, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Section and data are required"}


def test_site_content_is_admin_only(client: TestClient) -> None:
    _, token = _profile("customer", "shopper@example.com")

    assert client.get("/api/admin/content").status_code == 401
    resp = client.post(
        "/api/admin/content",
        json={"section": "hero", "data": {"title": "x"}},
        headers=_auth(token),
    )
    assert resp.status_code == 403
