from __future__ import annotations

import secrets
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from services.storefront.app.services.signature import sign_payment

SECRET = "rzp_test_secret"


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "lumidumi_orders.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("LUMIDUMI_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("RAZORPAY_KEY_SECRET", SECRET)

    from services.storefront.app.main import app

    with TestClient(app) as c:
        yield c


def _place_order(
    client: TestClient,
    payment_id: str,
    *,
    email: str = "asha@example.com",
    phone: str = "9876543210",
) -> str:
    gateway_order_id = f"order_{payment_id}"
    resp = client.post(
        "/api/razorpay/verify-payment",
        json={
            "razorpay_order_id": gateway_order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": sign_payment(gateway_order_id, payment_id, SECRET),
            "orderDetails": {
                "items": [
                    {"productId": "p-1", "name": "Lavender Fields", "unitPrice": 999, "quantity": 2}
                ],
                "customerInfo": {
                    "email": email,
                    "firstName": "Asha",
                    "lastName": "Verma",
                    "phone": phone,
                    "address": "4 MG Road",
                    "city": "Mumbai",
                    "state": "Maharashtra",
                    "pincode": "400001",
                },
                "total": 2197,
                "deliveryFee": 199,
                "isGuestOrder": True,
            },
        },
    )
    assert resp.status_code == 200
    return resp.json()["order_id"]


def _session_for(email: str, phone: str) -> str:
    from datetime import datetime
    from uuid import uuid4

    from services.storefront.app.db.database import db_session
    from services.storefront.app.db.models import AuthSession, Profile

    db = db_session()
    try:
        profile = Profile(
            id=uuid4().hex,
            email=email,
            phone=phone,
            first_name="Asha",
            role="customer",
            is_guest=False,
            created_at=datetime.utcnow(),
            updated_at=datetime.utcnow(),
        )
        token = secrets.token_urlsafe(16)
        db.add(profile)
        db.add(AuthSession(token=token, profile_id=profile.id))
        db.commit()
    finally:
        db.close()
    return token


def test_track_requires_a_search_criterion(client: TestClient) -> None:
    resp = client.post("/api/orders/track", json={})
    assert resp.status_code == 400
    assert "provide email, mobile number, or order ID" in resp.json()["error"]


def test_track_unknown_order_is_404(client: TestClient) -> None:
    resp = client.post("/api/orders/track", json={"orderId": "nope"})
    assert resp.status_code == 404


def test_track_by_any_order_identifier(client: TestClient) -> None:
    order_id = _place_order(client, "pay_t1")

    for identifier in (order_id, "order_pay_t1", "pay_t1"):
        resp = client.post("/api/orders/track", json={"orderId": identifier})
        assert resp.status_code == 200
        assert resp.json()["order"]["id"] == order_id


def test_track_by_email_and_mobile_counts_matches(client: TestClient) -> None:
    _place_order(client, "pay_t2")
    _place_order(client, "pay_t3")
    _place_order(client, "pay_t4", email="ravi@example.com", phone="9123456789")

    by_email = client.post("/api/orders/track", json={"email": " ASHA@example.com "})
    assert by_email.json()["totalFound"] == 2

    combined = client.post(
        "/api/orders/track", json={"email": "asha@example.com", "mobile": "9123456789"}
    )
    assert combined.status_code == 404


def test_user_orders_requires_auth(client: TestClient) -> None:
    assert client.get("/api/user/orders").status_code == 401

    resp = client.get("/api/user/orders", headers={"Authorization": "Bearer not-a-session"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid or expired token"}


def test_user_orders_lists_orders_placed_with_account_email(client: TestClient) -> None:
    token = _session_for("asha@example.com", "9876543210")
    _place_order(client, "pay_u1")
    _place_order(client, "pay_u2", email="ravi@example.com", phone="9123456789")

    resp = client.get("/api/user/orders", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert [o["razorpay_payment_id"] for o in resp.json()] == ["pay_u1"]
