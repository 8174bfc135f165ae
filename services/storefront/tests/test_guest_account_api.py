from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "lumidumi_guest.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("LUMIDUMI_DB_AUTO_CREATE", "true")

    from services.storefront.app.main import app

    with TestClient(app) as c:
        yield c


def _guest(**overrides: str) -> dict:
    body = {
        "phone": "9876543210",
        "email": "asha@example.com",
        "firstName": "Asha",
        "lastName": "Verma",
    }
    body.update(overrides)
    return body


def test_create_guest_account(client: TestClient) -> None:
    resp = client.post("/api/auth/create-guest", json=_guest())
    assert resp.status_code == 200

    data = resp.json()
    assert data["success"] is True
    assert data["message"] == "Guest account created successfully"
    assert data["isGuest"] is True
    assert data["userId"]


def test_create_guest_is_idempotent_by_phone_or_email(client: TestClient) -> None:
    first = client.post("/api/auth/create-guest", json=_guest()).json()

    same_phone = client.post(
        "/api/auth/create-guest", json=_guest(email="other@example.com")
    ).json()
    same_email = client.post("/api/auth/create-guest", json=_guest(phone="9000000000")).json()

    for data in (same_phone, same_email):
        assert data["success"] is True
        assert data["message"] == "User already exists"
        assert data["userId"] == first["userId"]


@pytest.mark.parametrize("missing", ["phone", "email", "firstName"])
def test_create_guest_requires_identity_fields(client: TestClient, missing: str) -> None:
    resp = client.post("/api/auth/create-guest", json=_guest(**{missing: ""}))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Phone, email, and first name are required"}


def test_sign_out_requires_bearer_token(client: TestClient) -> None:
    resp = client.post("/api/auth/sign-out")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authorization required"}


def test_create_guest_returns_profile_that_won_a_concurrent_insert(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    from datetime import datetime
    from uuid import uuid4

    from services.storefront.app.db.database import db_session
    from services.storefront.app.db.models import Profile
    from services.storefront.app.services import guest_accounts

    real_find = guest_accounts.find_profile
    winner_id = uuid4().hex
    calls = []

    def find_after_competing_insert(db, *, phone: str, email: str):
        calls.append(phone)
        if len(calls) == 1:
            # Another request registers the same shopper between our lookup and insert.
            other = db_session()
            try:
                other.add(
                    Profile(
                        id=winner_id,
                        email=email,
                        phone=phone,
                        first_name="Asha",
                        role="customer",
                        is_guest=True,
                        created_at=datetime.utcnow(),
                        updated_at=datetime.utcnow(),
                    )
                )
                other.commit()
            finally:
                other.close()
            return None
        return real_find(db, phone=phone, email=email)

    monkeypatch.setattr(guest_accounts, "find_profile", find_after_competing_insert)

    resp = client.post("/api/auth/create-guest", json=_guest())
    assert resp.status_code == 200
    assert resp.json()["userId"] == winner_id
    assert resp.json()["message"] == "User already exists"
    assert len(calls) == 2

    db = db_session()
    try:
        assert db.query(Profile).count() == 1
    finally:
        db.close()
