from __future__ import annotations

import hashlib
import hmac


def sign_payment(order_id: str, payment_id: str, secret: str) -> str:
    """Razorpay checkout signature: hex HMAC-SHA256 of ``"<order_id>|<payment_id>"``."""

    body = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_payment_signature(
    *,
    order_id: str,
    payment_id: str,
    signature: str | None,
    secret: str,
) -> bool:
    if not signature or not order_id or not payment_id:
        return False
    expected = sign_payment(order_id, payment_id, secret)
    return hmac.compare_digest(expected, str(signature).strip())
