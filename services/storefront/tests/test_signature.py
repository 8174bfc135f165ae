import hashlib
import hmac

from services.storefront.app.services.signature import sign_payment, verify_payment_signature

SECRET = "test_secret_key"


def test_sign_payment_matches_razorpay_scheme() -> None:
    expected = hmac.new(SECRET.encode(), b"order_abc|pay_xyz", hashlib.sha256).hexdigest()
    assert sign_payment("order_abc", "pay_xyz", SECRET) == expected


def test_verify_accepts_genuine_signature() -> None:
    sig = sign_payment("order_abc", "pay_xyz", SECRET)
    assert verify_payment_signature(
        order_id="order_abc", payment_id="pay_xyz", signature=sig, secret=SECRET
    )


def test_verify_rejects_forgeries() -> None:
    genuine = sign_payment("order_abc", "pay_xyz", SECRET)

    assert not verify_payment_signature(
        order_id="order_abc", payment_id="pay_xyz", signature="deadbeef", secret=SECRET
    )
    # Signature for a different payment on the same order.
    assert not verify_payment_signature(
        order_id="order_abc", payment_id="pay_other", signature=genuine, secret=SECRET
    )
    # Signed with the wrong key.
    assert not verify_payment_signature(
        order_id="order_abc",
        payment_id="pay_xyz",
        signature=sign_payment("order_abc", "pay_xyz", "other"),
        secret=SECRET,
    )
    assert not verify_payment_signature(
        order_id="order_abc", payment_id="pay_xyz", signature=None, secret=SECRET
    )
