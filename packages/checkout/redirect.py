from __future__ import annotations

import re
from collections.abc import Mapping
from urllib.parse import urlencode

SUCCESS_PATH = "/order-success"
CART_PATH = "/cart"

_MOBILE_UA = re.compile(r"Android|webOS|iPhone|iPad|iPod|BlackBerry|IEMobile|Opera Mini", re.I)


def is_mobile_user_agent(user_agent: str) -> bool:
    return bool(_MOBILE_UA.search(user_agent or ""))


def success_url(*, payment_id: str, order_id: str, amount: int, guest: bool) -> str:
    """Order confirmation URL. ``order_id`` is the persisted order, not the gateway's order."""

    params = {"payment_id": payment_id, "order_id": order_id, "amount": str(amount)}
    if guest:
        params["guest"] = "true"
    return f"{SUCCESS_PATH}?{urlencode(params)}"


def is_success_page(path: str, query: Mapping[str, str] | None = None) -> bool:
    if (path or "").startswith(SUCCESS_PATH):
        return True
    query = query or {}
    return bool(query.get("payment_id") or query.get("order_id"))


def should_redirect_to_cart(
    *,
    cart_is_empty: bool,
    payment_in_flight: bool,
    path: str,
    query: Mapping[str, str] | None = None,
) -> bool:
    """Whether an empty cart should bounce the shopper back to the cart page.

    Never while a payment is in flight, and never on the success page: the cart is
    cleared right before navigating there.
    """

    if not cart_is_empty or payment_in_flight:
        return False
    return not is_success_page(path, query)
