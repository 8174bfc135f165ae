from __future__ import annotations

import base64
import json
import logging
import os
import urllib.error
import urllib.request

from services.storefront.app.services.gateway_base import (
    GatewayAuthError,
    GatewayError,
    GatewayNotConfiguredError,
    GatewayOrder,
    GatewayUnavailableError,
)

logger = logging.getLogger(__name__)

RAZORPAY_BASE = "https://api.razorpay.com/v1"


def _clean(value: str) -> str:
    # Credentials pasted into dashboards often carry stray whitespace or newlines.
    return "".join(value.split())


class RazorpayGateway:
    """Order creation against the Razorpay REST API."""

    vendor = "RAZORPAY"

    def __init__(self, *, key_id: str, key_secret: str, timeout: float = 25) -> None:
        self.key_id = key_id
        self._key_secret = key_secret
        self._timeout = timeout

    @classmethod
    def from_env(cls) -> RazorpayGateway:
        key_id = _clean(os.getenv("RAZORPAY_KEY_ID", ""))
        key_secret = _clean(os.getenv("RAZORPAY_KEY_SECRET", ""))

        if not key_id:
            raise GatewayNotConfiguredError("RAZORPAY_KEY_ID")
        if not key_secret:
            raise GatewayNotConfiguredError("RAZORPAY_KEY_SECRET")

        return cls(key_id=key_id, key_secret=key_secret)

    def create_order(self, *, amount: int, currency: str, receipt: str) -> GatewayOrder:
        data = self._post("/orders", {"amount": amount, "currency": currency, "receipt": receipt})

        try:
            return GatewayOrder(
                id=str(data["id"]),
                amount=int(data["amount"]),
                currency=str(data["currency"]),
                receipt=str(data.get("receipt") or receipt),
                status=str(data.get("status") or "created"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise GatewayError(f"Unexpected Razorpay response shape: {data!r}") from e

    def _post(self, path: str, body: dict) -> dict:
        token = base64.b64encode(f"{self.key_id}:{self._key_secret}".encode()).decode("ascii")

        req = urllib.request.Request(f"{RAZORPAY_BASE}{path}", method="POST")
        req.add_header("Authorization", f"Basic {token}")
        req.add_header("Content-Type", "application/json")

        try:
            with urllib.request.urlopen(
                req, data=json.dumps(body).encode("utf-8"), timeout=self._timeout
            ) as resp:
                return json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            raw = e.read().decode("utf-8", errors="replace")
            logger.warning("Razorpay rejected request", extra={"status": e.code, "path": path})
            if e.code == 401:
                raise GatewayAuthError() from e
            raise GatewayError(_error_description(raw) or f"Razorpay HTTP {e.code}", e.code) from e
        except urllib.error.URLError as e:
            raise GatewayUnavailableError(str(e.reason)) from e
        except json.JSONDecodeError as e:
            raise GatewayError("Razorpay returned non-JSON response") from e


def _error_description(raw: str) -> str:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return raw.strip()[:500]

    if not isinstance(payload, dict):
        return ""
    error = payload.get("error") or {}
    if isinstance(error, dict):
        return str(error.get("description") or "")
    return str(error)
