"""Delivery fee tiers.

Two tiers: Delhi/NCR and the rest of the country. The fee is only charged once the
shopper has started entering an address.
"""

from __future__ import annotations

NCR_FEE = 99
STANDARD_FEE = 199

DELHI_STATES = frozenset({"delhi", "new delhi"})
NCR_CITIES = ("delhi", "gurgaon", "gurugram", "ghaziabad", "faridabad", "bahadurgarh")


def is_delhi_ncr(state: str, city: str) -> bool:
    state_key = " ".join((state or "").lower().split())
    city_key = " ".join((city or "").lower().split())

    if state_key in DELHI_STATES:
        return True

    if any(name in city_key for name in NCR_CITIES):
        return True

    # Noida is NCR; Greater Noida ships at the standard rate.
    return "noida" in city_key and "greater noida" not in city_key


def delivery_fee(state: str, city: str) -> int:
    if not (state or "").strip() and not (city or "").strip():
        return 0
    return NCR_FEE if is_delhi_ncr(state, city) else STANDARD_FEE
