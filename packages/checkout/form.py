from __future__ import annotations

import re
from dataclasses import dataclass, fields

from packages.shared.schemas.checkout_v1 import CustomerInfoV1

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Indian mobile numbers: ten digits starting 6-9.
PHONE_RE = re.compile(r"^[6-9]\d{9}$")

_REQUIRED_TEXT = {
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "email": "Email is required",
    "phone": "Phone number is required",
    "address": "Address is required",
    "city": "City is required",
    "state": "State is required",
    "pincode": "Pincode is required",
}


@dataclass
class CheckoutForm:
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    agree_to_terms: bool = False
    agree_to_privacy: bool = False

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    def has_address(self) -> bool:
        return bool(self.state.strip() or self.city.strip())

    def customer_info(self) -> CustomerInfoV1:
        return CustomerInfoV1(
            email=self.email.strip(),
            first_name=self.first_name.strip(),
            last_name=self.last_name.strip(),
            phone=self.phone.strip(),
            address=self.address.strip(),
            city=self.city.strip(),
            state=self.state.strip(),
            pincode=self.pincode.strip(),
        )


def validate_form(form: CheckoutForm) -> dict[str, str]:
    """Return field name -> message for every problem; empty when the form is submittable."""

    errors: dict[str, str] = {}

    for name, message in _REQUIRED_TEXT.items():
        if not getattr(form, name).strip():
            errors[name] = message

    if not form.agree_to_terms:
        errors["agree_to_terms"] = "You must agree to terms of service"
    if not form.agree_to_privacy:
        errors["agree_to_privacy"] = "You must agree to privacy policy"

    email = form.email.strip()
    if email and not EMAIL_RE.match(email):
        errors["email"] = "Please enter a valid email"

    phone = form.phone.strip()
    if phone and not PHONE_RE.match(phone):
        errors["phone"] = "Please enter a valid 10-digit phone number"

    return errors
