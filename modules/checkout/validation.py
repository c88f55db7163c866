"""
Checkout Module - Address Validation
======================================
Field rules for shipping addresses. Messages are shown inline next to the
offending field, so they are kept short and user-facing.
"""

import re
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from common.exceptions import AddressValidationError
from modules.checkout.models import SUPPORTED_COUNTRIES

PHONE_RE = re.compile(r"^[0-9]{9}$")


def _required(value: str, message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(message)
    return value


def _name(value: str, label: str) -> str:
    value = _required(value, f"{label} cannot be empty!")
    if len(value) < 2:
        raise ValueError(f"{label} should be 2 characters long minimum")
    return value


class AddressForm(BaseModel):
    # Missing fields must still hit their "cannot be empty" rule
    model_config = ConfigDict(validate_default=True)

    country: str = ""
    city: str = ""
    first_name: str = ""
    last_name: str = ""
    postal_code: str = ""
    street: str = ""
    phone_number: str = ""
    address_line1: str = ""
    address_line2: str = ""

    @field_validator("country")
    @classmethod
    def check_country(cls, v):
        v = _required(v, "Country cannot be empty!")
        if v not in SUPPORTED_COUNTRIES:
            raise ValueError("Please select a supported country")
        return v

    @field_validator("city")
    @classmethod
    def check_city(cls, v):
        return _required(v, "City cannot be empty!")

    @field_validator("first_name")
    @classmethod
    def check_first_name(cls, v):
        return _name(v, "First name")

    @field_validator("last_name")
    @classmethod
    def check_last_name(cls, v):
        return _name(v, "Last name")

    @field_validator("postal_code")
    @classmethod
    def check_postal_code(cls, v):
        return _required(v, "Postal code cannot be empty!")

    @field_validator("street")
    @classmethod
    def check_street(cls, v):
        return _required(v, "Street cannot be empty!")

    @field_validator("phone_number")
    @classmethod
    def check_phone(cls, v):
        v = _required(v, "Phone number cannot be empty!")
        if not PHONE_RE.match(v):
            raise ValueError("Phone number must be a 9-digit number")
        return v


def address_errors(values: Dict[str, str]) -> Dict[str, List[str]]:
    """Field -> messages. Empty dict means the address is valid."""
    data = {k: ("" if v is None else str(v)) for k, v in (values or {}).items() if k in AddressForm.model_fields}
    try:
        AddressForm(**data)
    except ValidationError as e:
        errors: Dict[str, List[str]] = {}
        for err in e.errors():
            field = str(err["loc"][0]) if err.get("loc") else "__all__"
            ctx_error = (err.get("ctx") or {}).get("error")
            message = str(ctx_error) if ctx_error is not None else err.get("msg", "Invalid value")
            errors.setdefault(field, []).append(message)
        return errors
    return {}


def is_valid_address(values: Dict[str, str]) -> bool:
    return not address_errors(values)


def validate_address(values: Dict[str, str]) -> Dict[str, str]:
    """Return the cleaned field values or raise AddressValidationError."""
    errors = address_errors(values)
    if errors:
        raise AddressValidationError(errors)
    data = {k: ("" if v is None else str(v)) for k, v in (values or {}).items() if k in AddressForm.model_fields}
    return AddressForm(**data).model_dump()
