"""
Checkout Module - Models
==========================
Shipping methods, payment types, saved payment methods and addresses,
as delivered by the order/user services.
"""

from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Any, Dict, Optional

from common.helpers import safe_int, to_decimal


SUPPORTED_COUNTRIES = (
    "Poland",
    "Czech Republic",
    "England",
    "Germany",
    "Slovakia",
    "France",
    "Italy",
    "Spain",
)
DEFAULT_COUNTRY = "Poland"

# snake_case field -> remote camelCase key
ADDRESS_FIELDS = {
    "country": "country",
    "city": "city",
    "first_name": "firstName",
    "last_name": "lastName",
    "postal_code": "postalCode",
    "street": "street",
    "phone_number": "phoneNumber",
    "address_line1": "addressLine1",
    "address_line2": "addressLine2",
}


@dataclass(frozen=True)
class ShippingMethod:
    id: int
    name: str
    price: Decimal

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ShippingMethod":
        return cls(
            id=safe_int(data.get("id")),
            name=data.get("name") or "",
            price=to_decimal(data.get("price")),
        )


@dataclass(frozen=True)
class PaymentType:
    """A payment rail offered by the shop. `provider` is a free-text label, e.g. "Stripe Checkout"."""
    id: int
    provider: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PaymentType":
        return cls(id=safe_int(data.get("id")), provider=data.get("value") or "")


@dataclass(frozen=True)
class UserPaymentMethod:
    """A saved, tokenised payment instrument of the user."""
    id: int
    provider: str = ""
    payment_type: Optional[PaymentType] = None
    last4: str = ""
    expiry_date: Optional[str] = None
    is_default: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "UserPaymentMethod":
        payment_type = data.get("paymentType")
        return cls(
            id=safe_int(data.get("id")),
            provider=data.get("provider") or "",
            payment_type=PaymentType.from_api(payment_type) if payment_type else None,
            last4=data.get("last4CardNumber") or "",
            expiry_date=data.get("expiryDate"),
            is_default=bool(data.get("isDefault")),
        )


@dataclass(frozen=True)
class Address:
    id: Optional[int] = None
    country: str = DEFAULT_COUNTRY
    city: str = ""
    first_name: str = ""
    last_name: str = ""
    postal_code: str = ""
    street: str = ""
    phone_number: str = ""
    address_line1: str = ""
    address_line2: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Address":
        values = {name: str(data.get(key) or "") for name, key in ADDRESS_FIELDS.items()}
        values["country"] = values["country"] or DEFAULT_COUNTRY
        return cls(id=safe_int(data.get("id")), **values)

    def values(self) -> Dict[str, str]:
        """Editable fields only (no id)."""
        data = asdict(self)
        data.pop("id")
        return data

    def to_payload(self) -> Dict[str, Any]:
        payload = {"id": self.id}
        for name, key in ADDRESS_FIELDS.items():
            payload[key] = getattr(self, name)
        return payload
