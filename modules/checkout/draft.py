"""
Checkout Module - Checkout Draft
==================================
The in-progress, unpersisted selection of address, shipping method and
payment method for one checkout session.

Exactly one payment selection is active at a time: choosing a payment type
clears a saved payment method and vice versa.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from common.helpers import now_utc
from modules.checkout.models import Address, PaymentType, ShippingMethod, UserPaymentMethod


def _blank_address() -> Dict[str, str]:
    return Address().values()


@dataclass
class CheckoutDraft:
    address_values: Dict[str, str] = field(default_factory=_blank_address)
    saved_address: Optional[Address] = None
    shipping_method: Optional[ShippingMethod] = None
    payment_type: Optional[PaymentType] = None
    user_payment_method: Optional[UserPaymentMethod] = None
    created_at: datetime = field(default_factory=now_utc)

    # ==========================================
    # Address
    # ==========================================

    def select_saved_address(self, address: Address):
        """Populate the form from a saved address; it is clean until edited."""
        self.saved_address = address
        self.address_values = address.values()

    def update_address(self, values: Dict[str, str]):
        """Apply edited form fields. Unknown keys are ignored."""
        merged = dict(self.address_values)
        for key, value in (values or {}).items():
            if key in merged:
                merged[key] = "" if value is None else str(value)
        self.address_values = merged

    def clear_saved_address(self):
        """Start a new, ad-hoc address (keeps the current field values)."""
        self.saved_address = None

    @property
    def dirty(self) -> bool:
        """True when the submitted address must be treated as a new one."""
        if self.saved_address is None:
            return True
        return self.address_values != self.saved_address.values()

    def address_request(self) -> Address:
        """Address sent with the order: saved id only when untouched."""
        address_id = None if self.dirty else self.saved_address.id
        return Address(id=address_id, **self.address_values)

    # ==========================================
    # Shipping & Payment
    # ==========================================

    def select_shipping(self, method: ShippingMethod):
        self.shipping_method = method

    def select_payment_type(self, payment_type: PaymentType):
        self.payment_type = payment_type
        self.user_payment_method = None

    def select_user_payment_method(self, method: UserPaymentMethod):
        self.user_payment_method = method
        self.payment_type = None

    @property
    def payment_selected(self) -> bool:
        return self.payment_type is not None or self.user_payment_method is not None

    @property
    def provider_name(self) -> str:
        """Free-text provider label of the active payment selection."""
        if self.payment_type is not None:
            return self.payment_type.provider
        if self.user_payment_method is not None:
            upm = self.user_payment_method
            if upm.payment_type is not None and upm.payment_type.provider:
                return upm.payment_type.provider
            return upm.provider
        return ""

    @property
    def provider_id(self) -> Optional[int]:
        if self.payment_type is not None:
            return self.payment_type.id
        if self.user_payment_method is not None:
            upm = self.user_payment_method
            return upm.payment_type.id if upm.payment_type is not None else upm.id
        return None

    def as_dict(self) -> dict:
        return {
            "address": dict(self.address_values),
            "saved_address_id": self.saved_address.id if self.saved_address else None,
            "dirty": self.dirty,
            "shipping_method_id": self.shipping_method.id if self.shipping_method else None,
            "payment_type_id": self.payment_type.id if self.payment_type else None,
            "user_payment_method_id": self.user_payment_method.id if self.user_payment_method else None,
        }
