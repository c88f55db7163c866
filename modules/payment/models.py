"""
Payment Module - Models
=========================
Order submission request and payment verification result.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

from common.helpers import money_float
from modules.checkout.models import Address


@dataclass(frozen=True)
class OrderSubmissionRequest:
    """
    Everything the order service needs to create an order and open a
    checkout session. Built once per submission attempt; holds no state
    that changes between retries except order_date.
    """
    user_id: str
    order_date: str
    address: Address
    shipping_method_id: int
    order_total: Decimal            # subtotal before shipping and codes
    final_order_total: Decimal      # subtotal - code discounts + shipping
    applied_discount_value: Decimal  # sum of code percentages, not amounts
    provider_id: Optional[int]
    cart: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "orderDate": self.order_date,
            "addressRequest": self.address.to_payload(),
            "shippingMethodId": self.shipping_method_id,
            "orderTotal": money_float(self.order_total),
            "finalOrderTotal": money_float(self.final_order_total),
            "appliedDiscountValue": float(self.applied_discount_value),
            "providerId": self.provider_id,
            "cart": self.cart,
        }

    def to_body(self) -> Dict[str, Any]:
        return {"orderRequest": self.to_payload()}


PAYMENT_SUCCEEDED = "SUCCEEDED"


@dataclass
class PaymentVerification:
    status: str
    order_id: Optional[int] = None
    transaction: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def succeeded(self) -> bool:
        return (self.status or "").upper() == PAYMENT_SUCCEEDED

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "PaymentVerification":
        data = data or {}
        shop_order = data.get("shopOrder") or {}
        return cls(
            status=str(data.get("status") or ""),
            order_id=shop_order.get("id") or data.get("orderId"),
            transaction=str(data.get("transaction") or ""),
            raw=data,
        )
