"""
Checkout Module - Service Layer
==================================
Reference data for the checkout page: shipping methods, payment types and
the user's saved payment methods. A failed lookup is logged and yields an
empty list so the page still renders.
"""

import logging
from typing import List, Optional

import httpx

from common.exceptions import RemoteServiceError
from config.api import request_json
from modules.checkout.models import PaymentType, ShippingMethod, UserPaymentMethod

logger = logging.getLogger("storefront.checkout")


class CheckoutService:

    def _list(self, api: httpx.Client, path: str, label: str) -> list:
        try:
            data = request_json(api, "GET", path)
        except RemoteServiceError as e:
            logger.error(f"Could not load {label}: {e.message}")
            return []
        return data if isinstance(data, list) else []

    def get_shipping_methods(self, api: httpx.Client) -> List[ShippingMethod]:
        return [ShippingMethod.from_api(d) for d in self._list(api, "/shipping-method/all", "shipping methods")]

    def get_payment_types(self, api: httpx.Client) -> List[PaymentType]:
        return [PaymentType.from_api(d) for d in self._list(api, "/payment-type/all", "payment types")]

    def get_user_payment_methods(self, api: httpx.Client) -> List[UserPaymentMethod]:
        return [UserPaymentMethod.from_api(d) for d in self._list(api, "/user-payment-method", "saved payment methods")]

    # ==========================================
    # Lookups by id (selection requests carry ids only)
    # ==========================================

    def find_shipping_method(self, api: httpx.Client, method_id: int) -> Optional[ShippingMethod]:
        return next((m for m in self.get_shipping_methods(api) if m.id == method_id), None)

    def find_payment_type(self, api: httpx.Client, type_id: int) -> Optional[PaymentType]:
        return next((p for p in self.get_payment_types(api) if p.id == type_id), None)

    def find_user_payment_method(self, api: httpx.Client, method_id: int) -> Optional[UserPaymentMethod]:
        return next((m for m in self.get_user_payment_methods(api) if m.id == method_id), None)


# Singleton
checkout_service = CheckoutService()
