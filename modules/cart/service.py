"""
Cart Module - Service Layer
==============================
Thin client for the remote cart service: fetch snapshot, mutate lines,
attach discount codes. Every call raises RemoteServiceError on failure.
"""

import logging

import httpx

from config.api import request_json
from modules.cart.models import Cart

logger = logging.getLogger("storefront.cart")


class CartService:

    def fetch_cart(self, api: httpx.Client) -> Cart:
        """Current server-side cart of the authenticated user."""
        data = request_json(api, "GET", "/cart/users/cart")
        return Cart.from_api(data)

    def add_item(self, api: httpx.Client, variant_id: int, quantity: int = 1):
        """Put a variant into the cart with the given quantity."""
        request_json(api, "POST", f"/cart/products/{variant_id}/quantity/{quantity}")
        logger.info(f"Added variant {variant_id} x{quantity} to cart")

    def increase_quantity(self, api: httpx.Client, variant_id: int):
        request_json(api, "PUT", f"/cart/update/products/{variant_id}/quantity/add")

    def decrease_quantity(self, api: httpx.Client, variant_id: int):
        request_json(api, "PUT", f"/cart/update/products/{variant_id}/quantity/delete")

    def delete_line(self, api: httpx.Client, variant_id: int):
        request_json(api, "DELETE", f"/cart/delete/product/{variant_id}")
        logger.info(f"Removed variant {variant_id} from cart")

    def apply_discount_code(self, api: httpx.Client, code: str):
        """Attach a discount code by its string. The service rejects unknown codes."""
        request_json(api, "POST", "/cart/add-discount", params={"discountCode": code})
        logger.info(f"Discount code applied: {code}")

    def clear_cart(self, api: httpx.Client):
        request_json(api, "DELETE", "/cart")
        logger.info("Cart cleared")


# Singleton
cart_service = CartService()
