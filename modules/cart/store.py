"""
Cart Module - Cart Store
==========================
Owns the latest server-confirmed cart snapshot for one request.

Mutations are fire-and-refetch: each successful call is followed by a full
refetch, never a local patch. A failed mutation is logged and reported as
not applied, and the snapshot is left as it was (no refetch). If the mutation
went through but the refetch fails, the result is applied but not reloaded
and the stale snapshot is dropped.
Pricing, stock validation and the checkout controller only read `snapshot`.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from common.exceptions import RemoteServiceError
from common.helpers import money_float
from modules.cart.models import Cart
from modules.cart.service import CartService, cart_service
from modules.inventory.validator import (
    can_decrement, can_increment, has_any_insufficient_stock, line_controls,
)
from modules.pricing.calculator import price_cart

logger = logging.getLogger("storefront.cart")


@dataclass
class MutationResult:
    applied: bool
    message: str = ""
    status_code: int = 200
    reloaded: bool = True


class CartStore:

    def __init__(self, api: httpx.Client, service: CartService = cart_service):
        self.api = api
        self.service = service
        self._snapshot: Optional[Cart] = None

    @property
    def snapshot(self) -> Cart:
        """Latest fetched cart; fetched lazily on first access."""
        if self._snapshot is None:
            self.refresh()
        return self._snapshot

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not None

    def refresh(self) -> Cart:
        self._snapshot = self.service.fetch_cart(self.api)
        return self._snapshot

    # ==========================================
    # Mutations
    # ==========================================

    def _mutate(self, action: str, call, *args) -> MutationResult:
        try:
            call(self.api, *args)
        except RemoteServiceError as e:
            logger.error(f"Cart {action} failed: {e.message}")
            return MutationResult(applied=False, message=e.message, status_code=502)
        try:
            self.refresh()
        except RemoteServiceError as e:
            logger.error(f"Cart {action} applied but refetch failed: {e.message}")
            self._snapshot = None
            return MutationResult(
                applied=True,
                reloaded=False,
                message="Your basket was updated but could not be reloaded.",
                status_code=502,
            )
        return MutationResult(applied=True)

    def add(self, variant_id: int, quantity: int = 1) -> MutationResult:
        if quantity < 1:
            return MutationResult(applied=False, message="Quantity must be at least 1.", status_code=400)
        return self._mutate("add", self.service.add_item, variant_id, quantity)

    def increment(self, variant_id: int) -> MutationResult:
        line = self.snapshot.line_for(variant_id)
        if line is None:
            return MutationResult(applied=False, message="This product is not in your basket.", status_code=404)
        if not can_increment(line):
            return MutationResult(applied=False, message="No more units of this product are available.", status_code=409)
        return self._mutate("increment", self.service.increase_quantity, variant_id)

    def decrement(self, variant_id: int) -> MutationResult:
        line = self.snapshot.line_for(variant_id)
        if line is None:
            return MutationResult(applied=False, message="This product is not in your basket.", status_code=404)
        if not can_decrement(line):
            return MutationResult(applied=False, message="Use remove to delete the last unit.", status_code=409)
        return self._mutate("decrement", self.service.decrease_quantity, variant_id)

    def remove(self, variant_id: int) -> MutationResult:
        return self._mutate("remove", self.service.delete_line, variant_id)

    def apply_discount(self, code: str) -> MutationResult:
        code = (code or "").strip()
        if not code:
            return MutationResult(applied=False, message="Please enter a discount code.", status_code=400)
        if any(dc.code == code for dc in self.snapshot.discount_codes):
            return MutationResult(applied=False, message="This discount code is already applied.", status_code=409)
        return self._mutate("discount", self.service.apply_discount_code, code)

    def clear(self) -> MutationResult:
        return self._mutate("clear", self.service.clear_cart)


# ==========================================
# View model (cart page, JSON API, checkout summary)
# ==========================================

def build_cart_summary(cart: Cart, shipping_price=None) -> dict:
    """Rounded, JSON-safe view of a snapshot with per-line controls and stock flags."""
    pricing = price_cart(cart)
    controls = line_controls(cart)
    lines = []
    for line in cart.lines:
        priced = pricing.line(line.variant_id)
        lines.append({
            "variant_id": line.variant_id,
            "product_id": line.product_id,
            "product_name": line.product_name,
            "colour": line.colour,
            "size": line.size,
            "image_url": line.image_url,
            "quantity": line.quantity,
            "available_stock": line.available_stock,
            "unit_price": money_float(line.unit_price),
            "discount_percent": float(line.unit_discount_percent),
            "effective_unit_price": money_float(priced.effective_unit_price),
            "line_total": money_float(priced.line_total),
            **controls[line.variant_id],
        })

    totals = {k: float(v) for k, v in pricing.as_display(shipping_price).items()}
    return {
        "lines": lines,
        "discount_codes": [
            {"code": dc.code, "name": dc.name, "percent": float(dc.percent)}
            for dc in cart.discount_codes
        ],
        "item_count": cart.item_count,
        "insufficient_stock": has_any_insufficient_stock(cart),
        **totals,
    }
