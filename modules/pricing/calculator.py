"""
Pricing Module - Calculator
=============================
Pure cart pricing: per-line prices, subtotal, stacked discount codes, totals.

Rules:
  * A variant discount d > 0 gives an effective unit price of price * (1 - d/100).
  * Discount codes are applied against the pre-discount subtotal and their
    amounts are summed: two 10% codes take 20% off, not 19%.
  * Amounts stay unrounded Decimals until display or submission.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Tuple

from common.helpers import round_money, to_decimal
from config.settings import CLAMP_NEGATIVE_TOTALS
from modules.cart.models import Cart, CartLine

HUNDRED = Decimal("100")
ZERO = Decimal("0")


def effective_unit_price(unit_price, discount_percent) -> Decimal:
    """Unit price after the per-variant promotional discount."""
    price = to_decimal(unit_price)
    discount = to_decimal(discount_percent)
    if discount > 0:
        return price * (1 - discount / HUNDRED)
    return price


def line_total(line: CartLine) -> Decimal:
    return effective_unit_price(line.unit_price, line.unit_discount_percent) * line.quantity


@dataclass(frozen=True)
class LinePricing:
    variant_id: int
    quantity: int
    unit_price: Decimal
    effective_unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class PricingResult:
    """Derived values of one cart snapshot. Nothing here is sent back to the cart service."""
    lines: Tuple[LinePricing, ...]
    subtotal: Decimal
    total_discount_percent: Decimal
    total_discount_amount: Decimal
    final_total: Decimal

    def order_total(self, shipping_price=None) -> Decimal:
        """Payable amount of the order: cart total plus the flat shipping fee."""
        return self.final_total + to_decimal(shipping_price)

    def line(self, variant_id: int) -> Optional[LinePricing]:
        return next((lp for lp in self.lines if lp.variant_id == variant_id), None)

    def as_display(self, shipping_price=None) -> dict:
        """Rounded figures for templates and JSON responses."""
        data = {
            "subtotal": round_money(self.subtotal),
            "total_discount_percent": self.total_discount_percent,
            "total_discount_amount": round_money(self.total_discount_amount),
            "final_total": round_money(self.final_total),
        }
        if shipping_price is not None:
            data["shipping_price"] = round_money(shipping_price)
            data["order_total"] = round_money(self.order_total(shipping_price))
        return data


def price_cart(cart: Cart, clamp_at_zero: Optional[bool] = None) -> PricingResult:
    """
    Price a cart snapshot.

    clamp_at_zero: floor the final total at 0 when stacked codes exceed 100%.
                   Defaults to the CLAMP_NEGATIVE_TOTALS setting (off).
    """
    if clamp_at_zero is None:
        clamp_at_zero = CLAMP_NEGATIVE_TOTALS

    lines = []
    subtotal = ZERO
    for line in cart.lines:
        unit = effective_unit_price(line.unit_price, line.unit_discount_percent)
        total = unit * line.quantity
        subtotal += total
        lines.append(LinePricing(
            variant_id=line.variant_id,
            quantity=line.quantity,
            unit_price=line.unit_price,
            effective_unit_price=unit,
            line_total=total,
        ))

    total_percent = sum((code.percent for code in cart.discount_codes), ZERO)
    total_discount = sum((subtotal * (code.percent / HUNDRED) for code in cart.discount_codes), ZERO)

    final_total = subtotal - total_discount
    if clamp_at_zero and final_total < 0:
        final_total = ZERO

    return PricingResult(
        lines=tuple(lines),
        subtotal=subtotal,
        total_discount_percent=total_percent,
        total_discount_amount=total_discount,
        final_total=final_total,
    )


# ==========================================
# Listing prices ("from X, was Y")
# ==========================================

@dataclass(frozen=True)
class ListingPrice:
    from_price: Decimal
    was_price: Optional[Decimal] = None


def listing_price(variants: Sequence[Tuple[object, object]]) -> Optional[ListingPrice]:
    """
    Price label of a grouped product from its variants' (price, discount) pairs.

    "from" is the lowest effective price; "was" is the highest raw price and is
    only shown when at least one variant is discounted.
    """
    if not variants:
        return None
    effective = [effective_unit_price(price, discount) for price, discount in variants]
    raw = [to_decimal(price) for price, _ in variants]
    discounted = any(to_decimal(discount) > 0 for _, discount in variants)
    return ListingPrice(
        from_price=min(effective),
        was_price=max(raw) if discounted else None,
    )


def lowest_shipping_price(methods: Iterable) -> Optional[Decimal]:
    """Cheapest flat shipping fee, for the "Delivery: from X" line."""
    prices = [to_decimal(m.price) for m in methods]
    return min(prices) if prices else None
