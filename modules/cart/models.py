"""
Cart Module - Models
=====================
Read-only snapshot of the server-side cart: lines, variants, discount codes.
Parsed from the cart service payload; never mutated locally.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from common.helpers import to_decimal, safe_int


@dataclass(frozen=True)
class DiscountCode:
    """A cart-level percentage reduction. Several codes may be stacked."""
    code: str
    percent: Decimal
    id: Optional[int] = None
    name: str = ""
    expiry_date: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DiscountCode":
        return cls(
            code=str(data.get("code") or ""),
            percent=to_decimal(data.get("discount")),
            id=safe_int(data.get("id")),
            name=data.get("name") or "",
            expiry_date=data.get("expiryDate"),
        )


def _find_variant(product_item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """The variant a cart item points at, among all variants of its colour."""
    variant_id = product_item.get("productItemId")
    for variant in product_item.get("productItemOneByColour") or []:
        if variant.get("id") == variant_id:
            return variant
    return None


def _option_value(variant: Dict[str, Any], name: str) -> str:
    for variation in variant.get("variations") or []:
        if variation.get("name") == name:
            options = variation.get("options") or []
            if options:
                return str(options[0].get("value") or "")
    return ""


@dataclass(frozen=True)
class CartLine:
    """One variant plus the requested quantity."""
    variant_id: int
    quantity: int
    unit_price: Decimal
    unit_discount_percent: Decimal = Decimal("0")
    available_stock: int = 0
    product_id: Optional[int] = None
    product_name: str = ""
    colour: str = ""
    size: str = ""
    image_url: str = ""

    def __post_init__(self):
        # A line with zero quantity must be deleted, never kept at 0
        if self.quantity < 1:
            raise ValueError(f"Cart line for variant {self.variant_id} must have quantity >= 1")

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "CartLine":
        product_item = item.get("productItem") or {}
        variant = _find_variant(product_item)
        images = product_item.get("productImages") or []

        # Unknown variant: contributes nothing and counts as out of stock
        if variant is None:
            unit_price, discount, stock, size = Decimal("0"), Decimal("0"), 0, ""
        else:
            unit_price = to_decimal(variant.get("price"))
            discount = to_decimal(variant.get("discount"))
            stock = safe_int(variant.get("qtyInStock")) or 0
            size = _option_value(variant, "size")

        return cls(
            variant_id=safe_int(product_item.get("productItemId")) or 0,
            quantity=safe_int(item.get("qty")) or 0,
            unit_price=unit_price,
            unit_discount_percent=discount,
            available_stock=stock,
            product_id=safe_int(product_item.get("productId")),
            product_name=product_item.get("productName") or "",
            colour=product_item.get("colour") or "",
            size=size,
            image_url=(images[0].get("imageFilename") or "") if images else "",
        )


@dataclass(frozen=True)
class Cart:
    """Aggregate root: ordered lines plus the set of applied discount codes."""
    lines: Tuple[CartLine, ...] = ()
    discount_codes: Tuple[DiscountCode, ...] = ()
    id: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "Cart":
        data = data or {}
        lines = tuple(
            CartLine.from_api(item)
            for item in data.get("shoppingCartItems") or []
            if (safe_int(item.get("qty")) or 0) > 0
        )

        codes = []
        seen = set()
        for entry in data.get("discountCodes") or []:
            code = DiscountCode.from_api(entry)
            if code.code in seen:
                continue
            seen.add(code.code)
            codes.append(code)

        return cls(
            lines=lines,
            discount_codes=tuple(codes),
            id=safe_int(data.get("id")),
            raw=data,
        )

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def line_for(self, variant_id: int) -> Optional[CartLine]:
        return next((line for line in self.lines if line.variant_id == variant_id), None)
