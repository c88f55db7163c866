"""
Inventory Module - Stock Validator
====================================
Flags cart lines whose requested quantity exceeds the live stock count,
and decides which quantity controls are available per line.
"""

from typing import Dict, Set

from modules.cart.models import Cart, CartLine


def is_insufficient(line: CartLine) -> bool:
    return line.quantity > line.available_stock


def insufficient_variants(cart: Cart) -> Set[int]:
    """Variant ids whose requested quantity cannot be fulfilled."""
    return {line.variant_id for line in cart.lines if is_insufficient(line)}


def has_any_insufficient_stock(cart: Cart) -> bool:
    """True blocks order submission entirely."""
    return any(is_insufficient(line) for line in cart.lines)


def remaining_headroom(line: CartLine) -> int:
    """Units that can still be added; negative when the line is over stock."""
    return line.available_stock - line.quantity


def can_increment(line: CartLine) -> bool:
    return line.quantity < line.available_stock


def can_decrement(line: CartLine) -> bool:
    # Dropping the last unit is a line deletion, not a decrement
    return line.quantity > 1


def line_controls(cart: Cart) -> Dict[int, dict]:
    """Per-line control state for the cart page."""
    return {
        line.variant_id: {
            "can_increment": can_increment(line),
            "can_decrement": can_decrement(line),
            "headroom": remaining_headroom(line),
            "insufficient": is_insufficient(line),
        }
        for line in cart.lines
    }
