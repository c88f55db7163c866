"""
Storefront - Shared Helpers
=============================
Pure utility functions with NO remote or module dependencies.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

CENT = Decimal("0.01")


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def safe_int(value: Optional[str]) -> Optional[int]:
    """Safely convert a string to int. Returns None on failure."""
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        return None


def to_decimal(value) -> Decimal:
    """Convert a JSON number (or string) to Decimal without float artefacts."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def round_money(value) -> Decimal:
    """Round a monetary amount to cents (half-up)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value) -> str:
    """Format an amount with two decimals and thousands separators."""
    if value is None:
        return "0.00"
    return "{:,.2f}".format(round_money(value))


def format_order_date(value: Optional[datetime] = None) -> str:
    """
    Order timestamp as expected by the order service:
    UTC, second precision, no timezone offset (e.g. 2026-10-19T14:03:59).
    """
    value = value or now_utc()
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S")


def money_float(value) -> float:
    """Rounded amount as a JSON number."""
    return float(round_money(value))
