"""
Money helpers.

Amounts are stored as integer minor units (cents) and exchanged with clients
as two-place decimal strings ("31.50"). Arithmetic happens on integers only;
Decimal is used solely at the parsing/formatting boundary.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

# Maximum amount: 9,999,999,999.99 (999,999,999,999 cents)
MAX_AMOUNT_CENTS = 999_999_999_999

_CENT = Decimal("0.01")


def parse_money(value) -> int:
    """
    Convert a client-supplied amount into cents.

    Accepts int, float (via its shortest repr) or numeric string.
    Raises ValueError for booleans, non-numeric input, NaN/Infinity,
    or more than two decimal places.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError("must be a number")

    if isinstance(value, float):
        value = repr(value)
    elif isinstance(value, int):
        return value * 100

    if not isinstance(value, str):
        raise ValueError("must be a number")

    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        raise ValueError("must be a number")

    if not amount.is_finite():
        raise ValueError("must be a finite number")

    try:
        quantized = amount.quantize(_CENT)
    except InvalidOperation:
        raise ValueError("is out of range")

    if amount != quantized:
        raise ValueError("must have at most two decimal places")

    return int(quantized * 100)


def format_cents(cents: int | None) -> str | None:
    """Render cents as a two-place decimal string (3150 -> "31.50")."""
    if cents is None:
        return None
    return str((Decimal(int(cents)) / 100).quantize(_CENT))
