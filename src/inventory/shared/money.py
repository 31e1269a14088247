"""Conversion between decimal money amounts and integer minor units.

Aggregates store money as integer minor units (two decimal places), so
prices, line totals and order totals are computed with integer arithmetic.
"""

from decimal import Decimal, InvalidOperation

MINOR_UNITS = 100
_SCALE = Decimal("0.01")
# precision 19, scale 2
MAX_AMOUNT = Decimal(10) ** 17


def to_minor_units(amount):
    """Convert a decimal amount (``Decimal``, ``int`` or numeric string) to minor units.

    ``None`` passes through. Floats are rejected because they cannot carry an
    exact decimal value, and so are amounts with more than two decimal places.
    """
    if amount is None:
        return None
    if isinstance(amount, float | bool):
        raise ValueError(f"Money amount must be a decimal, got {type(amount).__name__}")

    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Invalid money amount: {amount!r}") from None

    if not value.is_finite():
        raise ValueError(f"Invalid money amount: {amount!r}")
    if abs(value) >= MAX_AMOUNT:
        raise ValueError(f"Money amount {amount} is too large")
    if value != value.quantize(_SCALE):
        raise ValueError(f"Money amount {amount} has more than two decimal places")

    return int(value * MINOR_UNITS)


def from_minor_units(minor):
    """Convert minor units back to a two-place ``Decimal``; ``None`` passes through."""
    if minor is None:
        return None
    return (Decimal(minor) / MINOR_UNITS).quantize(_SCALE)
