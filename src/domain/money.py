"""
Money Utilities Module

Cent rounding shared by the payroll calculators.
"""

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """
    Round a monetary amount to cents, half away from zero.

    Uses the shortest repr of the float so that 0.125 rounds to 0.13
    rather than being dragged down by its binary representation.
    """
    if not value:
        return 0.0
    return float(Decimal(repr(float(value))).quantize(CENT, rounding=ROUND_HALF_UP))


def as_amount(value) -> float:
    """
    Coerce an engine input to a non-negative float.

    None, non-numeric, non-finite and negative values become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(Decimal(str(value)))
    except (InvalidOperation, ValueError, TypeError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount
