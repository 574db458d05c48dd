"""Deterministic half-up rounding for money and reported hours."""

from decimal import Decimal, ROUND_HALF_UP, localcontext
from fractions import Fraction


def exact(value) -> Fraction:
    """
    Exact value of a number; floats are read through their shortest repr.

    15.02 becomes 1502/100, not the binary approximation of 15.02.
    """
    if isinstance(value, float):
        return Fraction(str(value))
    return Fraction(value)


def round_half_up(value, places: int = 2) -> float:
    """Round half away from zero on the exact value, then return the nearest float."""
    value = exact(value)
    with localcontext() as ctx:
        # Wide enough that a terminating half unit is never rounded away
        ctx.prec = 50
        amount = Decimal(value.numerator) / Decimal(value.denominator)
        return float(amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def round2(value) -> float:
    return round_half_up(value, 2)


def round1(value) -> float:
    return round_half_up(value, 1)


def money(*factors) -> float:
    """Product of hours, rates and ratios, rounded to cents once."""
    product = Fraction(1)
    for factor in factors:
        product *= exact(factor)
    return round2(product)
