"""Fixed-point currency helpers

Every amount in the engine is a Decimal quantized to the minor currency unit
with round-half-even. This module is the only place that rule is defined.
"""

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_EVEN
from typing import Union

MINOR_UNIT = Decimal("0.01")
ROUNDING = ROUND_HALF_EVEN
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert without rounding; floats go through str so 0.1 stays 0.1"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def quantize(value: Decimal) -> Decimal:
    """Round to the minor unit using the engine-wide rounding rule"""
    return value.quantize(MINOR_UNIT, rounding=ROUNDING)


def to_money(value: Number) -> Decimal:
    return quantize(to_decimal(value))


def round_up(value: Decimal) -> Decimal:
    """Round toward +infinity to the minor unit (used for solved payment amounts)"""
    return value.quantize(MINOR_UNIT, rounding=ROUND_CEILING)


def monthly_interest(balance: Decimal, annual_rate: Decimal) -> Decimal:
    """One month of interest on balance, rounded to the minor unit"""
    return quantize(balance * annual_rate / 12)
