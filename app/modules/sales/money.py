# app/modules/sales/money.py
"""
Currency and quantity normalization.

Prices, line totals, subtotals and discounts are handled as integer minor
units (cents) everywhere between validation and persistence. Decimal values
only appear at the storage and presentation boundary.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

MINOR_UNITS_PER_UNIT = 100
MONEY_QUANT = Decimal("0.01")
QUANTITY_QUANT = Decimal("0.01")
# Largest value a Numeric(10, 2) column holds
MAX_STORED_AMOUNT = Decimal("99999999.99")

Number = Union[Decimal, int, str]


def to_decimal(value: Number) -> Decimal:
    """Convert an int/str/Decimal to Decimal without going through float"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_minor_units(amount: Number) -> int:
    """
    Convert a currency amount to integer minor units.

    Rounds half away from zero at the second decimal place:
    ``0.005 -> 1``, ``-0.005 -> -1``, ``9.99 -> 999``.
    """
    cents = to_decimal(amount) * MINOR_UNITS_PER_UNIT
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(minor: int) -> Decimal:
    """Exact inverse of to_minor_units for integer minor units"""
    return (Decimal(int(minor)) / MINOR_UNITS_PER_UNIT).quantize(MONEY_QUANT)


def multiply_minor_units(unit_minor: int, quantity: Decimal) -> int:
    """Line total in minor units: round(unit price x quantity), half away from zero"""
    return int((Decimal(unit_minor) * quantity).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def quantize_quantity(quantity: Number) -> Decimal:
    """Round a quantity to the two decimal places stock is stored with"""
    return to_decimal(quantity).quantize(QUANTITY_QUANT, rounding=ROUND_HALF_UP)


def normalize_money(amount: Number) -> Decimal:
    """Round-trip a stored amount through minor units (2 dp, exact)"""
    return from_minor_units(to_minor_units(amount))
