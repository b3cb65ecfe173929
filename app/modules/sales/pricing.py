# app/modules/sales/pricing.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List

from app.core.exceptions import DiscountExceedsSubtotalError, InvalidPriceError
from .money import MAX_STORED_AMOUNT, from_minor_units, multiply_minor_units, to_minor_units
from .schemas import SaleCreateRequest
from .stock import ProductSnapshot

MAX_TOTAL_MINOR = to_minor_units(MAX_STORED_AMOUNT)


@dataclass(frozen=True)
class PricedLine:
    product_id: str
    quantity: Decimal
    unit_price_minor: int
    total_minor: int

    @property
    def unit_price(self) -> Decimal:
        return from_minor_units(self.unit_price_minor)

    @property
    def total(self) -> Decimal:
        return from_minor_units(self.total_minor)


@dataclass(frozen=True)
class PricedSale:
    """
    Fully priced sale in minor units.

    ``subtotal_minor`` is the exact sum of the line totals and
    ``total_minor == subtotal_minor - discount_minor``.
    """
    lines: List[PricedLine]
    subtotal_minor: int
    discount_minor: int

    @property
    def total_minor(self) -> int:
        return self.subtotal_minor - self.discount_minor

    @property
    def subtotal(self) -> Decimal:
        return from_minor_units(self.subtotal_minor)

    @property
    def discount(self) -> Decimal:
        return from_minor_units(self.discount_minor)

    @property
    def total(self) -> Decimal:
        return from_minor_units(self.total_minor)


def price_sale(
    request: SaleCreateRequest,
    snapshots: Dict[str, ProductSnapshot]
) -> PricedSale:
    """
    Resolve unit prices (override first, catalog otherwise), compute line
    totals, subtotal and net total.

    Raises InvalidPriceError when a resolved price is not above zero and
    DiscountExceedsSubtotalError when the discount is larger than the subtotal.
    """
    lines = []
    subtotal_minor = 0

    for item in request.items:
        product = snapshots[item.product_id]
        unit_price = item.price_override if item.price_override is not None else product.price

        if not unit_price.is_finite() or unit_price <= 0:
            raise InvalidPriceError(f"Invalid price for {product.name}.")

        unit_price_minor = to_minor_units(unit_price)
        # prices below half a cent round to nothing
        if unit_price_minor <= 0:
            raise InvalidPriceError(f"Invalid price for {product.name}.")

        total_minor = multiply_minor_units(unit_price_minor, item.quantity)
        if total_minor > MAX_TOTAL_MINOR:
            raise InvalidPriceError(f"Line total for {product.name} is too large.")
        subtotal_minor += total_minor

        lines.append(PricedLine(
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price_minor=unit_price_minor,
            total_minor=total_minor
        ))

    if subtotal_minor > MAX_TOTAL_MINOR:
        raise InvalidPriceError("Sale subtotal is too large.")

    discount_minor = to_minor_units(request.discount)
    if discount_minor > subtotal_minor:
        raise DiscountExceedsSubtotalError(discount_minor, subtotal_minor)

    return PricedSale(
        lines=lines,
        subtotal_minor=subtotal_minor,
        discount_minor=discount_minor
    )
