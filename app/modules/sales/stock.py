# app/modules/sales/stock.py
"""
Stock arbitration for incoming sales.

The availability check here runs outside the commit transaction and is
advisory only: it rejects requests that could never be satisfied before any
write work starts. The transaction coordinator repeats the check under row
locks and performs a conditional decrement.
"""
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from app.core.exceptions import (
    InsufficientStockError, MissingStockRecordError, ProductsNotFoundError
)
from .repository import SalesRepository
from .schemas import SaleItemRequest


@dataclass(frozen=True)
class ProductSnapshot:
    """Catalog and stock state of one product as read before the commit"""
    id: str
    name: str
    price: Decimal
    available: Optional[Decimal]


def distinct_product_ids(items: Iterable[SaleItemRequest]) -> List[str]:
    """Product ids in first-seen request order, without duplicates"""
    return list(dict.fromkeys(item.product_id for item in items))


def cumulative_quantities(
    items: Iterable[SaleItemRequest]
) -> Iterator[Tuple[SaleItemRequest, Decimal]]:
    """
    Yield each line with the running quantity requested for its product,
    so repeated lines of one product are checked against their sum.
    """
    requested: Dict[str, Decimal] = defaultdict(Decimal)
    for item in items:
        requested[item.product_id] += item.quantity
        yield item, requested[item.product_id]


def load_products(
    repository: SalesRepository,
    items: List[SaleItemRequest]
) -> Dict[str, ProductSnapshot]:
    """
    Fetch every referenced product with its stock in one read.

    Raises ProductsNotFoundError naming exactly the ids that do not exist.
    """
    product_ids = distinct_product_ids(items)
    products = repository.get_products_with_stock(product_ids)

    snapshots = {
        product.id: ProductSnapshot(
            id=product.id,
            name=product.name,
            price=Decimal(product.price),
            available=Decimal(product.stock.quantity) if product.stock is not None else None
        )
        for product in products
    }

    missing = [product_id for product_id in product_ids if product_id not in snapshots]
    if missing:
        raise ProductsNotFoundError(missing)

    return snapshots


def check_availability(
    items: List[SaleItemRequest],
    snapshots: Dict[str, ProductSnapshot]
) -> None:
    """
    Advisory pre-check of requested quantities against the fetched stock.
    """
    for item, requested in cumulative_quantities(items):
        snapshot = snapshots[item.product_id]

        if snapshot.available is None:
            raise MissingStockRecordError(snapshot.id, snapshot.name)

        if requested > snapshot.available:
            raise InsufficientStockError(snapshot.id, snapshot.name, snapshot.available)
