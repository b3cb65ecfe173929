# app/modules/sales/repository.py
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy import func, desc, update

from app.shared.database.models import Product, Sale, SaleItem, Stock

class SalesRepository:
    """
    Data access for sale creation and listing
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== PRODUCTS ====================

    def get_products_with_stock(self, product_ids: Iterable[str]) -> List[Product]:
        """
        Fetch the requested products together with their stock row in one query
        """
        ids = list(product_ids)
        if not ids:
            return []

        return self.db.query(Product).options(
            joinedload(Product.stock)
        ).filter(
            Product.id.in_(ids)
        ).all()

    # ==================== STOCK ====================

    def lock_stock_quantities(self, product_ids: Iterable[str]) -> Dict[str, Decimal]:
        """
        Read the current stock quantity of each product inside the open
        transaction, locking the rows until it ends.

        Rows are locked in product id order so concurrent sales touching the
        same products cannot deadlock.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}

        rows = self.db.query(Stock.product_id, Stock.quantity).filter(
            Stock.product_id.in_(ids)
        ).order_by(Stock.product_id).with_for_update().all()

        return {product_id: Decimal(quantity) for product_id, quantity in rows}

    def decrement_stock(self, product_id: str, quantity: Decimal) -> bool:
        """
        Compare-and-decrement: subtract ``quantity`` only if at least that much
        is on hand. Returns False when no row was updated.
        """
        result = self.db.execute(
            update(Stock)
            .where(
                Stock.product_id == product_id,
                Stock.quantity >= quantity
            )
            .values(quantity=func.round(Stock.quantity - quantity, 2))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    # ==================== SALES ====================

    def add_sale(self, sale: Sale) -> Sale:
        """
        Stage a sale with its items and flush so ids and constraint
        violations surface inside the current transaction
        """
        self.db.add(sale)
        self.db.flush()
        return sale

    def get_sales(self) -> List[Sale]:
        """
        All sales with attendant, items and products, newest first
        """
        return self.db.query(Sale).options(
            joinedload(Sale.attendant),
            selectinload(Sale.items).joinedload(SaleItem.product)
        ).order_by(desc(Sale.created_at)).all()

    def aggregate_sales(
        self,
        start: datetime,
        end: Optional[datetime] = None
    ) -> Tuple[Decimal, int]:
        """
        Sum of total_amount and number of sales created in [start, end)
        """
        query = self.db.query(
            func.coalesce(func.sum(Sale.total_amount), 0),
            func.count(Sale.id)
        ).filter(Sale.created_at >= start)

        if end is not None:
            query = query.filter(Sale.created_at < end)

        total, count = query.one()
        return Decimal(str(total)), int(count)
