# app/modules/sales/service.py
import logging
from datetime import datetime, timezone
from typing import Any, Optional
from sqlalchemy.orm import Session

from .formatter import format_sale
from .pricing import price_sale
from .repository import SalesRepository
from .schemas import SaleCreatedResponse, SalesListResponse
from .stock import check_availability, load_products
from .summary import PeriodTotals, build_sales_summary, week_windows
from .transaction import commit_sale
from .validators import validate_sale_request

logger = logging.getLogger(__name__)

class SalesService:
    """
    Sale creation and listing
    """

    def __init__(self, db: Session, commit_timeout: Optional[float] = None):
        self.db = db
        self.repository = SalesRepository(db)
        self.commit_timeout = commit_timeout

    # ==================== SALE CREATION ====================

    def create_sale(self, payload: Any, now: Optional[datetime] = None) -> SaleCreatedResponse:
        """
        Validate, price, pre-check stock and commit a sale.

        Validation, pricing and the advisory stock check all fail before any
        transaction is opened; the commit itself re-checks stock under lock.
        """
        # 1. Request shape and field constraints
        request = self._validate(payload)

        # 2. Products and stock, one read
        snapshots = load_products(self.repository, request.items)

        # 3. Prices and totals in minor units
        priced = price_sale(request, snapshots)

        # 4. Advisory stock check
        check_availability(request.items, snapshots)

        # 5. Atomic commit
        sale = commit_sale(
            self.db,
            request,
            priced,
            timeout=self.commit_timeout,
            now=now
        )

        return SaleCreatedResponse(sale=sale)

    def _validate(self, payload: Any):
        request = validate_sale_request(payload)
        logger.debug(
            f"Sale request from {request.user_id}: "
            f"{len(request.items)} items, payment {request.payment_method.value}"
        )
        return request

    # ==================== SALES LIST ====================

    def list_sales(self, now: Optional[datetime] = None) -> SalesListResponse:
        """
        All sales, newest first, with the revenue summary
        """
        now = now or datetime.now(timezone.utc)
        start_current, start_previous = week_windows(now)

        sales = [format_sale(sale) for sale in self.repository.get_sales()]

        current_revenue, current_count = self.repository.aggregate_sales(start_current)
        previous_revenue, previous_count = self.repository.aggregate_sales(
            start_previous, start_current
        )

        summary = build_sales_summary(
            sales,
            current_week=PeriodTotals(revenue=current_revenue, count=current_count),
            previous_week=PeriodTotals(revenue=previous_revenue, count=previous_count),
            now=now
        )

        return SalesListResponse(sales=sales, summary=summary)
