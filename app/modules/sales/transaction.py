# app/modules/sales/transaction.py
"""
Atomic sale commit.

``run_in_transaction`` is the unit of work: it acquires a fresh transaction
on the session, runs one operation inside it and either commits or rolls
back everything. ``commit_sale`` is the only writer of Sale, SaleItem and
Stock rows on the sale path.
"""
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import (
    DuplicateReceiptNumberError, SalesError, StockChangedError,
    TransactionAbortedError, TransactionTimeoutError
)
from app.shared.database.models import Sale, SaleItem
from .formatter import format_sale
from .pricing import PricedSale
from .repository import SalesRepository
from .schemas import SaleCreateRequest, SaleResponse
from .stock import cumulative_quantities

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgreSQL SQLSTATEs raised when a statement or idle transaction times out
_PG_TIMEOUT_CODES = {"57014", "25P03"}


def _is_timeout(exc: OperationalError) -> bool:
    if getattr(exc.orig, "pgcode", None) in _PG_TIMEOUT_CODES:
        return True
    # sqlite gives up waiting for the write lock
    return "database is locked" in str(exc.orig)


def _is_receipt_conflict(exc: IntegrityError) -> bool:
    return "receipt_number" in str(exc.orig)


def _apply_statement_timeout(session: Session, timeout: float) -> None:
    if session.get_bind().dialect.name == "postgresql":
        session.execute(text(f"SET LOCAL statement_timeout = {int(timeout * 1000)}"))


def run_in_transaction(
    session: Session,
    operation: Callable[[Session], T],
    timeout: float
) -> T:
    """
    Run ``operation`` in one all-or-nothing transaction bounded by ``timeout``
    seconds.

    Any implicit read transaction left open on the session is discarded
    first, so the operation sees a fresh snapshot. Engine errors raised by
    ``SalesError`` subclasses pass through unchanged; persistence failures are
    translated to TransactionTimeoutError or TransactionAbortedError. Nothing
    is retried.
    """
    if session.in_transaction():
        session.rollback()

    deadline = time.monotonic() + timeout
    transaction = session.begin()

    try:
        _apply_statement_timeout(session, timeout)
        result = operation(session)

        if time.monotonic() > deadline:
            raise TransactionTimeoutError(timeout)

        transaction.commit()
        return result

    except SalesError as e:
        transaction.rollback()
        logger.warning(f"Transaction rolled back: {e.code} - {e.message}")
        raise

    except OperationalError as e:
        transaction.rollback()
        if _is_timeout(e):
            logger.error(f"Transaction exceeded {timeout:g}s and was rolled back")
            raise TransactionTimeoutError(timeout) from e
        logger.exception("Transaction aborted by the database")
        raise TransactionAbortedError() from e

    except SQLAlchemyError as e:
        transaction.rollback()
        logger.exception("Transaction aborted by the database")
        raise TransactionAbortedError() from e

    except Exception:
        transaction.rollback()
        raise


def generate_receipt_number(now: Optional[datetime] = None, prefix: Optional[str] = None) -> str:
    """SAL-20250101123000-1A2B3C4D5E6F style receipt number"""
    now = now or datetime.now(timezone.utc)
    prefix = prefix or settings.receipt_prefix
    return f"{prefix}-{now:%Y%m%d%H%M%S}-{uuid.uuid4().hex[:12].upper()}"


def commit_sale(
    session: Session,
    request: SaleCreateRequest,
    priced: PricedSale,
    timeout: Optional[float] = None,
    now: Optional[datetime] = None
) -> SaleResponse:
    """
    Persist a validated, priced sale and decrement stock atomically.

    1. Re-read stock for every product under row locks and compare it with
       the requested quantities (StockChangedError if the state moved).
    2. Insert the sale with all of its items.
    3. Compare-and-decrement each line's stock (StockChangedError if the
       guard fails).
    4. Commit, or roll back everything on any failure.
    """
    timeout = timeout if timeout is not None else settings.sale_commit_timeout
    created_at = now or datetime.now(timezone.utc)
    receipt_number = request.receipt_number or generate_receipt_number(created_at)

    def operation(db: Session) -> SaleResponse:
        repository = SalesRepository(db)

        # 1. Authoritative re-check
        current = repository.lock_stock_quantities(item.product_id for item in request.items)
        for item, requested in cumulative_quantities(request.items):
            available = current.get(item.product_id)
            if available is None or requested > available:
                raise StockChangedError(item.product_id)

        # 2. Sale and items in one write
        sale = Sale(
            receipt_number=receipt_number,
            user_id=request.user_id,
            payment_method=request.payment_method,
            subtotal=priced.subtotal,
            discount=priced.discount,
            total_amount=priced.total,
            created_at=created_at,
            items=[
                SaleItem(
                    product_id=line.product_id,
                    position=position,
                    quantity=line.quantity,
                    price=line.unit_price,
                    total=line.total
                )
                for position, line in enumerate(priced.lines)
            ]
        )

        try:
            repository.add_sale(sale)
        except IntegrityError as e:
            if _is_receipt_conflict(e):
                raise DuplicateReceiptNumberError(receipt_number) from e
            raise

        # 3. Stock decrements
        for line in priced.lines:
            if not repository.decrement_stock(line.product_id, line.quantity):
                raise StockChangedError(line.product_id)

        return format_sale(sale)

    result = run_in_transaction(session, operation, timeout)
    logger.info(
        f"Sale {result.receipt_number} committed - "
        f"{len(result.items)} items - total {result.total_amount}"
    )
    return result
