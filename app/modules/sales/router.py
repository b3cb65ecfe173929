# app/modules/sales/router.py
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session
from typing import Any, Dict

from app.config.database import get_db
from .service import SalesService
from .schemas import SaleCreatedResponse, SalesListResponse

router = APIRouter(prefix="/sales", tags=["Sales"])

# ==================== SALE CREATION ====================

@router.post("", response_model=SaleCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_sale(
    payload: Dict[str, Any] = Body(..., description="userId, paymentMethod, items, discount?, receiptNumber?"),
    db: Session = Depends(get_db)
):
    """
    Record a sale and decrement stock atomically

    Failures:
    - 400: invalid request, invalid price, discount above subtotal, insufficient stock
    - 404: unknown product ids
    - 500: duplicate receipt number, commit timeout, database failure
    """
    service = SalesService(db)
    return service.create_sale(payload)

# ==================== SALES LIST ====================

@router.get("", response_model=SalesListResponse)
def list_sales(db: Session = Depends(get_db)):
    """
    All sales, newest first, with revenue summary and week-over-week changes
    """
    service = SalesService(db)
    return service.list_sales()
