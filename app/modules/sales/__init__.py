# app/modules/sales/__init__.py
"""
Sales module - sale transaction engine

- Request validation with field-level errors
- Minor-unit (cent) pricing, subtotal, discount and total
- Advisory stock check before the commit
- Atomic commit: locked re-check, sale + items insert, conditional stock decrement
- Sales listing with revenue summary

Architecture:
- router.py: FastAPI endpoints
- service.py: orchestration
- validators.py, money.py, pricing.py, stock.py, transaction.py, formatter.py, summary.py: engine steps
- repository.py: data access
- schemas.py: Pydantic request/response models
"""

from .router import router as sales_router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "sales_router",
    "SalesService",
    "SalesRepository"
]
