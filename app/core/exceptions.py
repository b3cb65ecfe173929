"""
Typed errors raised by the sale transaction engine.

Every error carries a machine-readable ``code`` and the HTTP ``status_code``
the API layer answers with, so callers catch by type and never by message.

    SalesError
    |
    +-- ValidationError (400)
    |   +-- MissingFieldError
    |   +-- InvalidEnumError
    |   +-- EmptyItemsError
    |   +-- InvalidItemError
    |   +-- InvalidQuantityError
    |   +-- InvalidPriceError
    |   +-- InvalidDiscountError
    |   +-- DiscountExceedsSubtotalError
    |
    +-- NotFoundError (404)
    |   +-- ProductsNotFoundError
    |
    +-- StockConflictError (400)
    |   +-- InsufficientStockError      advisory check, never had enough
    |   +-- MissingStockRecordError
    |   +-- StockChangedError           lost a race between check and commit
    |
    +-- UniquenessConflictError (500)
    |   +-- DuplicateReceiptNumberError
    |
    +-- TransactionTimeoutError (500)
    |
    +-- InternalError (500)
        +-- TransactionAbortedError
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional


class SalesError(Exception):
    """Base class for all sale engine errors."""

    code: str = "SALES_ERROR"
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


# ==================== VALIDATION ====================

class ValidationError(SalesError):
    """Malformed or out-of-range input; raised before storage is touched."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class MissingFieldError(ValidationError):
    code = "MISSING_FIELD"


class InvalidEnumError(ValidationError):
    code = "INVALID_ENUM"


class EmptyItemsError(ValidationError):
    code = "EMPTY_ITEMS"


class InvalidItemError(ValidationError):
    code = "INVALID_ITEM"


class InvalidQuantityError(ValidationError):
    code = "INVALID_QUANTITY"


class InvalidPriceError(ValidationError):
    code = "INVALID_PRICE"


class InvalidDiscountError(ValidationError):
    code = "INVALID_DISCOUNT"


class DiscountExceedsSubtotalError(ValidationError):
    code = "DISCOUNT_EXCEEDS_SUBTOTAL"

    def __init__(self, discount_minor: int, subtotal_minor: int):
        self.discount_minor = discount_minor
        self.subtotal_minor = subtotal_minor
        super().__init__("Discount cannot exceed subtotal.", field="discount")


# ==================== NOT FOUND ====================

class NotFoundError(SalesError):
    code = "NOT_FOUND"
    status_code = 404


class ProductsNotFoundError(NotFoundError):
    code = "PRODUCTS_NOT_FOUND"

    def __init__(self, missing_ids: List[str]):
        self.missing_ids = list(missing_ids)
        super().__init__(f"Products not found: {', '.join(self.missing_ids)}")


# ==================== STOCK ====================

class StockConflictError(SalesError):
    code = "STOCK_CONFLICT"
    status_code = 400


class InsufficientStockError(StockConflictError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, product_name: str, available: Decimal):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {_format_quantity(available)}"
        )


class MissingStockRecordError(StockConflictError):
    code = "MISSING_STOCK_RECORD"

    def __init__(self, product_id: str, product_name: str):
        self.product_id = product_id
        self.product_name = product_name
        super().__init__(f'Product "{product_name}" has no stock record.')


class StockChangedError(StockConflictError):
    code = "STOCK_CHANGED"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__("Stock levels changed. Please refresh and try again.")


# ==================== PERSISTENCE ====================

class UniquenessConflictError(SalesError):
    code = "UNIQUENESS_CONFLICT"
    status_code = 500


class DuplicateReceiptNumberError(UniquenessConflictError):
    code = "DUPLICATE_RECEIPT_NUMBER"

    def __init__(self, receipt_number: str):
        self.receipt_number = receipt_number
        super().__init__("Receipt number must be unique.")


class TransactionTimeoutError(SalesError):
    code = "TRANSACTION_TIMEOUT"
    status_code = 500

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Sale could not be committed within {timeout:g} seconds.")


class InternalError(SalesError):
    code = "INTERNAL_ERROR"
    status_code = 500


class TransactionAbortedError(InternalError):
    code = "TRANSACTION_ABORTED"

    def __init__(self, message: str = "Unable to create sale."):
        super().__init__(message)


def _format_quantity(value: Decimal) -> str:
    # 5.00 -> "5", 2.50 -> "2.5"
    text = format(value.normalize(), "f") if value == value.to_integral() else format(value, "f").rstrip("0")
    return text
