# app/modules/sales/validators.py
"""
Request validation for sale creation.

Works on the raw JSON body so that every rejection carries a specific,
human readable reason (1-indexed item positions) instead of a generic
schema error. Pure: no database access.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from app.core.exceptions import (
    EmptyItemsError, InvalidDiscountError, InvalidEnumError, InvalidItemError,
    InvalidPriceError, InvalidQuantityError, MissingFieldError, ValidationError
)
from app.shared.database.models import PaymentMethod
from .money import MAX_STORED_AMOUNT, quantize_quantity
from .schemas import SaleCreateRequest, SaleItemRequest

_PAYMENT_METHODS = {method.value: method for method in PaymentMethod}


def parse_number(value: Any) -> Optional[Decimal]:
    """
    Parse a JSON number or numeric string into a finite Decimal.

    Returns None for anything that is not a finite number (booleans, NaN,
    infinities, empty strings, objects).
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
    else:
        return None

    try:
        number = Decimal(text)
    except InvalidOperation:
        return None

    return number if number.is_finite() else None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_payment_method(value: Any) -> PaymentMethod:
    """Case-insensitive match against the canonical enum spelling"""
    if isinstance(value, str):
        method = _PAYMENT_METHODS.get(value.strip().upper())
        if method is not None:
            return method
    raise InvalidEnumError("paymentMethod is invalid.", field="paymentMethod")


def validate_item(item: Any, position: int) -> SaleItemRequest:
    if not isinstance(item, Mapping):
        raise InvalidItemError(f"Item at position {position} is invalid.", field=f"items[{position}]")

    product_id = item.get("productId")
    if _is_blank(product_id):
        raise MissingFieldError(f"Item {position} is missing productId.", field=f"items[{position}].productId")

    quantity = parse_number(item.get("quantity"))
    if quantity is None or quantity <= 0:
        raise InvalidQuantityError(
            f"Item {position} quantity must be a positive number.",
            field=f"items[{position}].quantity"
        )
    if quantity > MAX_STORED_AMOUNT:
        raise InvalidQuantityError(
            f"Item {position} quantity is too large.",
            field=f"items[{position}].quantity"
        )
    quantity = quantize_quantity(quantity)
    if quantity <= 0:
        raise InvalidQuantityError(
            f"Item {position} quantity must be at least 0.01.",
            field=f"items[{position}].quantity"
        )

    price_override = None
    if item.get("price") is not None:
        price_override = parse_number(item.get("price"))
        if price_override is None or price_override < 0:
            raise InvalidPriceError(
                f"Item {position} price must be a positive number.",
                field=f"items[{position}].price"
            )
        if price_override > MAX_STORED_AMOUNT:
            raise InvalidPriceError(
                f"Item {position} price is too large.",
                field=f"items[{position}].price"
            )

    return SaleItemRequest(
        product_id=str(product_id).strip(),
        quantity=quantity,
        price_override=price_override
    )


def validate_sale_request(payload: Any) -> SaleCreateRequest:
    """
    Validate a raw sale creation payload.

    Checks run in a fixed order (attendant, payment method, items, each
    item, discount) and the first failure is raised.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object.")

    user_id = payload.get("userId")
    if _is_blank(user_id):
        raise MissingFieldError("userId is required.", field="userId")

    payment_method = validate_payment_method(payload.get("paymentMethod"))

    items = payload.get("items")
    if not isinstance(items, list) or not items:
        raise EmptyItemsError("At least one sale item is required.", field="items")

    validated_items = [
        validate_item(item, position)
        for position, item in enumerate(items, start=1)
    ]

    discount = Decimal("0")
    if payload.get("discount") is not None:
        discount = parse_number(payload.get("discount"))
        if discount is None or discount < 0:
            raise InvalidDiscountError("discount must be a positive number.", field="discount")
        if discount > MAX_STORED_AMOUNT:
            raise InvalidDiscountError("discount is too large.", field="discount")

    receipt_number = payload.get("receiptNumber")
    if isinstance(receipt_number, str) and receipt_number.strip():
        receipt_number = receipt_number.strip()
    else:
        receipt_number = None

    return SaleCreateRequest(
        user_id=str(user_id).strip(),
        payment_method=payment_method,
        items=validated_items,
        discount=discount,
        receipt_number=receipt_number
    )
